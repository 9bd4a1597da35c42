"""
Custom Exception Hierarchy
Domain-level exceptions raised by services and translated at the route boundary
"""
from typing import List, NamedTuple, Optional


class FieldError(NamedTuple):
    field: str
    message: str


class DomainException(Exception):
    """Base exception for all domain errors"""
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class AuthenticationException(DomainException):
    """Missing/invalid token or bad credentials"""
    status_code = 401


class AuthorizationException(DomainException):
    """User not authorized for this operation"""
    status_code = 403


class ValidationException(DomainException):
    """Data validation failed"""
    status_code = 400

    def __init__(self, errors: List[FieldError], message: Optional[str] = None):
        self.errors = list(errors)
        if message is None:
            message = self.errors[0].message if len(self.errors) == 1 else "Validation failed"
        super().__init__(message)

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationException":
        return cls([FieldError(field, message)])


class ResourceNotFoundException(DomainException):
    """Requested resource not found (or soft-deleted)"""
    status_code = 404

    def __init__(self, resource_type: str, identifier: Optional[str] = None):
        self.resource_type = resource_type
        self.identifier = identifier
        super().__init__(f"{resource_type} not found")


class DuplicateResourceException(DomainException):
    """Resource already exists"""
    status_code = 400
