"""
Exception handlers - translate every failure into the JSON error contract:

    {"message": "...", "errors": [{"field": "...", "message": "..."}]}

`errors` is present only for validation failures. Pydantic request errors and
service-level ValidationExceptions produce the same shape.
"""

from typing import List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from jobboard.core.exceptions import DomainException, FieldError, ValidationException

LOCATION_PREFIXES = {"body", "query", "path", "header"}
VALUE_ERROR_PREFIX = "Value error, "


def _error_body(message: str, errors: List[FieldError] = None) -> dict:
    body = {"message": message}
    if errors is not None:
        body["errors"] = [{"field": e.field, "message": e.message} for e in errors]
    return body


def request_errors_to_field_errors(raw_errors) -> List[FieldError]:
    """Convert pydantic error dicts into FieldErrors."""
    result = []
    for err in raw_errors:
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] in LOCATION_PREFIXES:
            loc = loc[1:]
        msg = err.get("msg", "Invalid value")
        if msg.startswith(VALUE_ERROR_PREFIX):
            msg = msg[len(VALUE_ERROR_PREFIX):]
        result.append(FieldError(".".join(loc) or "body", msg))
    return result


async def domain_exception_handler(request: Request, exc: DomainException):
    errors = exc.errors if isinstance(exc, ValidationException) else None
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, errors))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = request_errors_to_field_errors(exc.errors())
    message = errors[0].message if len(errors) == 1 else "Validation failed"
    return JSONResponse(status_code=400, content=_error_body(message, errors))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content=_error_body("Internal server error"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
