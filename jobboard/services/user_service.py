"""
User Service - accounts, credentials and profiles.

Every write re-runs validate_user_document on the full record, so a user that
violates the email policy (or any other field rule) is never stored no matter
which route produced it.
"""

import secrets
from typing import Optional

from bson import ObjectId
from loguru import logger
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from jobboard.core.auth import hash_password, verify_password
from jobboard.core.config import get_settings
from jobboard.core.exceptions import (
    AuthenticationException, DuplicateResourceException, ResourceNotFoundException,
    ValidationException
)
from jobboard.db.mongodb import COLLECTIONS, get_collection, to_object_id
from jobboard.schemas.schemas import ProfileUpdate, RegisterRequest
from jobboard.services.validators import normalize_email, utcnow, validate_user_document


class UserService:

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["users"])
        self.college_domain = get_settings().college_email_domain

    def _validate(self, doc: dict) -> None:
        errors = validate_user_document(doc, self.college_domain)
        if errors:
            raise ValidationException(errors)

    def register(self, request: RegisterRequest) -> dict:
        """
        Create a user account.

        The plaintext password is validated with the rest of the document and
        hashed only after validation passes. A duplicate email surfaces from
        the unique index, not from a prior lookup.
        """
        now = utcnow()
        role = request.role.value
        doc = {
            "name": request.name,
            "email": normalize_email(request.email),
            "password": request.password,
            "role": role,
            "major": request.major,
            "graduation_year": request.graduation_year if role == "alumni" else None,
            "bio": request.bio,
            "skills": [],
            "experience": "0-1",
            "current_position": None,
            "company": None,
            "linkedin_profile": None,
            "profile_picture": None,
            "is_email_verified": False,
            "email_verification_token": secrets.token_hex(32),
            "password_reset_token": None,
            "password_reset_expires": None,
            "last_active": now,
            "created_at": now,
            "updated_at": now,
        }
        self._validate(doc)
        doc["password"] = hash_password(request.password)

        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise DuplicateResourceException("User already exists with this email")

        doc["_id"] = result.inserted_id
        logger.info(f"Registered {role} account {doc['_id']}")
        return doc

    def authenticate(self, email: str, password: str) -> dict:
        """Check credentials and refresh lastActive."""
        user = self.collection.find_one({"email": normalize_email(email)})
        if not user or not verify_password(password, user["password"]):
            logger.warning("Rejected login attempt")
            raise AuthenticationException("Invalid credentials")

        return self.collection.find_one_and_update(
            {"_id": user["_id"]},
            {"$set": {"last_active": utcnow()}},
            return_document=ReturnDocument.AFTER,
        )

    def get_by_id(self, user_id) -> Optional[dict]:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return self.collection.find_one({"_id": oid})

    def get_or_404(self, user_id) -> dict:
        user = self.get_by_id(user_id)
        if not user:
            raise ResourceNotFoundException("User", str(user_id))
        return user

    def update_profile(self, user: dict, update: ProfileUpdate) -> dict:
        changes = update.model_dump(exclude_unset=True)
        if "experience" in changes and changes["experience"] is not None:
            changes["experience"] = changes["experience"].value
        if user["role"] != "alumni":
            # graduation year is only tracked for alumni
            changes.pop("graduation_year", None)

        merged = {**user, **changes}
        self._validate(merged)

        changes["updated_at"] = utcnow()
        updated = self.collection.find_one_and_update(
            {"_id": user["_id"]},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        logger.info(f"Profile updated for user {user['_id']}: {sorted(changes)}")
        return updated

    def change_password(self, user: dict, current_password: str, new_password: str) -> None:
        if not verify_password(current_password, user["password"]):
            raise ValidationException.single("currentPassword", "Current password is incorrect")

        self.collection.update_one(
            {"_id": user["_id"]},
            {"$set": {"password": hash_password(new_password), "updated_at": utcnow()}},
        )
        logger.info(f"Password changed for user {user['_id']}")

    def get_many(self, user_ids) -> dict:
        """Fetch users by id, keyed by ObjectId."""
        ids = list({uid for uid in user_ids if isinstance(uid, ObjectId)})
        if not ids:
            return {}
        return {doc["_id"]: doc for doc in self.collection.find({"_id": {"$in": ids}})}


def get_user_service() -> UserService:
    return UserService()
