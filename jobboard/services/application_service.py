"""
Application Service - one application per (job, applicant).

Applications live in their own collection keyed by a unique (job_id, user_id)
index. Submitting is a single insert: the index rejects a second application
for the same pair even when two requests race, so there is no
read-then-write window.

Status is one of pending / reviewed / accepted / rejected. The job owner may
set any status at any time; reopening an accepted or rejected application is
allowed.
"""

from typing import Dict, Iterable, List

from bson import ObjectId
from loguru import logger
from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from jobboard.core.exceptions import (
    AuthorizationException, DuplicateResourceException, ResourceNotFoundException,
    ValidationException
)
from jobboard.db.mongodb import COLLECTIONS, get_collection, to_object_id
from jobboard.services.validators import utcnow

RECENT_FIRST = [("applied_at", DESCENDING), ("_id", DESCENDING)]


class ApplicationService:

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["applications"])
        self.jobs: Collection = get_collection(COLLECTIONS["jobs"])

    def apply(self, job_id, user: dict) -> dict:
        """
        Submit an application for `user`.

        Rejects inactive/missing jobs (404), elapsed deadlines (400) and a
        second application for the same job (400, via the unique index).
        """
        oid = to_object_id(job_id)
        job = self.jobs.find_one({"_id": oid}) if oid else None
        if not job or not job.get("is_active"):
            raise ResourceNotFoundException("Job", str(job_id))

        now = utcnow()
        deadline = job.get("application_deadline")
        if deadline is not None and now > deadline:
            raise ValidationException.single("applicationDeadline", "Application deadline has passed")

        doc = {
            "job_id": job["_id"],
            "user_id": user["_id"],
            "applied_at": now,
            "status": "pending",
        }
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise DuplicateResourceException("You have already applied for this job")

        doc["_id"] = result.inserted_id
        logger.info(f"User {user['_id']} applied to job {job['_id']}")
        return doc

    def update_status(self, job_id, applicant_id, owner: dict, status: str) -> dict:
        """Owner-only status change on the (job, applicant) record."""
        oid = to_object_id(job_id)
        job = self.jobs.find_one({"_id": oid}) if oid else None
        if not job:
            raise ResourceNotFoundException("Job", str(job_id))
        if job["posted_by"] != owner["_id"]:
            raise AuthorizationException("Not authorized to update application status")

        applicant_oid = to_object_id(applicant_id)
        if applicant_oid is None:
            raise ResourceNotFoundException("Application")

        result = self.collection.update_one(
            {"job_id": job["_id"], "user_id": applicant_oid},
            {"$set": {"status": status, "updated_at": utcnow()}},
        )
        if result.matched_count == 0:
            raise ResourceNotFoundException("Application")

        logger.info(f"Application ({job['_id']}, {applicant_oid}) set to {status}")
        return self.collection.find_one({"job_id": job["_id"], "user_id": applicant_oid})

    def for_job(self, job_id: ObjectId) -> List[dict]:
        return list(self.collection.find({"job_id": job_id}).sort(RECENT_FIRST))

    def for_jobs(self, job_ids: Iterable[ObjectId]) -> Dict[ObjectId, List[dict]]:
        grouped = {}
        ids = list(job_ids)
        if not ids:
            return grouped
        cursor = self.collection.find({"job_id": {"$in": ids}}).sort(RECENT_FIRST)
        for doc in cursor:
            grouped.setdefault(doc["job_id"], []).append(doc)
        return grouped

    def for_user(self, user_id: ObjectId) -> List[dict]:
        return list(self.collection.find({"user_id": user_id}).sort(RECENT_FIRST))

    def count_by_job(self, job_ids: Iterable[ObjectId]) -> Dict[ObjectId, int]:
        ids = list(job_ids)
        if not ids:
            return {}
        pipeline = [
            {"$match": {"job_id": {"$in": ids}}},
            {"$group": {"_id": "$job_id", "count": {"$sum": 1}}},
        ]
        return {row["_id"]: row["count"] for row in self.collection.aggregate(pipeline)}


def get_application_service() -> ApplicationService:
    return ApplicationService()
