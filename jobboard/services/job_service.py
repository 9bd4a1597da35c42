"""
Job Service - postings, listing/search and ownership rules.

Only active postings are listed or readable by id. "Deleting" a posting flips
is_active to False; there is no way back through the API. Only the poster
(posted_by) may change or deactivate a posting.
"""

import math
from typing import List, Optional, Tuple

from bson import ObjectId
from loguru import logger
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection

from jobboard.core.exceptions import AuthorizationException, ResourceNotFoundException, ValidationException
from jobboard.db.mongodb import COLLECTIONS, get_collection, to_object_id
from jobboard.schemas.schemas import (
    JobCreate, JobListResponse, JobResponse, JobUpdate, MyApplication, Pagination
)
from jobboard.services.application_service import ApplicationService
from jobboard.services.serializers import serialize_job, serialize_job_application, serialize_my_application
from jobboard.services.user_service import UserService
from jobboard.services.validators import derive_tags, utcnow, validate_job_document

DEFAULT_LIMIT = 10
MAX_LIMIT = 50

TAG_SOURCES = {"title", "company", "skills"}
NEWEST_FIRST = [("created_at", DESCENDING), ("_id", DESCENDING)]


# ============================================================
# QUERY HELPERS (pure)
# ============================================================

def clamp_page(page: Optional[int]) -> int:
    return max(1, page or 1)


def clamp_limit(limit: Optional[int]) -> int:
    if limit is None:
        return DEFAULT_LIMIT
    return min(MAX_LIMIT, max(1, limit))


def build_job_query(
    job_type: Optional[str] = None,
    experience_level: Optional[str] = None,
    posted_by_role: Optional[str] = None,
    search: Optional[str] = None,
) -> Tuple[dict, list, Optional[dict]]:
    """
    Build (filter, sort, projection) for the job listing.

    Unset filters add no constraint. A search term switches to $text search
    ranked by relevance, then recency.
    """
    query = {"is_active": True}
    if job_type:
        query["job_type"] = job_type
    if experience_level:
        query["experience_level"] = experience_level
    if posted_by_role:
        query["posted_by_role"] = posted_by_role

    search = (search or "").strip()
    if search:
        query["$text"] = {"$search": search}
        sort = [("score", {"$meta": "textScore"}), ("created_at", DESCENDING)]
        projection = {"score": {"$meta": "textScore"}}
        return query, sort, projection

    return query, NEWEST_FIRST, None


def paginate(total: int, page: int, limit: int) -> Pagination:
    pages = math.ceil(total / limit) if total else 0
    return Pagination(
        current=page,
        pages=pages,
        total=total,
        has_next=page < pages,
        has_prev=page > 1,
    )


# ============================================================
# SERVICE
# ============================================================

class JobService:

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["jobs"])
        self.users = UserService()
        self.applications = ApplicationService()

    def _validate(self, doc: dict, check_deadline: bool) -> None:
        errors = validate_job_document(doc, check_deadline=check_deadline)
        if errors:
            raise ValidationException(errors)

    def _get_or_404(self, job_id, active_only: bool = False) -> dict:
        oid = to_object_id(job_id)
        job = self.collection.find_one({"_id": oid}) if oid else None
        if not job or (active_only and not job.get("is_active")):
            raise ResourceNotFoundException("Job", str(job_id))
        return job

    def _ensure_owner(self, job: dict, user: dict, action: str) -> None:
        if job["posted_by"] != user["_id"]:
            raise AuthorizationException(f"Not authorized to {action} this job")

    def _serialize_many(self, jobs: List[dict], with_applications: bool = False) -> List[JobResponse]:
        job_ids = [job["_id"] for job in jobs]
        posters = self.users.get_many(job["posted_by"] for job in jobs)

        if not with_applications:
            counts = self.applications.count_by_job(job_ids)
            return [
                serialize_job(job, posters.get(job["posted_by"]), counts.get(job["_id"], 0))
                for job in jobs
            ]

        grouped = self.applications.for_jobs(job_ids)
        applicants = self.users.get_many(a["user_id"] for apps in grouped.values() for a in apps)
        result = []
        for job in jobs:
            apps = grouped.get(job["_id"], [])
            entries = [serialize_job_application(a, applicants.get(a["user_id"])) for a in apps]
            result.append(serialize_job(job, posters.get(job["posted_by"]), len(apps), entries))
        return result

    def list_jobs(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        search: Optional[str] = None,
        job_type: Optional[str] = None,
        experience_level: Optional[str] = None,
        posted_by_role: Optional[str] = None,
    ) -> JobListResponse:
        page, limit = clamp_page(page), clamp_limit(limit)
        query, sort, projection = build_job_query(job_type, experience_level, posted_by_role, search)

        total = self.collection.count_documents(query)
        cursor = self.collection.find(query, projection).sort(sort).skip((page - 1) * limit).limit(limit)
        jobs = list(cursor)

        return JobListResponse(jobs=self._serialize_many(jobs), pagination=paginate(total, page, limit))

    def create_job(self, user: dict, data: JobCreate) -> JobResponse:
        now = utcnow()
        doc = data.model_dump()
        doc["job_type"] = data.job_type.value
        doc["experience_level"] = data.experience_level.value
        doc.update({
            "tags": derive_tags(data.title, data.company, data.skills),
            "posted_by": user["_id"],
            "posted_by_role": user["role"],
            "is_active": True,
            "views": 0,
            "created_at": now,
            "updated_at": now,
        })
        self._validate(doc, check_deadline=True)

        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info(f"Job {doc['_id']} posted by {user['_id']}")
        return serialize_job(doc, user)

    def view_job(self, job_id, viewer: dict) -> JobResponse:
        """
        Read an active job and count the view.

        The increment is a single $inc so concurrent reads do not lose
        updates. Applicant details are only shown to the owner.
        """
        oid = to_object_id(job_id)
        job = None
        if oid is not None:
            job = self.collection.find_one_and_update(
                {"_id": oid, "is_active": True},
                {"$inc": {"views": 1}},
                return_document=ReturnDocument.AFTER,
            )
        if not job:
            raise ResourceNotFoundException("Job", str(job_id))

        poster = self.users.get_by_id(job["posted_by"])
        apps = self.applications.for_job(job["_id"])
        entries = None
        if job["posted_by"] == viewer["_id"]:
            applicants = self.users.get_many(a["user_id"] for a in apps)
            entries = [serialize_job_application(a, applicants.get(a["user_id"])) for a in apps]
        return serialize_job(job, poster, len(apps), entries)

    def update_job(self, job_id, user: dict, data: JobUpdate) -> JobResponse:
        job = self._get_or_404(job_id, active_only=True)
        self._ensure_owner(job, user, "update")

        changes = data.model_dump(exclude_unset=True)
        # explicit nulls on required fields fall through to validation below
        for key in ("job_type", "experience_level"):
            if changes.get(key) is not None:
                changes[key] = changes[key].value
        for key in ("skills", "requirements", "benefits"):
            if key in changes and changes[key] is None:
                changes[key] = []

        merged = {**job, **changes}
        if TAG_SOURCES & changes.keys():
            changes["tags"] = merged["tags"] = derive_tags(
                merged.get("title") or "", merged.get("company") or "", merged.get("skills")
            )
        self._validate(merged, check_deadline="application_deadline" in changes)

        changes["updated_at"] = utcnow()
        updated = self.collection.find_one_and_update(
            {"_id": job["_id"]},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        logger.info(f"Job {job['_id']} updated: {sorted(changes)}")
        return self._serialize_many([updated])[0]

    def deactivate_job(self, job_id, user: dict) -> None:
        """Soft delete; repeating it on an inactive job is a no-op success."""
        job = self._get_or_404(job_id)
        self._ensure_owner(job, user, "delete")

        self.collection.update_one(
            {"_id": job["_id"]},
            {"$set": {"is_active": False, "updated_at": utcnow()}},
        )
        logger.info(f"Job {job['_id']} deactivated by {user['_id']}")

    def jobs_for_owner(self, user: dict) -> List[JobResponse]:
        jobs = list(self.collection.find({"posted_by": user["_id"]}).sort(NEWEST_FIRST))
        return self._serialize_many(jobs, with_applications=True)

    def count_active_by(self, user_id: ObjectId) -> int:
        return self.collection.count_documents({"posted_by": user_id, "is_active": True})

    def applications_of(self, user: dict) -> List[MyApplication]:
        """The user's applications on still-active jobs, most recent first."""
        apps = self.applications.for_user(user["_id"])
        jobs = {
            doc["_id"]: doc
            for doc in self.collection.find({"_id": {"$in": [a["job_id"] for a in apps]}, "is_active": True})
        }
        posters = self.users.get_many(job["posted_by"] for job in jobs.values())
        return [
            serialize_my_application(app, jobs[app["job_id"]], posters.get(jobs[app["job_id"]]["posted_by"]))
            for app in apps
            if app["job_id"] in jobs
        ]


def get_job_service() -> JobService:
    return JobService()
