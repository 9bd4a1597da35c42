"""
Document -> response schema conversion.

Stored documents use snake_case keys and ObjectIds; responses use the pydantic
schemas (camelCase on the wire, string ids). Secrets (password hash, tokens)
never leave this module.
"""

from typing import List, Optional

from jobboard.schemas.schemas import (
    ApplicantSummary, AppliedJobSummary, ApplicationState, JobApplicationEntry,
    JobResponse, MyApplication, PosterSummary, PublicProfile, SalaryRange, UserResponse
)

USER_FIELDS = (
    "name", "email", "role", "major", "graduation_year", "bio", "experience",
    "current_position", "company", "linkedin_profile", "profile_picture",
    "last_active", "created_at", "updated_at",
)

PUBLIC_FIELDS = (
    "name", "role", "major", "graduation_year", "bio", "experience",
    "current_position", "company", "linkedin_profile", "created_at",
)

JOB_FIELDS = (
    "title", "description", "company", "location", "job_type", "experience_level",
    "requirements", "benefits", "application_deadline", "contact_email",
    "application_link", "posted_by_role", "tags", "is_active", "views",
    "created_at", "updated_at",
)


def serialize_user(doc: dict) -> UserResponse:
    data = {field: doc.get(field) for field in USER_FIELDS}
    return UserResponse(
        id=str(doc["_id"]),
        skills=doc.get("skills") or [],
        is_email_verified=bool(doc.get("is_email_verified")),
        **data
    )


def serialize_public_profile(doc: dict) -> PublicProfile:
    data = {field: doc.get(field) for field in PUBLIC_FIELDS}
    return PublicProfile(id=str(doc["_id"]), skills=doc.get("skills") or [], **data)


def serialize_poster(poster_id, poster: Optional[dict]) -> PosterSummary:
    """Poster summary; a missing user still yields the id."""
    poster = poster or {}
    return PosterSummary(
        id=str(poster_id),
        name=poster.get("name"),
        role=poster.get("role"),
        graduation_year=poster.get("graduation_year"),
        major=poster.get("major"),
        company=poster.get("company"),
        current_position=poster.get("current_position"),
    )


def serialize_applicant(user_id, user: Optional[dict]) -> ApplicantSummary:
    user = user or {}
    return ApplicantSummary(
        id=str(user_id),
        name=user.get("name"),
        email=user.get("email"),
        role=user.get("role"),
        graduation_year=user.get("graduation_year"),
        major=user.get("major"),
    )


def serialize_job(
    doc: dict,
    poster: Optional[dict] = None,
    application_count: int = 0,
    applications: Optional[List[JobApplicationEntry]] = None,
) -> JobResponse:
    data = {field: doc.get(field) for field in JOB_FIELDS}
    salary = doc.get("salary_range")
    return JobResponse(
        id=str(doc["_id"]),
        skills=doc.get("skills") or [],
        salary_range=SalaryRange(**salary) if salary else None,
        posted_by=serialize_poster(doc["posted_by"], poster),
        application_count=application_count,
        applications=applications,
        **data
    )


def serialize_job_application(app_doc: dict, applicant: Optional[dict]) -> JobApplicationEntry:
    return JobApplicationEntry(
        user=serialize_applicant(app_doc["user_id"], applicant),
        applied_at=app_doc["applied_at"],
        status=app_doc["status"],
    )


def serialize_my_application(app_doc: dict, job: dict, poster: Optional[dict]) -> MyApplication:
    return MyApplication(
        job=AppliedJobSummary(
            id=str(job["_id"]),
            title=job["title"],
            company=job["company"],
            location=job["location"],
            job_type=job["job_type"],
            posted_by=serialize_poster(job["posted_by"], poster),
        ),
        application=ApplicationState(applied_at=app_doc["applied_at"], status=app_doc["status"]),
    )
