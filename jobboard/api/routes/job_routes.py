"""
Job Routes

GET /jobs - List active jobs with filters, search and pagination
POST /jobs - Create job posting
GET /jobs/{job_id} - Get job details (counts a view)
PUT /jobs/{job_id} - Update job (poster only)
DELETE /jobs/{job_id} - Deactivate job (poster only)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from jobboard.core.auth import get_current_user
from jobboard.services.job_service import JobService, get_job_service
from jobboard.schemas.schemas import (
    ExperienceLevel, JobCreate, JobEnvelope, JobListResponse, JobType, JobUpdate,
    MessageResponse, UserRole
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.get("", response_model=JobListResponse)
async def list_jobs(
    page: int = Query(1),
    limit: int = Query(10, description="Clamped to 1-50"),
    search: Optional[str] = Query(None, description="Full-text search over title, description, company and tags"),
    job_type: Optional[JobType] = Query(None, alias="jobType"),
    experience_level: Optional[ExperienceLevel] = Query(None, alias="experienceLevel"),
    posted_by_role: Optional[UserRole] = Query(None, alias="postedByRole"),
    user: dict = Depends(get_current_user),
    jobs: JobService = Depends(get_job_service),
):
    """List active job postings, newest first (or by relevance when searching)."""
    return jobs.list_jobs(
        page=page,
        limit=limit,
        search=search,
        job_type=job_type.value if job_type else None,
        experience_level=experience_level.value if experience_level else None,
        posted_by_role=posted_by_role.value if posted_by_role else None,
    )


@router.post("", response_model=JobEnvelope, status_code=201)
async def create_job(
    data: JobCreate,
    user: dict = Depends(get_current_user),
    jobs: JobService = Depends(get_job_service),
):
    """Create a new job posting owned by the caller."""
    return JobEnvelope(message="Job posted successfully", job=jobs.create_job(user, data))


@router.get("/{job_id}", response_model=JobEnvelope)
async def get_job(
    job_id: str,
    user: dict = Depends(get_current_user),
    jobs: JobService = Depends(get_job_service),
):
    """Get details of an active job. Applicants are listed only for the poster."""
    return JobEnvelope(job=jobs.view_job(job_id, user))


@router.put("/{job_id}", response_model=JobEnvelope)
async def update_job(
    job_id: str,
    data: JobUpdate,
    user: dict = Depends(get_current_user),
    jobs: JobService = Depends(get_job_service),
):
    """Update a job posting. Only the poster can update."""
    return JobEnvelope(message="Job updated successfully", job=jobs.update_job(job_id, user, data))


@router.delete("/{job_id}", response_model=MessageResponse)
async def delete_job(
    job_id: str,
    user: dict = Depends(get_current_user),
    jobs: JobService = Depends(get_job_service),
):
    """Soft delete: the posting is hidden from listings but kept in storage."""
    jobs.deactivate_job(job_id, user)
    return MessageResponse(message="Job deleted successfully")
