"""
User Routes

GET /users/profile/{user_id} - Public profile with posting stats
PUT /users/profile - Update own profile
GET /users/my-jobs - Jobs I posted, with applicants
POST /users/apply/{job_id} - Apply to a job
GET /users/my-applications - My applications on active jobs
PUT /users/application-status/{job_id}/{user_id} - Set an applicant's status (poster only)
"""

from fastapi import APIRouter, Depends

from jobboard.core.auth import get_current_user
from jobboard.services.application_service import ApplicationService, get_application_service
from jobboard.services.job_service import JobService, get_job_service
from jobboard.services.serializers import serialize_public_profile, serialize_user
from jobboard.services.user_service import UserService, get_user_service
from jobboard.schemas.schemas import (
    ApplicationStatusUpdate, MessageResponse, MyApplicationsResponse, MyJobsResponse,
    ProfileStats, ProfileUpdate, PublicProfileResponse, UserEnvelope
)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/profile/{user_id}", response_model=PublicProfileResponse)
async def get_public_profile(
    user_id: str,
    user: dict = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
    jobs: JobService = Depends(get_job_service),
):
    """Public profile fields only; no email or account data."""
    profile = users.get_or_404(user_id)
    return PublicProfileResponse(
        user=serialize_public_profile(profile),
        stats=ProfileStats(jobs_posted=jobs.count_active_by(profile["_id"])),
    )


@router.put("/profile", response_model=UserEnvelope)
async def update_profile(
    data: ProfileUpdate,
    user: dict = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    """Same behavior as PUT /auth/profile."""
    updated = users.update_profile(user, data)
    return UserEnvelope(message="Profile updated successfully", user=serialize_user(updated))


@router.get("/my-jobs", response_model=MyJobsResponse)
async def my_jobs(user: dict = Depends(get_current_user), jobs: JobService = Depends(get_job_service)):
    """All postings by the caller, including deactivated ones."""
    return MyJobsResponse(jobs=jobs.jobs_for_owner(user))


@router.post("/apply/{job_id}", response_model=MessageResponse, status_code=201)
async def apply_to_job(
    job_id: str,
    user: dict = Depends(get_current_user),
    applications: ApplicationService = Depends(get_application_service),
):
    """Apply to a job. One application per job; closed or inactive jobs are rejected."""
    applications.apply(job_id, user)
    return MessageResponse(message="Application submitted successfully")


@router.get("/my-applications", response_model=MyApplicationsResponse)
async def my_applications(user: dict = Depends(get_current_user), jobs: JobService = Depends(get_job_service)):
    return MyApplicationsResponse(applications=jobs.applications_of(user))


@router.put("/application-status/{job_id}/{user_id}", response_model=MessageResponse)
async def update_application_status(
    job_id: str,
    user_id: str,
    update: ApplicationStatusUpdate,
    user: dict = Depends(get_current_user),
    applications: ApplicationService = Depends(get_application_service),
):
    """Set the status of one applicant's application. Any status may follow any other."""
    applications.update_status(job_id, user_id, user, update.status.value)
    return MessageResponse(message="Application status updated successfully")
