"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
JSON uses camelCase (jobType, salaryRange, ...); Python attributes stay snake_case.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator
from pydantic.alias_generators import to_camel

from jobboard.core.config import get_settings
from jobboard.services import validators


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _check(result: validators.ValidationResult):
    if not result.ok:
        raise ValueError(result.message)


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    alumni = "alumni"


class ExperienceRange(str, Enum):
    junior = "0-1"
    early = "1-3"
    mid = "3-5"
    senior = "5-10"
    veteran = "10+"


class JobType(str, Enum):
    full_time = "full-time"
    part_time = "part-time"
    internship = "internship"
    contract = "contract"
    remote = "remote"


class ExperienceLevel(str, Enum):
    entry = "entry"
    mid = "mid"
    senior = "senior"
    executive = "executive"


class ApplicationStatus(str, Enum):
    pending = "pending"
    reviewed = "reviewed"
    accepted = "accepted"
    rejected = "rejected"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(CamelModel):
    # role comes first so the email/graduationYear validators can see it
    role: UserRole
    name: str = Field(..., min_length=2, max_length=50)
    email: str
    password: str = Field(..., min_length=6)
    major: str = Field(..., min_length=2)
    # validated even when omitted: alumni must supply it
    graduation_year: Optional[int] = Field(None, validate_default=True)
    bio: Optional[str] = Field(None, max_length=500)

    @field_validator("name", "major", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def check_email_policy(cls, email: str, info: ValidationInfo) -> str:
        role = info.data.get("role")
        if role is None:
            # role itself failed validation; only check syntax
            if not validators.is_valid_email(validators.normalize_email(email)):
                raise ValueError("Please enter a valid email address")
        else:
            _check(validators.validate_email_for_role(email, role.value, get_settings().college_email_domain))
        return validators.normalize_email(email)

    @field_validator("graduation_year")
    @classmethod
    def check_graduation_year(cls, year: Optional[int], info: ValidationInfo) -> Optional[int]:
        role = info.data.get("role")
        if role is not None:
            _check(validators.validate_graduation_year(year, role.value))
        return year


class LoginRequest(CamelModel):
    # same syntax rule as registration, so every stored address can log in
    email: str
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def check_email(cls, email: str) -> str:
        email = validators.normalize_email(email)
        if not validators.is_valid_email(email):
            raise ValueError("Please enter a valid email address")
        return email


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)


class ProfileUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=50)
    major: Optional[str] = Field(None, min_length=2)
    graduation_year: Optional[int] = None
    bio: Optional[str] = Field(None, max_length=500)
    skills: Optional[List[str]] = None
    experience: Optional[ExperienceRange] = None
    current_position: Optional[str] = None
    company: Optional[str] = None
    linkedin_profile: Optional[str] = None

    @field_validator("name", "major", "current_position", "company", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("skills")
    @classmethod
    def check_skills(cls, skills: Optional[List[str]]) -> Optional[List[str]]:
        if skills is None:
            return None
        skills = validators.normalize_skills(skills)
        _check(validators.validate_skills(skills))
        return skills

    @field_validator("linkedin_profile")
    @classmethod
    def check_linkedin(cls, url: Optional[str]) -> Optional[str]:
        _check(validators.validate_linkedin_profile(url))
        return url


class UserResponse(CamelModel):
    id: str
    name: str
    email: str
    role: str
    major: Optional[str] = None
    graduation_year: Optional[int] = None
    bio: Optional[str] = None
    skills: List[str] = []
    experience: Optional[str] = None
    current_position: Optional[str] = None
    company: Optional[str] = None
    linkedin_profile: Optional[str] = None
    profile_picture: Optional[str] = None
    is_email_verified: bool = False
    last_active: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AuthResponse(CamelModel):
    message: str
    token: str
    user: UserResponse


class UserEnvelope(CamelModel):
    message: Optional[str] = None
    user: UserResponse


class PublicProfile(CamelModel):
    id: str
    name: str
    role: str
    major: Optional[str] = None
    graduation_year: Optional[int] = None
    bio: Optional[str] = None
    skills: List[str] = []
    experience: Optional[str] = None
    current_position: Optional[str] = None
    company: Optional[str] = None
    linkedin_profile: Optional[str] = None
    created_at: Optional[datetime] = None


class ProfileStats(CamelModel):
    jobs_posted: int


class PublicProfileResponse(CamelModel):
    user: PublicProfile
    stats: ProfileStats


# ============================================================
# JOB SCHEMAS
# ============================================================

class SalaryRange(CamelModel):
    min: Optional[float] = Field(None, ge=0)
    max: Optional[float] = Field(None, ge=0)
    currency: str = "USD"

    @model_validator(mode="after")
    def check_bounds(self):
        _check(validators.validate_salary_range(self.min, self.max))
        return self


class JobFields(CamelModel):
    """Shared field rules for create and update payloads."""

    @field_validator("title", "description", "company", "location", mode="before", check_fields=False)
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("skills", "requirements", "benefits", check_fields=False)
    @classmethod
    def clean_lists(cls, values):
        return None if values is None else validators.clean_string_list(values)

    @field_validator("application_deadline", check_fields=False)
    @classmethod
    def check_deadline(cls, deadline: Optional[datetime]) -> Optional[datetime]:
        _check(validators.validate_application_deadline(deadline))
        return validators.to_naive_utc(deadline)

    @field_validator("contact_email", check_fields=False)
    @classmethod
    def check_contact_email(cls, email: Optional[str]) -> Optional[str]:
        if email is not None:
            _check(validators.validate_contact_email(email))
        return email

    @field_validator("application_link", check_fields=False)
    @classmethod
    def check_application_link(cls, url: Optional[str]) -> Optional[str]:
        _check(validators.validate_application_link(url))
        return url


class JobCreate(JobFields):
    title: str = Field(..., min_length=5, max_length=100)
    description: str = Field(..., min_length=50, max_length=2000)
    company: str = Field(..., min_length=2, max_length=100)
    location: str = Field(..., min_length=2)
    job_type: JobType
    experience_level: ExperienceLevel = ExperienceLevel.entry
    salary_range: Optional[SalaryRange] = None
    skills: List[str] = []
    requirements: List[str] = []
    benefits: List[str] = []
    application_deadline: Optional[datetime] = None
    contact_email: str
    application_link: Optional[str] = None


class JobUpdate(JobFields):
    """Owner-editable fields. isActive, postedBy, views and tags are not among them."""
    title: Optional[str] = Field(None, min_length=5, max_length=100)
    description: Optional[str] = Field(None, min_length=50, max_length=2000)
    company: Optional[str] = Field(None, min_length=2, max_length=100)
    location: Optional[str] = Field(None, min_length=2)
    job_type: Optional[JobType] = None
    experience_level: Optional[ExperienceLevel] = None
    salary_range: Optional[SalaryRange] = None
    skills: Optional[List[str]] = None
    requirements: Optional[List[str]] = None
    benefits: Optional[List[str]] = None
    application_deadline: Optional[datetime] = None
    contact_email: Optional[str] = None
    application_link: Optional[str] = None


class PosterSummary(CamelModel):
    id: str
    name: Optional[str] = None
    role: Optional[str] = None
    graduation_year: Optional[int] = None
    major: Optional[str] = None
    company: Optional[str] = None
    current_position: Optional[str] = None


class ApplicantSummary(CamelModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    graduation_year: Optional[int] = None
    major: Optional[str] = None


class JobApplicationEntry(CamelModel):
    user: ApplicantSummary
    applied_at: datetime
    status: ApplicationStatus


class JobResponse(CamelModel):
    id: str
    title: str
    description: str
    company: str
    location: str
    job_type: JobType
    experience_level: ExperienceLevel
    salary_range: Optional[SalaryRange] = None
    skills: List[str] = []
    requirements: List[str] = []
    benefits: List[str] = []
    application_deadline: Optional[datetime] = None
    contact_email: str
    application_link: Optional[str] = None
    posted_by: PosterSummary
    posted_by_role: UserRole
    tags: List[str] = []
    is_active: bool
    views: int = 0
    application_count: int = 0
    applications: Optional[List[JobApplicationEntry]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Pagination(CamelModel):
    current: int
    pages: int
    total: int
    has_next: bool
    has_prev: bool


class JobListResponse(CamelModel):
    jobs: List[JobResponse]
    pagination: Pagination


class JobEnvelope(CamelModel):
    message: Optional[str] = None
    job: JobResponse


class MyJobsResponse(CamelModel):
    jobs: List[JobResponse]


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationStatusUpdate(CamelModel):
    status: ApplicationStatus


class AppliedJobSummary(CamelModel):
    id: str
    title: str
    company: str
    location: str
    job_type: JobType
    posted_by: PosterSummary


class ApplicationState(CamelModel):
    applied_at: datetime
    status: ApplicationStatus


class MyApplication(CamelModel):
    job: AppliedJobSummary
    application: ApplicationState


class MyApplicationsResponse(CamelModel):
    applications: List[MyApplication]


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(CamelModel):
    message: str


class FieldErrorResponse(CamelModel):
    field: str
    message: str


class ErrorResponse(CamelModel):
    message: str
    errors: Optional[List[FieldErrorResponse]] = None
