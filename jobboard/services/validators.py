"""
Validation rules for users and jobs.

Every rule is a pure function returning a ValidationResult (ok + message), so
it can be unit-tested without a database. The same rules run twice:

- in the pydantic request schemas (early rejection at the API boundary)
- in the services right before a document is written (persistence boundary)

`validate_user_document` / `validate_job_document` bundle the per-field rules
and return a list of FieldErrors; an empty list means the document may be
stored.
"""

import re
from datetime import datetime, timezone
from typing import Iterable, List, NamedTuple, Optional

from jobboard.core.exceptions import FieldError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
LINKEDIN_RE = re.compile(r"^https://www\.linkedin\.com/in/[a-zA-Z0-9-]+/?$")
URL_RE = re.compile(r"^https?://.+")

ROLES = ("student", "alumni")
EXPERIENCE_BUCKETS = ("0-1", "1-3", "3-5", "5-10", "10+")
JOB_TYPES = ("full-time", "part-time", "internship", "contract", "remote")
EXPERIENCE_LEVELS = ("entry", "mid", "senior", "executive")
APPLICATION_STATUSES = ("pending", "reviewed", "accepted", "rejected")

MAX_SKILLS = 20
GRADUATION_YEAR_SPAN = 50


class ValidationResult(NamedTuple):
    ok: bool
    message: Optional[str] = None


ACCEPT = ValidationResult(True)


def reject(message: str) -> ValidationResult:
    return ValidationResult(False, message)


# ============================================================
# TIME HELPERS
# Mongo stores naive UTC datetimes; keep everything in that form.
# ============================================================

def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


# ============================================================
# USER RULES
# ============================================================

def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_valid_email(email: Optional[str]) -> bool:
    return bool(email) and bool(EMAIL_RE.match(email))


def college_email_suffix(college_domain: str) -> str:
    """'cmrec.ac.in' and '@CMREC.ac.in' both become '@cmrec.ac.in'."""
    domain = college_domain.strip().lower()
    return domain if domain.startswith("@") else "@" + domain


def validate_email_for_role(email: Optional[str], role: Optional[str], college_domain: str) -> ValidationResult:
    """
    Role-conditioned email policy.

    Students need an address ending in the institutional domain; alumni may use
    any syntactically valid address.
    """
    email = normalize_email(email or "")
    if role == "student":
        domain = college_email_suffix(college_domain)
        if is_valid_email(email) and email.endswith(domain):
            return ACCEPT
        return reject(f"Students must use a valid {domain} email address")
    if not is_valid_email(email):
        return reject("Please enter a valid email address")
    return ACCEPT


def validate_graduation_year(year: Optional[int], role: Optional[str], current_year: Optional[int] = None) -> ValidationResult:
    if role != "alumni":
        return ACCEPT
    if year is None:
        return reject("Graduation year is required for alumni")
    current_year = current_year or utcnow().year
    if not (current_year - GRADUATION_YEAR_SPAN <= year <= current_year):
        return reject("Please provide a valid graduation year")
    return ACCEPT


def normalize_skills(skills: Optional[Iterable[str]]) -> List[str]:
    """Trim, drop empties and de-duplicate, keeping the first occurrence."""
    seen = set()
    result = []
    for skill in skills or []:
        skill = (skill or "").strip()
        if skill and skill not in seen:
            seen.add(skill)
            result.append(skill)
    return result


def validate_skills(skills: Optional[List[str]]) -> ValidationResult:
    if skills is not None and len(skills) > MAX_SKILLS:
        return reject(f"Cannot have more than {MAX_SKILLS} skills")
    return ACCEPT


def validate_linkedin_profile(url: Optional[str]) -> ValidationResult:
    if not url or LINKEDIN_RE.match(url):
        return ACCEPT
    return reject("Please provide a valid LinkedIn profile URL")


def validate_user_document(doc: dict, college_domain: str, current_year: Optional[int] = None) -> List[FieldError]:
    """Check a user document (snake_case keys) before it is stored."""
    errors = []
    role = doc.get("role")

    name = doc.get("name") or ""
    if not 2 <= len(name) <= 50:
        errors.append(FieldError("name", "Name must be between 2-50 characters"))
    if role not in ROLES:
        errors.append(FieldError("role", "Role must be either student or alumni"))

    result = validate_email_for_role(doc.get("email"), role, college_domain)
    if not result.ok:
        errors.append(FieldError("email", result.message))

    if not doc.get("password"):
        errors.append(FieldError("password", "Password is required"))
    if len((doc.get("major") or "").strip()) < 2:
        errors.append(FieldError("major", "Major is required"))

    result = validate_graduation_year(doc.get("graduation_year"), role, current_year)
    if not result.ok:
        errors.append(FieldError("graduationYear", result.message))

    if len(doc.get("bio") or "") > 500:
        errors.append(FieldError("bio", "Bio cannot exceed 500 characters"))

    result = validate_skills(doc.get("skills"))
    if not result.ok:
        errors.append(FieldError("skills", result.message))

    if doc.get("experience") not in EXPERIENCE_BUCKETS:
        errors.append(FieldError("experience", "Invalid experience range"))

    result = validate_linkedin_profile(doc.get("linkedin_profile"))
    if not result.ok:
        errors.append(FieldError("linkedinProfile", result.message))

    return errors


# ============================================================
# JOB RULES
# ============================================================

def validate_salary_range(salary_min: Optional[float], salary_max: Optional[float]) -> ValidationResult:
    if salary_min is not None and salary_min < 0:
        return reject("Minimum salary cannot be negative")
    if salary_max is not None and salary_max < 0:
        return reject("Maximum salary cannot be negative")
    if salary_min is not None and salary_max is not None and salary_max < salary_min:
        return reject("Maximum salary must be greater than minimum salary")
    return ACCEPT


def validate_application_deadline(deadline: Optional[datetime], now: Optional[datetime] = None) -> ValidationResult:
    if deadline is None:
        return ACCEPT
    now = now or utcnow()
    if to_naive_utc(deadline) <= now:
        return reject("Application deadline must be in the future")
    return ACCEPT


def validate_contact_email(email: Optional[str]) -> ValidationResult:
    if is_valid_email(email):
        return ACCEPT
    return reject("Please provide a valid contact email")


def validate_application_link(url: Optional[str]) -> ValidationResult:
    if not url or URL_RE.match(url):
        return ACCEPT
    return reject("Please provide a valid application URL")


def clean_string_list(values: Optional[Iterable[str]]) -> List[str]:
    return [v.strip() for v in values or [] if v and v.strip()]


def derive_tags(title: str, company: str, skills: Optional[Iterable[str]]) -> List[str]:
    """Search tags: title words, company name and skills, lowercased and de-duplicated."""
    candidates = title.lower().split() + [company.strip().lower()]
    candidates += [skill.strip().lower() for skill in skills or []]
    seen = set()
    tags = []
    for tag in candidates:
        if tag and tag not in seen:
            seen.add(tag)
            tags.append(tag)
    return tags


def _length_error(field: str, label: str, value: Optional[str], low: int, high: Optional[int] = None) -> Optional[FieldError]:
    length = len((value or "").strip())
    if length < low or (high is not None and length > high):
        if high is None:
            return FieldError(field, f"{label} is required")
        return FieldError(field, f"{label} must be {low}-{high} characters")
    return None


def validate_job_document(doc: dict, check_deadline: bool = True, now: Optional[datetime] = None) -> List[FieldError]:
    """
    Check a job document (snake_case keys) before it is stored.

    The deadline must be in the future only when it is being set, so updates
    that leave an elapsed deadline untouched pass with check_deadline=False.
    """
    errors = [
        e for e in (
            _length_error("title", "Job title", doc.get("title"), 5, 100),
            _length_error("description", "Job description", doc.get("description"), 50, 2000),
            _length_error("company", "Company name", doc.get("company"), 2, 100),
            _length_error("location", "Location", doc.get("location"), 2),
        ) if e is not None
    ]

    if doc.get("job_type") not in JOB_TYPES:
        errors.append(FieldError("jobType", "Invalid job type"))
    if doc.get("experience_level") not in EXPERIENCE_LEVELS:
        errors.append(FieldError("experienceLevel", "Invalid experience level"))

    salary = doc.get("salary_range") or {}
    result = validate_salary_range(salary.get("min"), salary.get("max"))
    if not result.ok:
        errors.append(FieldError("salaryRange", result.message))

    if check_deadline:
        result = validate_application_deadline(doc.get("application_deadline"), now)
        if not result.ok:
            errors.append(FieldError("applicationDeadline", result.message))

    result = validate_contact_email(doc.get("contact_email"))
    if not result.ok:
        errors.append(FieldError("contactEmail", result.message))

    result = validate_application_link(doc.get("application_link"))
    if not result.ok:
        errors.append(FieldError("applicationLink", result.message))

    if doc.get("posted_by_role") not in ROLES:
        errors.append(FieldError("postedByRole", "Poster role must be either student or alumni"))

    return errors
