"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from jobboard.api.routes.auth_routes import router as auth_router
from jobboard.api.routes.job_routes import router as job_router
from jobboard.api.routes.user_routes import router as user_router
from jobboard.schemas.schemas import ErrorResponse

# Error bodies shared by every route, documented in OpenAPI
ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Validation failed or conflict"},
    401: {"model": ErrorResponse, "description": "Missing/invalid token or bad credentials"},
    403: {"model": ErrorResponse, "description": "Not the owner"},
    404: {"model": ErrorResponse, "description": "Not found"},
}

# Main API router
api_router = APIRouter(responses=ERROR_RESPONSES)

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(job_router)
api_router.include_router(user_router)
