"""
Campus Job Board - Main Application

FastAPI backend with:
- MongoDB for users, job postings and applications
- JWT authentication (students and alumni)
- Role-gated registration (students need the college email domain)

Run: uvicorn jobboard.main:app --reload
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from jobboard.api.routes import api_router
from jobboard.core.config import get_settings
from jobboard.core.errors import register_exception_handlers
from jobboard.core.logging_config import configure_logging
from jobboard.db.mongodb import init_mongo_indexes, test_mongo_connection

settings = get_settings()
configure_logging()

# Create FastAPI app
app = FastAPI(
    title="Campus Job Board",
    description="""
    A college job board for students and alumni.

    ## Features
    - **Authentication**: JWT-based auth; students register with the college email domain
    - **Jobs**: Post, search, filter and paginate job listings; soft delete by the poster
    - **Applications**: One application per job, status tracked by the poster
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routes
app.include_router(api_router, prefix="/api")


# Startup event
@app.on_event("startup")
async def startup_event():
    """
    Initialize MongoDB indexes on startup.

    Unique emails and one application per job and applicant are enforced only
    by these indexes, so the app refuses to start without them.
    """
    try:
        init_mongo_indexes()
    except Exception as e:
        logger.critical(f"MongoDB index initialization failed: {e}")
        raise


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
