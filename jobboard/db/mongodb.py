"""
MongoDB Connection Utility

Collections:
- users: accounts (students and alumni)
- jobs: job postings
- applications: one document per (job, applicant) pair

Uniqueness that must hold under concurrent requests (user email, one
application per job and applicant) is enforced by unique indexes, so inserts
either succeed or raise DuplicateKeyError.
"""
from typing import Optional

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, TEXT, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from loguru import logger

from jobboard.core.config import get_settings

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(get_settings().mongodb_uri, tz_aware=False)
    return _client


def get_mongo_db() -> Database:
    """Get the job board database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[get_settings().mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    return get_mongo_db()[name]


def reset_mongo_client(client: MongoClient = None) -> None:
    """Drop the cached client/database, optionally installing a replacement client."""
    global _client, _db
    _client = client
    _db = None


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        get_mongo_client().admin.command('ping')
        return True
    except Exception as e:
        logger.warning(f"MongoDB connection failed: {e}")
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
    "jobs": "jobs",
    "applications": "applications",
}


def ensure_user_indexes(db: Database) -> None:
    db[COLLECTIONS["users"]].create_index("email", unique=True)


def ensure_job_indexes(db: Database) -> None:
    jobs = db[COLLECTIONS["jobs"]]
    jobs.create_index(
        [("title", TEXT), ("description", TEXT), ("company", TEXT), ("tags", TEXT)],
        name="job_text_search",
    )
    jobs.create_index("posted_by")
    jobs.create_index([("created_at", DESCENDING)])
    jobs.create_index("application_deadline")


def ensure_application_indexes(db: Database) -> None:
    applications = db[COLLECTIONS["applications"]]
    # Composite key: one application per job and applicant
    applications.create_index(
        [("job_id", ASCENDING), ("user_id", ASCENDING)],
        unique=True,
        name="job_user_unique",
    )
    applications.create_index([("user_id", ASCENDING), ("applied_at", DESCENDING)])


def init_mongo_indexes():
    """
    Create indexes for query performance and uniqueness.
    Call this once during app startup.
    """
    db = get_mongo_db()
    ensure_user_indexes(db)
    ensure_job_indexes(db)
    ensure_application_indexes(db)
    logger.info("MongoDB indexes created successfully")


def to_object_id(value) -> Optional[ObjectId]:
    """Parse an id from a path/token; None when it is not a valid ObjectId."""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None
