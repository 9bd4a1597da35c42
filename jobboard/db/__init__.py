"""
Database module - MongoDB connection, collections and indexes.
"""
from jobboard.db.mongodb import (
    COLLECTIONS, get_collection, get_mongo_db, init_mongo_indexes, reset_mongo_client,
    test_mongo_connection, to_object_id
)

__all__ = [
    "COLLECTIONS",
    "get_collection",
    "get_mongo_db",
    "init_mongo_indexes",
    "reset_mongo_client",
    "test_mongo_connection",
    "to_object_id",
]
