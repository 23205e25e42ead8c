"""
Database module - MongoDB connection.
"""
from careercatalyst.db.mongodb import get_mongo_db, test_mongo_connection

__all__ = [
    "get_mongo_db",
    "test_mongo_connection"
]
