"""
MongoDB Connection Utility

MongoDB stores:
- User identity records (email, password hash, account type)
- One role profile per user, in the collection matching its account type
  (students, freshers, experienced)

Generated recommendations, analyses and roadmaps are never stored.
"""
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from pymongo.errors import PyMongoError
from loguru import logger

from careercatalyst.core.config import get_settings
from careercatalyst.schemas.schemas import UserType

settings = get_settings()

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """Get the application database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """Get a specific collection (see COLLECTIONS)."""
    db = get_mongo_db()
    return db[name]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except PyMongoError as e:
        logger.error(f"MongoDB connection failed: {e}")
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
    "students": "students",
    "freshers": "freshers",
    "experienced": "experienced",
}

# Role profile collection per account type
PROFILE_COLLECTIONS = {
    UserType.student: COLLECTIONS["students"],
    UserType.fresher: COLLECTIONS["freshers"],
    UserType.experienced: COLLECTIONS["experienced"],
}


def init_mongo_indexes():
    """
    Create indexes backing the uniqueness rules.
    Call this once during app startup.
    """
    db = get_mongo_db()

    # One account per email
    db[COLLECTIONS["users"]].create_index([("email", ASCENDING)], unique=True)

    # At most one role profile per user
    for collection_name in PROFILE_COLLECTIONS.values():
        db[collection_name].create_index([("userId", ASCENDING)], unique=True)

    logger.info("MongoDB indexes created successfully")
