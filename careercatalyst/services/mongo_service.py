"""
MongoDB Service - CRUD operations for document collections.

Collections in this database:
1. users        - Identity records (email, password hash, account type)
2. students     - Student role profiles
3. freshers     - Fresher role profiles
4. experienced  - Experienced role profiles

Each role profile holds a back-reference (userId) to exactly one user.
Writes are last-write-wins; there is no optimistic concurrency check.
"""

from datetime import datetime, timezone
from typing import Optional, List, Dict, Any
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from careercatalyst.core.errors import DuplicateError, NotFoundError
from careercatalyst.db.mongodb import get_collection, COLLECTIONS, PROFILE_COLLECTIONS
from careercatalyst.schemas.schemas import LearningStatus, UserType


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Parse an id coming from a token or URL; None if malformed."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


# ============================================================
# HELPER: Convert ObjectId to string for JSON serialization
# ============================================================

def serialize_doc(doc: dict) -> dict:
    """Convert MongoDB document to JSON-serializable dict."""
    if doc is None:
        return None
    if "_id" in doc:
        doc["_id"] = str(doc["_id"])
    if "userId" in doc:
        doc["userId"] = str(doc["userId"])
    return doc


def serialize_user(doc: dict) -> dict:
    """Public view of a user record (never includes the password hash)."""
    return {
        "id": str(doc["_id"]),
        "name": doc.get("name", ""),
        "email": doc["email"],
        "userType": doc["userType"],
        "isProfileComplete": bool(doc.get("isProfileComplete", False)),
        "skills": doc.get("skills") or [],
        "createdAt": doc.get("createdAt"),
    }


# ============================================================
# USERS COLLECTION
# ============================================================

class UserService:
    """
    Handles identity records.
    Email is unique (enforced by index); account type never changes.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["users"])

    def get_by_id(self, user_id: str) -> Optional[dict]:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return self.collection.find_one({"_id": oid})

    def get_by_email(self, email: str) -> Optional[dict]:
        return self.collection.find_one({"email": email})

    def create(self, name: str, email: str, password_hash: str, user_type: UserType) -> str:
        """
        Insert a new user.

        Returns:
            MongoDB ObjectId as string

        Raises:
            DuplicateError if the email is already registered
        """
        if self.get_by_email(email):
            raise DuplicateError("Email already registered")

        doc = {
            "name": name,
            "email": email,
            "password": password_hash,
            "userType": user_type.value,
            "isProfileComplete": False,
            "skills": [],
            "createdAt": utcnow(),
        }
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            # lost a race with a concurrent registration
            raise DuplicateError("Email already registered")
        return str(result.inserted_id)

    def delete(self, user_id: str) -> bool:
        result = self.collection.delete_one({"_id": to_object_id(user_id)})
        return result.deleted_count > 0

    def set_profile_complete(self, user_id: str, is_complete: bool) -> bool:
        result = self.collection.update_one(
            {"_id": to_object_id(user_id)},
            {"$set": {"isProfileComplete": is_complete}}
        )
        return result.modified_count > 0

    def update_skills(self, user_id: str, skills: List[str]) -> Optional[dict]:
        """Legacy flat skills list (Student accounts)."""
        return self.collection.find_one_and_update(
            {"_id": to_object_id(user_id)},
            {"$set": {"skills": skills}},
            return_document=ReturnDocument.AFTER
        )


# ============================================================
# ROLE PROFILE COLLECTIONS
# One class serves all three account types; the collection is
# chosen by UserType.
# ============================================================

class RoleProfileService:
    """
    Handles role profile storage for one account type.
    Profiles are upserted by userId (at most one per user).
    """

    def __init__(self, user_type: UserType):
        self.user_type = user_type
        self.collection: Collection = get_collection(PROFILE_COLLECTIONS[user_type])

    def get(self, user_id: str) -> Optional[dict]:
        return self.collection.find_one({"userId": to_object_id(user_id)})

    def get_or_404(self, user_id: str) -> dict:
        doc = self.get(user_id)
        if doc is None:
            raise NotFoundError(f"{self.user_type.value} profile not found")
        return doc

    def create_empty(self, user_id: str) -> str:
        """Seed an empty profile (used at registration)."""
        now = utcnow()
        doc = {"userId": to_object_id(user_id), "skills": [], "createdAt": now, "updatedAt": now}
        if self.user_type in (UserType.student, UserType.fresher):
            doc["savedProfiles"] = []
        if self.user_type == UserType.student:
            doc["learningProgress"] = []
        result = self.collection.insert_one(doc)
        return str(result.inserted_id)

    def upsert(self, user_id: str, fields: Dict[str, Any]) -> dict:
        """
        Create or update the profile with the given (camelCase) fields.

        Returns:
            The stored document after the write
        """
        now = utcnow()
        on_insert = {"createdAt": now}
        if self.user_type in (UserType.student, UserType.fresher):
            on_insert["savedProfiles"] = []
        if self.user_type == UserType.student:
            on_insert["learningProgress"] = []
        for key in fields:
            on_insert.pop(key, None)

        return self.collection.find_one_and_update(
            {"userId": to_object_id(user_id)},
            {"$set": {**fields, "updatedAt": now}, "$setOnInsert": on_insert},
            upsert=True,
            return_document=ReturnDocument.AFTER
        )

    # --------------------------------------------------------
    # Saved profiles (Student / Fresher)
    # --------------------------------------------------------

    def list_saved_profiles(self, user_id: str) -> List[dict]:
        """Saved profiles in insertion order."""
        doc = self.get_or_404(user_id)
        return doc.get("savedProfiles") or []

    def add_saved_profile(self, user_id: str, entry: Dict[str, Any]) -> dict:
        """
        Append a saved profile.

        Raises:
            DuplicateError if profileUrl is already in the list (list unchanged)
        """
        saved = self.list_saved_profiles(user_id)
        if any(p.get("profileUrl") == entry["profileUrl"] for p in saved):
            raise DuplicateError("Profile already saved")

        entry = {**entry, "savedAt": utcnow()}
        self.collection.update_one(
            {"userId": to_object_id(user_id)},
            {"$push": {"savedProfiles": entry}, "$set": {"updatedAt": utcnow()}}
        )
        return entry

    def remove_saved_profile(self, user_id: str, profile_url: str) -> List[dict]:
        """Remove by profileUrl. Removing an unknown URL is a no-op."""
        saved = self.list_saved_profiles(user_id)
        remaining = [p for p in saved if p.get("profileUrl") != profile_url]
        if len(remaining) != len(saved):
            self.collection.update_one(
                {"userId": to_object_id(user_id)},
                {"$set": {"savedProfiles": remaining, "updatedAt": utcnow()}}
            )
        return remaining

    # --------------------------------------------------------
    # Learning progress (Student)
    # --------------------------------------------------------

    def list_learning_progress(self, user_id: str) -> List[dict]:
        doc = self.get_or_404(user_id)
        return doc.get("learningProgress") or []

    def update_learning_progress(self, user_id: str, skill: str, status: LearningStatus) -> dict:
        """
        Set the status of one skill, creating the entry if needed.

        startedAt is stamped the first time a skill leaves Not Started;
        completedAt is stamped on Completed and cleared otherwise.
        """
        progress = self.list_learning_progress(user_id)
        now = utcnow()

        entry = next((p for p in progress if p["skill"].lower() == skill.lower()), None)
        if entry is None:
            entry = {"skill": skill, "status": status.value, "startedAt": None, "completedAt": None}
            progress.append(entry)

        entry["status"] = status.value
        entry["updatedAt"] = now
        if status != LearningStatus.not_started and not entry.get("startedAt"):
            entry["startedAt"] = now
        entry["completedAt"] = now if status == LearningStatus.completed else None

        self.collection.update_one(
            {"userId": to_object_id(user_id)},
            {"$set": {"learningProgress": progress, "updatedAt": now}}
        )
        return entry
