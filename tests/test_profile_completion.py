import pytest
from pymongo.errors import ServerSelectionTimeoutError

from careercatalyst.schemas.schemas import UserType
from careercatalyst.services import profile_completion
from careercatalyst.services.mongo_service import RoleProfileService, UserService
from careercatalyst.services.profile_completion import (
    evaluate_profile_completion, reconcile_profile_completion
)

EXPERIENCED_FULL = {
    "skills": ["Java"],
    "reasonForSwitch": "Growth",
    "salaryPreferences": 100000,
    "experienceYears": 6,
    "workMode": "remote",
}


def user_doc(user_type, **extra):
    return {"_id": "507f1f77bcf86cd799439011", "userType": user_type, **extra}


@pytest.mark.parametrize("profile,expected", [
    (None, False),
    ({"skills": []}, False),
    ({"skills": ["Python"]}, True),
])
def test_student_rule(profile, expected):
    assert evaluate_profile_completion(user_doc("Student"), profile) is expected


def test_student_legacy_skills_count_without_profile():
    assert evaluate_profile_completion(user_doc("Student", skills=["SQL"]), None) is True
    assert evaluate_profile_completion(user_doc("Student", skills=["SQL"]), {"skills": []}) is False


def test_fresher_rule_is_existence():
    assert evaluate_profile_completion(user_doc("Fresher"), None) is False
    assert evaluate_profile_completion(user_doc("Fresher"), {}) is True


@pytest.mark.parametrize("missing", ["skills", "reasonForSwitch", "salaryPreferences", "experienceYears", "workMode"])
def test_experienced_rule_needs_every_field(missing):
    profile = {k: v for k, v in EXPERIENCED_FULL.items() if k != missing}
    assert evaluate_profile_completion(user_doc("Experienced"), profile) is False


def test_experienced_rule_complete_and_blank_text():
    assert evaluate_profile_completion(user_doc("Experienced"), EXPERIENCED_FULL) is True
    blank = {**EXPERIENCED_FULL, "reasonForSwitch": "   "}
    assert evaluate_profile_completion(user_doc("Experienced"), blank) is False


def test_experienced_zero_years_counts_as_set():
    profile = {**EXPERIENCED_FULL, "experienceYears": 0}
    assert evaluate_profile_completion(user_doc("Experienced"), profile) is True


def test_reconcile_persists_only_on_change(mongo):
    users = UserService()
    user_id = users.create("Fay", "fay@example.com", "hash", UserType.fresher)

    first = reconcile_profile_completion(users.get_by_id(user_id))
    assert first.is_profile_complete is False
    assert first.changed is False

    RoleProfileService(UserType.fresher).upsert(user_id, {"skills": ["Go"]})
    second = reconcile_profile_completion(users.get_by_id(user_id))
    assert second.is_profile_complete is True
    assert second.changed is True
    assert users.get_by_id(user_id)["isProfileComplete"] is True

    third = reconcile_profile_completion(users.get_by_id(user_id))
    assert third.changed is False


def test_reconcile_store_failure_returns_stored_flag(mongo, monkeypatch):
    users = UserService()
    user_id = users.create("Gus", "gus@example.com", "hash", UserType.student)
    user = users.get_by_id(user_id)

    def unavailable(self, user_id):
        raise ServerSelectionTimeoutError("no servers")

    monkeypatch.setattr(profile_completion.RoleProfileService, "get", unavailable)

    check = reconcile_profile_completion(user)
    assert check.is_profile_complete is False
    assert check.changed is False
    assert "no servers" in check.error
