from careercatalyst.core.auth import create_access_token, decode_token

from conftest import register_and_login


def test_register_and_login(client):
    headers, user = register_and_login(client, "Student")

    assert user["email"] == "student@example.com"
    assert user["userType"] == "Student"
    assert user["isProfileComplete"] is False
    assert "password" not in user
    assert headers["Authorization"].startswith("Bearer ")


def test_token_carries_id_and_user_type(client):
    response = client.post("/api/auth/register", json={
        "name": "Ana", "email": "ana@example.com", "password": "pw", "userType": "Fresher"
    })
    assert response.status_code == 201

    body = client.post("/api/auth/login", json={"email": "ana@example.com", "password": "pw"}).json()
    claims = decode_token(body["token"])
    assert claims["id"] == body["user"]["id"]
    assert claims["userType"] == "Fresher"
    assert "exp" in claims


def test_duplicate_email_rejected(client, mongo):
    register_and_login(client, "Fresher", email="dup@example.com")

    response = client.post("/api/auth/register", json={
        "name": "Other", "email": "dup@example.com", "password": "x", "userType": "Student"
    })

    assert response.status_code == 400
    assert response.json() == {"message": "Email already registered"}
    assert mongo.users.count_documents({"email": "dup@example.com"}) == 1


def test_register_missing_fields(client):
    response = client.post("/api/auth/register", json={"email": "a@example.com", "password": "x"})
    assert response.status_code == 400
    assert "message" in response.json()


def test_register_unknown_user_type(client):
    response = client.post("/api/auth/register", json={
        "name": "X", "email": "x@example.com", "password": "x", "userType": "Recruiter"
    })
    assert response.status_code == 400


def test_login_bad_credentials(client):
    register_and_login(client, "Student")

    wrong_password = client.post("/api/auth/login", json={"email": "student@example.com", "password": "nope"})
    unknown_email = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "nope"})

    assert wrong_password.status_code == 400
    assert wrong_password.json() == {"message": "Invalid credentials"}
    assert unknown_email.status_code == 400


def test_experienced_profile_seeded_on_register(client, mongo):
    _, user = register_and_login(client, "Experienced")

    profile = mongo.experienced.find_one({})
    assert profile is not None
    assert str(profile["userId"]) == user["id"]
    assert user["isProfileComplete"] is False


def test_fresher_profile_not_seeded_on_register(client, mongo):
    register_and_login(client, "Fresher")
    assert mongo.freshers.count_documents({}) == 0


def test_profile_requires_token(client):
    response = client.get("/api/auth/profile")
    assert response.status_code == 401
    assert response.json() == {"message": "No token provided"}


def test_profile_invalid_token(client):
    response = client.get("/api/auth/profile", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json() == {"message": "Invalid token"}


def test_profile_for_deleted_user(client, mongo):
    headers, _ = register_and_login(client, "Student")
    mongo.users.delete_many({})

    response = client.get("/api/auth/profile", headers=headers)
    assert response.status_code == 404


def test_token_with_unknown_user_type(client):
    token = create_access_token({"id": "507f1f77bcf86cd799439011", "userType": "Admin"})
    response = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_fresher_completion_flips_after_profile_save(client, mongo):
    headers, user = register_and_login(client, "Fresher")
    assert user["isProfileComplete"] is False

    response = client.post("/api/career/fresher-profile", headers=headers, json={"skills": ["Python"]})
    assert response.status_code == 200

    profile = client.get("/api/auth/profile", headers=headers).json()["user"]
    assert profile["isProfileComplete"] is True
    assert mongo.users.find_one({})["isProfileComplete"] is True


def test_legacy_skills_update_completes_student(client):
    headers, _ = register_and_login(client, "Student")

    response = client.post("/api/auth/update-profile", headers=headers, json={"skills": ["Python", "SQL"]})

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["skills"] == ["Python", "SQL"]
    assert body["user"]["isProfileComplete"] is True


def test_legacy_skills_update_is_student_only(client):
    headers, _ = register_and_login(client, "Fresher")
    response = client.post("/api/auth/update-profile", headers=headers, json={"skills": ["Python"]})
    assert response.status_code == 403
