"""
Tests for registration, login, profile and password routes
"""
from jobboard.core.exceptions import ValidationException
from jobboard.schemas.schemas import RegisterRequest, UserRole
from jobboard.services.user_service import UserService

from conftest import CURRENT_YEAR, alumni_payload, auth_header, register, student_payload

import pytest


class TestRegister:

    def test_student_with_college_email(self, client):
        body = register(client, student_payload(email="Asha@CMREC.ac.in"))
        assert body["message"] == "User registered successfully"
        assert body["token"]
        user = body["user"]
        assert user["email"] == "asha@cmrec.ac.in"
        assert user["role"] == "student"
        assert user["graduationYear"] is None
        assert "password" not in user
        assert "emailVerificationToken" not in user

    def test_student_with_other_domain_rejected(self, client):
        response = client.post("/api/auth/register", json=student_payload(email="asha@gmail.com"))
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Students must use a valid @cmrec.ac.in email address"
        assert body["errors"] == [{"field": "email", "message": body["message"]}]

    def test_alumni_with_any_email(self, client):
        body = register(client, alumni_payload(email="vikram@outlook.com"))
        assert body["user"]["graduationYear"] == CURRENT_YEAR - 5

    def test_alumni_future_graduation_year_rejected(self, client):
        response = client.post("/api/auth/register", json=alumni_payload(graduationYear=CURRENT_YEAR + 1))
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "graduationYear"

    def test_alumni_missing_graduation_year_rejected(self, client):
        payload = alumni_payload()
        del payload["graduationYear"]
        response = client.post("/api/auth/register", json=payload)
        assert response.status_code == 400
        assert response.json()["message"] == "Graduation year is required for alumni"

    def test_duplicate_email_case_insensitive(self, client):
        register(client, alumni_payload())
        response = client.post("/api/auth/register", json=alumni_payload(email="VIKRAM@example.com"))
        assert response.status_code == 400
        assert response.json()["message"] == "User already exists with this email"

    def test_field_errors_listed(self, client):
        response = client.post("/api/auth/register", json=student_payload(password="123", role="faculty"))
        assert response.status_code == 400
        fields = {e["field"] for e in response.json()["errors"]}
        assert {"password", "role"} <= fields

    def test_persistence_boundary_rejects_bad_email(self, mongo_db):
        """The service re-checks the policy even if request validation is bypassed."""
        request = RegisterRequest.model_construct(
            role=UserRole.student, name="Asha Rao", email="asha@gmail.com",
            password="secret1", major="CSE", graduation_year=None, bio=None,
        )
        with pytest.raises(ValidationException) as exc_info:
            UserService().register(request)
        assert exc_info.value.errors[0].field == "email"
        assert mongo_db["users"].count_documents({}) == 0


class TestLogin:

    def test_login_success_updates_last_active(self, client, alumni, mongo_db):
        before = mongo_db["users"].find_one({"email": "vikram@example.com"})["last_active"]
        response = client.post("/api/auth/login", json={"email": "vikram@example.com", "password": "secret1"})
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Login successful"
        assert body["user"]["id"] == alumni["user"]["id"]
        after = mongo_db["users"].find_one({"email": "vikram@example.com"})["last_active"]
        assert after >= before

    def test_wrong_password(self, client, alumni):
        response = client.post("/api/auth/login", json={"email": "vikram@example.com", "password": "nope12"})
        assert response.status_code == 401
        assert response.json() == {"message": "Invalid credentials"}

    def test_unknown_email(self, client):
        response = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "secret1"})
        assert response.status_code == 401

    @pytest.mark.parametrize("email", ["a..b@gmail.com", "dev@corp.local", "x@host.test"])
    def test_any_registered_address_can_log_in(self, client, email):
        register(client, alumni_payload(email=email))
        response = client.post("/api/auth/login", json={"email": email.upper(), "password": "secret1"})
        assert response.status_code == 200
        assert response.json()["user"]["email"] == email

    def test_malformed_email(self, client):
        response = client.post("/api/auth/login", json={"email": "no-at-sign", "password": "secret1"})
        assert response.status_code == 400
        assert response.json()["errors"] == [{"field": "email", "message": "Please enter a valid email address"}]


class TestMe:

    def test_requires_token(self, client):
        response = client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json()["message"] == "No token, authorization denied"

    def test_rejects_bad_token(self, client):
        response = client.get("/api/auth/me", headers=auth_header("not-a-jwt"))
        assert response.status_code == 401

    def test_returns_current_user(self, client, student):
        response = client.get("/api/auth/me", headers=auth_header(student["token"]))
        assert response.status_code == 200
        assert response.json()["user"]["email"] == "asha@cmrec.ac.in"


class TestProfile:

    def test_update_profile(self, client, alumni):
        response = client.put(
            "/api/auth/profile",
            json={
                "bio": "Backend engineer",
                "skills": [" Python ", "Go", "Python", ""],
                "experience": "3-5",
                "currentPosition": "SDE II",
                "company": "Acme",
                "linkedinProfile": "https://www.linkedin.com/in/vikram-shah",
            },
            headers=auth_header(alumni["token"]),
        )
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["skills"] == ["Python", "Go"]
        assert user["experience"] == "3-5"
        assert user["currentPosition"] == "SDE II"

    def test_users_profile_route_behaves_the_same(self, client, student):
        response = client.put("/api/users/profile", json={"bio": "Hi"}, headers=auth_header(student["token"]))
        assert response.status_code == 200
        assert response.json()["user"]["bio"] == "Hi"

    def test_too_many_skills(self, client, student):
        skills = [f"skill-{i}" for i in range(21)]
        response = client.put("/api/auth/profile", json={"skills": skills}, headers=auth_header(student["token"]))
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "skills"

    def test_bad_linkedin(self, client, student):
        response = client.put(
            "/api/auth/profile",
            json={"linkedinProfile": "https://example.com/me"},
            headers=auth_header(student["token"]),
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Please provide a valid LinkedIn profile URL"

    def test_alumni_graduation_year_bounded_on_update(self, client, alumni):
        response = client.put(
            "/api/auth/profile",
            json={"graduationYear": CURRENT_YEAR + 3},
            headers=auth_header(alumni["token"]),
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "graduationYear"

    def test_email_and_role_not_updatable(self, client, student):
        response = client.put(
            "/api/auth/profile",
            json={"email": "asha@gmail.com", "role": "alumni"},
            headers=auth_header(student["token"]),
        )
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["email"] == "asha@cmrec.ac.in"
        assert user["role"] == "student"


class TestChangePassword:

    def test_change_password(self, client, student):
        headers = auth_header(student["token"])
        response = client.put(
            "/api/auth/change-password",
            json={"currentPassword": "secret1", "newPassword": "secret2"},
            headers=headers,
        )
        assert response.status_code == 200
        login = client.post("/api/auth/login", json={"email": "asha@cmrec.ac.in", "password": "secret2"})
        assert login.status_code == 200

    def test_wrong_current_password(self, client, student):
        response = client.put(
            "/api/auth/change-password",
            json={"currentPassword": "wrong1", "newPassword": "secret2"},
            headers=auth_header(student["token"]),
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Current password is incorrect"
