"""
Tests for registration, login, profile and avatar upload
"""
from datetime import timedelta

from apps.portfolio_service.app.auth import create_access_token
from apps.portfolio_service.app.config import get_settings
from apps.portfolio_service.app.models import Experience, Portfolio, SocialLink, User


class TestAuth:

    def test_register(self, client, test_db_session):
        response = client.post("/api/auth/register", json={"name": "Ann", "email": "Ann@Example.com", "password": "hunter22"})
        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["user"]["email"] == "ann@example.com"
        user = test_db_session.query(User).filter_by(email="ann@example.com").one()
        assert user.password_hash != "hunter22"

    def test_register_duplicate(self, client, test_user):
        response = client.post("/api/auth/register", json={"email": test_user.email, "password": "hunter22"})
        assert response.status_code == 409

    def test_register_short_password(self, client):
        response = client.post("/api/auth/register", json={"email": "a@example.com", "password": "123"})
        assert response.status_code == 400

    def test_login_returns_usable_token(self, client, test_user):
        response = client.post("/api/auth/login", json={"email": test_user.email, "password": "secret123"})
        assert response.status_code == 200
        token = response.json()["access_token"]
        profile = client.get("/api/profile", headers={"Authorization": f"Bearer {token}"})
        assert profile.status_code == 200
        assert profile.json()["email"] == test_user.email

    def test_login_wrong_password(self, client, test_user):
        response = client.post("/api/auth/login", json={"email": test_user.email, "password": "wrong"})
        assert response.status_code == 401

    def test_expired_token(self, client, test_user):
        token = create_access_token({"sub": str(test_user.id)}, expires_delta=timedelta(minutes=-1))
        response = client.get("/api/profile", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_token_for_deleted_user(self, client, test_user, test_db_session, auth_headers):
        test_db_session.delete(test_user)
        test_db_session.commit()
        assert client.get("/api/profile", headers=auth_headers).status_code == 401


class TestProfile:

    def test_update_profile_and_social_fields(self, client, auth_headers, test_db_session, test_user):
        payload = {
            "name": "Jane Q. Doe",
            "bio": "Engineer",
            "job_title": "Staff Engineer",
            "website": "https://jane.dev/",
            "github": "https://github.com/jane",
            "linkedin": "https://linkedin.com/in/jane",
        }
        response = client.put("/api/profile", json=payload, headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Jane Q. Doe"
        assert data["github"] == "https://github.com/jane"
        assert data["twitter"] is None

        links = test_db_session.query(SocialLink).filter_by(user_id=test_user.id).all()
        assert sorted(link.platform for link in links) == ["GitHub", "LinkedIn"]

    def test_clearing_a_social_field_removes_link(self, client, auth_headers, test_db_session, test_user):
        client.put("/api/profile", json={"name": "Jane", "github": "https://github.com/jane"}, headers=auth_headers)
        client.put("/api/profile", json={"name": "Jane"}, headers=auth_headers)
        assert test_db_session.query(SocialLink).filter_by(user_id=test_user.id).count() == 0

    def test_name_required(self, client, auth_headers):
        response = client.put("/api/profile", json={"bio": "x"}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["details"]

    def test_delete_account_cascades(self, client, auth_headers, test_db_session, test_user, test_portfolio):
        client.post("/api/experience", json={"title": "Eng", "company": "Acme", "start_date": "2020-01-01"}, headers=auth_headers)
        user_id = test_user.id

        assert client.delete("/api/profile", headers=auth_headers).status_code == 204
        test_db_session.expire_all()
        assert test_db_session.query(User).filter_by(id=user_id).count() == 0
        assert test_db_session.query(Portfolio).filter_by(user_id=user_id).count() == 0
        assert test_db_session.query(Experience).filter_by(user_id=user_id).count() == 0


class TestUpload:

    PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32

    def test_upload_image(self, client, auth_headers, test_db_session, test_user):
        response = client.post("/api/upload", files={"file": ("me.png", self.PNG, "image/png")}, headers=auth_headers)
        assert response.status_code == 200
        url = response.json()["url"]
        assert url.startswith("data:image/png;base64,")
        test_db_session.expire_all()
        assert test_db_session.get(User, test_user.id).image == url
        assert "image_data" not in User.__table__.columns

    def test_rejects_non_image(self, client, auth_headers):
        response = client.post("/api/upload", files={"file": ("cv.pdf", b"%PDF-1.4", "application/pdf")}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "File must be an image"

    def test_rejects_large_file(self, client, auth_headers):
        big = b"\x00" * (5 * 1024 * 1024 + 1)
        response = client.post("/api/upload", files={"file": ("big.png", big, "image/png")}, headers=auth_headers)
        assert response.status_code == 400

    def test_size_limit_is_inclusive(self, client, auth_headers, monkeypatch):
        monkeypatch.setattr(get_settings(), "MAX_UPLOAD_BYTES", len(self.PNG))
        ok = client.post("/api/upload", files={"file": ("me.png", self.PNG, "image/png")}, headers=auth_headers)
        assert ok.status_code == 200
        too_big = client.post("/api/upload", files={"file": ("me.png", self.PNG + b"\x00", "image/png")}, headers=auth_headers)
        assert too_big.status_code == 400

    def test_missing_file(self, client, auth_headers):
        response = client.post("/api/upload", headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "No file uploaded"

    def test_requires_auth(self, client):
        response = client.post("/api/upload", files={"file": ("me.png", self.PNG, "image/png")})
        assert response.status_code == 401
