"""
Tests for experience, education, project, skill and social link routes
"""
import uuid

import pytest

from apps.portfolio_service.app.models import Experience


EXPERIENCE = {
    "title": "Engineer",
    "company": "Acme",
    "location": "Remote",
    "start_date": "2021-03-01",
    "end_date": None,
    "current": True,
    "description": "Built things",
}


class TestExperience:

    def test_requires_auth(self, client):
        assert client.get("/api/experience").status_code == 401
        assert client.post("/api/experience", json=EXPERIENCE).status_code == 401

    def test_create_and_list_newest_first(self, client, auth_headers):
        older = dict(EXPERIENCE, company="Old Co", start_date="2015-01-01", end_date="2019-12-31", current=False)
        assert client.post("/api/experience", json=older, headers=auth_headers).status_code == 200
        created = client.post("/api/experience", json=EXPERIENCE, headers=auth_headers)
        assert created.status_code == 200
        assert created.json()["start_date"] == "2021-03-01"

        listed = client.get("/api/experience", headers=auth_headers).json()
        assert [e["company"] for e in listed] == ["Acme", "Old Co"]

    def test_update(self, client, auth_headers):
        exp_id = client.post("/api/experience", json=EXPERIENCE, headers=auth_headers).json()["id"]
        response = client.put(f"/api/experience/{exp_id}", json=dict(EXPERIENCE, title="Lead"), headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["title"] == "Lead"

    def test_other_users_entries_are_invisible(self, client, auth_headers, other_auth_headers):
        exp_id = client.post("/api/experience", json=EXPERIENCE, headers=auth_headers).json()["id"]
        assert client.get("/api/experience", headers=other_auth_headers).json() == []
        response = client.put(f"/api/experience/{exp_id}", json=EXPERIENCE, headers=other_auth_headers)
        assert response.status_code == 404
        assert client.delete(f"/api/experience/{exp_id}", headers=other_auth_headers).status_code == 404

    def test_delete(self, client, auth_headers, test_db_session):
        exp_id = client.post("/api/experience", json=EXPERIENCE, headers=auth_headers).json()["id"]
        assert client.delete(f"/api/experience/{exp_id}", headers=auth_headers).status_code == 204
        assert test_db_session.query(Experience).count() == 0

    def test_missing_company_rejected(self, client, auth_headers):
        payload = {k: v for k, v in EXPERIENCE.items() if k != "company"}
        assert client.post("/api/experience", json=payload, headers=auth_headers).status_code == 400


class TestEducation:

    def test_crud(self, client, auth_headers):
        payload = {"school": "MIT", "degree": "BSc", "field": "CS", "start_date": "2010-09-01", "end_date": "2014-06-01"}
        created = client.post("/api/education", json=payload, headers=auth_headers)
        assert created.status_code == 200
        edu_id = created.json()["id"]
        assert created.json()["current"] is False

        updated = client.put(f"/api/education/{edu_id}", json=dict(payload, degree="MSc"), headers=auth_headers)
        assert updated.json()["degree"] == "MSc"

        assert client.delete(f"/api/education/{edu_id}", headers=auth_headers).status_code == 204
        assert client.get("/api/education", headers=auth_headers).json() == []

    def test_missing_record(self, client, auth_headers):
        response = client.delete(f"/api/education/{uuid.uuid4()}", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Education record not found"


class TestProjects:

    PROJECT = {
        "title": "Portfolio builder",
        "description": "A service for building portfolios",
        "technologies": ["Python", "FastAPI"],
        "live_url": "https://example.com/app",
        "repo_url": None,
    }

    def test_create(self, client, auth_headers):
        response = client.post("/api/projects", json=self.PROJECT, headers=auth_headers)
        assert response.status_code == 201
        data = response.json()
        assert data["technologies"] == ["Python", "FastAPI"]
        assert data["live_url"] == "https://example.com/app"
        assert data["is_featured"] is False

    def test_ordering(self, client, auth_headers):
        client.post("/api/projects", json=dict(self.PROJECT, title="Second", order=2), headers=auth_headers)
        client.post("/api/projects", json=dict(self.PROJECT, title="First", order=1), headers=auth_headers)
        listed = client.get("/api/projects", headers=auth_headers).json()
        assert [p["title"] for p in listed] == ["First", "Second"]

    @pytest.mark.parametrize("override", [
        {"description": "short"},
        {"description": "x" * 501},
        {"live_url": "not a url"},
        {"title": ""},
    ])
    def test_invalid_payload(self, client, auth_headers, override):
        response = client.post("/api/projects", json=dict(self.PROJECT, **override), headers=auth_headers)
        assert response.status_code == 400

    def test_update_and_delete(self, client, auth_headers):
        project_id = client.post("/api/projects", json=self.PROJECT, headers=auth_headers).json()["id"]
        updated = client.put(f"/api/projects/{project_id}", json=dict(self.PROJECT, is_featured=True), headers=auth_headers)
        assert updated.json()["is_featured"] is True
        assert client.delete(f"/api/projects/{project_id}", headers=auth_headers).status_code == 204


class TestSkills:

    def test_crud(self, client, auth_headers):
        created = client.post("/api/skills", json={"name": "Python", "category": "Languages", "proficiency": 80}, headers=auth_headers)
        assert created.status_code == 201
        skill_id = created.json()["id"]
        updated = client.put(f"/api/skills/{skill_id}", json={"name": "Python", "proficiency": 95}, headers=auth_headers)
        assert updated.json()["proficiency"] == 95
        assert client.delete(f"/api/skills/{skill_id}", headers=auth_headers).status_code == 204

    def test_proficiency_range(self, client, auth_headers):
        response = client.post("/api/skills", json={"name": "Python", "proficiency": 120}, headers=auth_headers)
        assert response.status_code == 400


class TestSocialLinks:

    def test_crud(self, client, auth_headers):
        created = client.post("/api/social-links", json={"platform": "GitHub", "url": "https://github.com/jane"}, headers=auth_headers)
        assert created.status_code == 201
        link_id = created.json()["id"]
        listed = client.get("/api/social-links", headers=auth_headers).json()
        assert listed[0]["url"] == "https://github.com/jane"
        assert client.delete(f"/api/social-links/{link_id}", headers=auth_headers).status_code == 204

    def test_foreign_link(self, client, auth_headers, other_auth_headers):
        link_id = client.post("/api/social-links", json={"platform": "GitHub", "url": "https://github.com/jane"}, headers=auth_headers).json()["id"]
        response = client.put(
            f"/api/social-links/{link_id}",
            json={"platform": "GitHub", "url": "https://github.com/mallory"},
            headers=other_auth_headers,
        )
        assert response.status_code == 404
