"""
Test suite for job-related endpoints and functionality.

Tests cover:
- Job creation (own jobs, admin-selected owners)
- Row-level visibility of jobs
- Editing and deleting jobs (with their candidates)
- Error handling
"""

import uuid

from app.models.candidate import Candidate
from app.models.job import Job
from conftest import create_account, create_candidate, create_job, login


class TestJobCreation:
    """Tests for job creation endpoint"""

    def test_create_job_success(self, client, db_session, customer_user):
        login(client, "customer@example.com")

        response = client.post("/api/jobs", json={"title": "Engineer", "description": "Backend work"})

        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "Engineer"
        assert data["description"] == "Backend work"
        assert data["user_id"] == str(customer_user.id)
        assert db_session.query(Job).count() == 1

    def test_create_job_without_description(self, client, customer_user):
        login(client, "customer@example.com")

        response = client.post("/api/jobs", json={"title": "Engineer", "description": ""})

        assert response.status_code == 201
        assert response.json()["description"] is None

    def test_create_job_empty_title(self, client, customer_user):
        login(client, "customer@example.com")

        response = client.post("/api/jobs", json={"title": ""})
        assert response.status_code == 422

    def test_create_job_requires_session(self, client):
        response = client.post("/api/jobs", json={"title": "Engineer"})
        assert response.status_code == 401

    def test_customer_cannot_create_for_another_user(self, client, db_session, customer_user, other_customer):
        login(client, "customer@example.com")

        response = client.post("/api/jobs", json={"title": "Engineer", "user_id": str(other_customer.id)})

        assert response.status_code == 403
        assert db_session.query(Job).count() == 0

    def test_admin_creates_job_for_selected_user(self, client, admin_user, customer_user):
        login(client, "admin@example.com")

        response = client.post("/api/jobs", json={"title": "Designer", "user_id": str(customer_user.id)})

        assert response.status_code == 201
        assert response.json()["user_id"] == str(customer_user.id)

    def test_admin_create_for_unknown_user(self, client, admin_user):
        login(client, "admin@example.com")

        response = client.post("/api/jobs", json={"title": "Designer", "user_id": str(uuid.uuid4())})
        assert response.status_code == 400


class TestJobRetrieval:
    """Tests for job retrieval endpoints"""

    def test_customer_sees_only_own_jobs(self, client, db_session, customer_user, other_customer):
        create_job(db_session, customer_user, title="Mine")
        create_job(db_session, other_customer, title="Theirs")
        login(client, "customer@example.com")

        response = client.get("/api/jobs")

        assert response.status_code == 200
        titles = [job["title"] for job in response.json()]
        assert titles == ["Mine"]

    def test_admin_sees_all_jobs_with_owner_email(self, client, db_session, admin_user, customer_user, other_customer):
        create_job(db_session, customer_user, title="First")
        create_job(db_session, other_customer, title="Second")
        login(client, "admin@example.com")

        response = client.get("/api/jobs")

        assert response.status_code == 200
        jobs = {job["title"]: job["user_email"] for job in response.json()}
        assert jobs == {"First": "customer@example.com", "Second": "other@example.com"}

    def test_jobs_listed_newest_first(self, client, db_session, customer_user):
        create_job(db_session, customer_user, title="Old")
        create_job(db_session, customer_user, title="New")
        login(client, "customer@example.com")

        response = client.get("/api/jobs")
        assert [job["title"] for job in response.json()] == ["New", "Old"]

    def test_job_without_profile_shows_placeholder_owner(self, client, db_session, admin_user):
        orphan = create_account(db_session, "orphan@example.com", with_profile=False)
        create_job(db_session, orphan, title="Orphaned")
        login(client, "admin@example.com")

        response = client.get("/api/jobs")

        assert response.json()[0]["user_email"] == "Unknown"

    def test_get_job_by_id(self, client, db_session, customer_user):
        job = create_job(db_session, customer_user)
        login(client, "customer@example.com")

        response = client.get(f"/api/jobs/{job.job_id}")

        assert response.status_code == 200
        assert response.json()["job_id"] == str(job.job_id)

    def test_get_other_users_job(self, client, db_session, customer_user, other_customer):
        job = create_job(db_session, other_customer)
        login(client, "customer@example.com")

        response = client.get(f"/api/jobs/{job.job_id}")
        assert response.status_code == 404

    def test_get_nonexistent_job(self, client, customer_user):
        login(client, "customer@example.com")

        response = client.get(f"/api/jobs/{uuid.uuid4()}")
        assert response.status_code == 404


class TestJobUpdates:
    """Tests for editing and deleting jobs"""

    def test_update_job(self, client, db_session, customer_user):
        job = create_job(db_session, customer_user, title="Engineer")
        login(client, "customer@example.com")

        response = client.patch(f"/api/jobs/{job.job_id}", json={"title": "Senior Engineer"})

        assert response.status_code == 200
        assert response.json()["title"] == "Senior Engineer"

    def test_update_other_users_job(self, client, db_session, customer_user, other_customer):
        job = create_job(db_session, other_customer, title="Engineer")
        login(client, "customer@example.com")

        response = client.patch(f"/api/jobs/{job.job_id}", json={"title": "Hijacked"})

        assert response.status_code == 404
        db_session.refresh(job)
        assert job.title == "Engineer"

    def test_admin_updates_any_job(self, client, db_session, admin_user, customer_user):
        job = create_job(db_session, customer_user)
        login(client, "admin@example.com")

        response = client.patch(f"/api/jobs/{job.job_id}", json={"description": "Remote"})

        assert response.status_code == 200
        assert response.json()["description"] == "Remote"

    def test_delete_job_removes_candidates(self, client, db_session, customer_user):
        job = create_job(db_session, customer_user)
        create_candidate(db_session, job, name="Jane")
        create_candidate(db_session, job, name="John")
        login(client, "customer@example.com")

        response = client.delete(f"/api/jobs/{job.job_id}")

        assert response.status_code == 204
        assert db_session.query(Job).count() == 0
        assert db_session.query(Candidate).count() == 0

    def test_delete_other_users_job(self, client, db_session, customer_user, other_customer):
        job = create_job(db_session, other_customer)
        login(client, "customer@example.com")

        response = client.delete(f"/api/jobs/{job.job_id}")

        assert response.status_code == 404
        assert db_session.query(Job).count() == 1

    def test_delete_nonexistent_job(self, client, customer_user):
        login(client, "customer@example.com")

        response = client.delete(f"/api/jobs/{uuid.uuid4()}")
        assert response.status_code == 404
