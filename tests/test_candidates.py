"""
Test suite for candidate endpoints.

Tests cover:
- Adding candidates to jobs
- Moving candidates between pipeline stages
- Visibility through job ownership
- Filtering by job and name
"""

import uuid

import pytest

from app.models.candidate import Candidate, CandidateStatus
from conftest import create_candidate, create_job, login


class TestCandidateCreation:
    """Tests for adding candidates"""

    def test_add_candidate_and_move_to_interview(self, client, db_session, customer_user):
        login(client, "customer@example.com")
        job_id = client.post("/api/jobs", json={"title": "Engineer"}).json()["job_id"]

        response = client.post("/api/candidates", json={"job_id": job_id, "name": "Jane"})
        assert response.status_code == 201
        candidate = response.json()
        assert candidate["status"] == "applied"

        response = client.patch(f"/api/candidates/{candidate['candidate_id']}/status", json={"status": "interview"})
        assert response.status_code == 200

        listed = client.get("/api/candidates").json()
        assert len(listed) == 1
        assert listed[0]["name"] == "Jane"
        assert listed[0]["status"] == "interview"
        assert listed[0]["job_title"] == "Engineer"

    @pytest.mark.parametrize("body", [{}, {"linkedin": ""}, {"linkedin": "   "}])
    def test_blank_linkedin_stored_as_null(self, client, db_session, customer_user, body):
        job = create_job(db_session, customer_user)
        login(client, "customer@example.com")

        response = client.post("/api/candidates", json={"job_id": str(job.job_id), "name": "Jane", **body})

        assert response.status_code == 201
        assert response.json()["linkedin"] is None

    def test_linkedin_url_kept(self, client, db_session, customer_user):
        job = create_job(db_session, customer_user)
        login(client, "customer@example.com")

        response = client.post(
            "/api/candidates",
            json={"job_id": str(job.job_id), "name": "Jane", "linkedin": "https://linkedin.com/in/jane"}
        )
        assert response.json()["linkedin"] == "https://linkedin.com/in/jane"

    def test_add_candidate_with_initial_status(self, client, db_session, customer_user):
        job = create_job(db_session, customer_user)
        login(client, "customer@example.com")

        response = client.post(
            "/api/candidates",
            json={"job_id": str(job.job_id), "name": "Jane", "status": "hired"}
        )
        assert response.json()["status"] == "hired"

    def test_add_candidate_to_other_users_job(self, client, db_session, customer_user, other_customer):
        job = create_job(db_session, other_customer)
        login(client, "customer@example.com")

        response = client.post("/api/candidates", json={"job_id": str(job.job_id), "name": "Jane"})

        assert response.status_code == 404
        assert db_session.query(Candidate).count() == 0

    def test_add_candidate_to_nonexistent_job(self, client, customer_user):
        login(client, "customer@example.com")

        response = client.post("/api/candidates", json={"job_id": str(uuid.uuid4()), "name": "Jane"})
        assert response.status_code == 404

    def test_add_candidate_requires_name(self, client, db_session, customer_user):
        job = create_job(db_session, customer_user)
        login(client, "customer@example.com")

        response = client.post("/api/candidates", json={"job_id": str(job.job_id), "name": ""})
        assert response.status_code == 422


class TestCandidateStatus:
    """Tests for stage transitions"""

    @pytest.mark.parametrize("start, target", [
        (CandidateStatus.APPLIED, "hired"),
        (CandidateStatus.HIRED, "applied"),
        (CandidateStatus.INTERVIEW, "applied"),
        (CandidateStatus.APPLIED, "applied"),
    ])
    def test_any_transition_allowed(self, client, db_session, customer_user, start, target):
        job = create_job(db_session, customer_user)
        candidate = create_candidate(db_session, job, status=start)
        login(client, "customer@example.com")

        response = client.patch(f"/api/candidates/{candidate.candidate_id}/status", json={"status": target})

        assert response.status_code == 200
        assert response.json()["status"] == target

    def test_invalid_status(self, client, db_session, customer_user):
        job = create_job(db_session, customer_user)
        candidate = create_candidate(db_session, job)
        login(client, "customer@example.com")

        response = client.patch(f"/api/candidates/{candidate.candidate_id}/status", json={"status": "rejected"})
        assert response.status_code == 422

    def test_move_other_users_candidate(self, client, db_session, customer_user, other_customer):
        job = create_job(db_session, other_customer)
        candidate = create_candidate(db_session, job)
        login(client, "customer@example.com")

        response = client.patch(f"/api/candidates/{candidate.candidate_id}/status", json={"status": "hired"})

        assert response.status_code == 404
        db_session.refresh(candidate)
        assert candidate.status == CandidateStatus.APPLIED


class TestCandidateListing:
    """Tests for listing and filtering"""

    def test_customer_sees_only_candidates_of_own_jobs(self, client, db_session, customer_user, other_customer):
        create_candidate(db_session, create_job(db_session, customer_user), name="Mine")
        create_candidate(db_session, create_job(db_session, other_customer), name="Theirs")
        login(client, "customer@example.com")

        names = [c["name"] for c in client.get("/api/candidates").json()]
        assert names == ["Mine"]

    def test_admin_sees_all_candidates(self, client, db_session, admin_user, customer_user, other_customer):
        create_candidate(db_session, create_job(db_session, customer_user), name="Mine")
        create_candidate(db_session, create_job(db_session, other_customer), name="Theirs")
        login(client, "admin@example.com")

        listed = client.get("/api/candidates").json()

        assert {c["name"]: c["user_email"] for c in listed} == {
            "Mine": "customer@example.com",
            "Theirs": "other@example.com",
        }

    def test_filter_by_job(self, client, db_session, customer_user):
        engineer = create_job(db_session, customer_user, title="Engineer")
        designer = create_job(db_session, customer_user, title="Designer")
        create_candidate(db_session, engineer, name="Jane")
        create_candidate(db_session, designer, name="John")
        login(client, "customer@example.com")

        listed = client.get("/api/candidates", params={"job_id": str(designer.job_id)}).json()
        assert [c["name"] for c in listed] == ["John"]

    def test_filter_by_name_case_insensitive(self, client, db_session, customer_user):
        job = create_job(db_session, customer_user)
        create_candidate(db_session, job, name="Jane Doe")
        create_candidate(db_session, job, name="John Smith")
        login(client, "customer@example.com")

        listed = client.get("/api/candidates", params={"name": "jane"}).json()
        assert [c["name"] for c in listed] == ["Jane Doe"]

    def test_filter_by_name_matches_wildcards_literally(self, client, db_session, customer_user):
        job = create_job(db_session, customer_user)
        create_candidate(db_session, job, name="Jane")
        create_candidate(db_session, job, name="100% Jane")
        login(client, "customer@example.com")

        listed = client.get("/api/candidates", params={"name": "%"}).json()
        assert [c["name"] for c in listed] == ["100% Jane"]

        listed = client.get("/api/candidates", params={"name": "_"}).json()
        assert listed == []

    def test_candidate_of_missing_job_shows_placeholder(self, client, db_session, admin_user):
        db_session.add(Candidate(job_id=uuid.uuid4(), name="Stray"))
        db_session.commit()
        login(client, "admin@example.com")

        listed = client.get("/api/candidates").json()

        assert listed[0]["job_title"] == "Unknown job"
        assert listed[0]["user_email"] == "Unknown"


class TestCandidateUpdates:
    """Tests for editing and deleting candidates"""

    def test_update_name(self, client, db_session, customer_user):
        job = create_job(db_session, customer_user)
        candidate = create_candidate(db_session, job, name="Jane", linkedin="https://linkedin.com/in/jane")
        login(client, "customer@example.com")

        response = client.patch(f"/api/candidates/{candidate.candidate_id}", json={"name": "Jane Doe"})

        assert response.status_code == 200
        assert response.json()["name"] == "Jane Doe"
        assert response.json()["linkedin"] == "https://linkedin.com/in/jane"

    def test_clear_linkedin(self, client, db_session, customer_user):
        job = create_job(db_session, customer_user)
        candidate = create_candidate(db_session, job, linkedin="https://linkedin.com/in/jane")
        login(client, "customer@example.com")

        response = client.patch(f"/api/candidates/{candidate.candidate_id}", json={"linkedin": ""})
        assert response.json()["linkedin"] is None

    def test_delete_candidate(self, client, db_session, customer_user):
        job = create_job(db_session, customer_user)
        candidate = create_candidate(db_session, job)
        login(client, "customer@example.com")

        response = client.delete(f"/api/candidates/{candidate.candidate_id}")

        assert response.status_code == 204
        assert db_session.query(Candidate).count() == 0

    def test_delete_other_users_candidate(self, client, db_session, customer_user, other_customer):
        job = create_job(db_session, other_customer)
        candidate = create_candidate(db_session, job)
        login(client, "customer@example.com")

        response = client.delete(f"/api/candidates/{candidate.candidate_id}")

        assert response.status_code == 404
        assert db_session.query(Candidate).count() == 1
