"""Integration tests for candidate API endpoints"""

from uuid import uuid4

import pytest

from backend.app.models.application import InterviewRequest, JobApplication
from tests.conftest import create_test_candidate, create_test_file, sample_profile


@pytest.mark.integration
class TestCandidateAPI:
    """Integration tests for candidate CRUD endpoints"""

    @pytest.mark.asyncio
    async def test_create_and_get(self, api_client):
        response = await api_client.post("/api/v1/candidates", json={
            "name": "Jane Murphy",
            "email": "jane@example.com",
            "position": "Backend Engineer",
            "status": "Applied",
        })

        assert response.status_code == 201
        created = response.json()
        assert created["initials"] == "JM"
        assert created["candidate_profile"] is None

        fetched = await api_client.get(f"/api/v1/candidates/{created['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["email"] == "jane@example.com"

    @pytest.mark.asyncio
    async def test_create_requires_email(self, api_client):
        response = await api_client.post("/api/v1/candidates", json={"name": "No Email"})

        assert response.status_code == 422
        assert response.json()["error"] == "Validation error"

    @pytest.mark.asyncio
    async def test_unknown_candidate(self, api_client):
        response = await api_client.get(f"/api/v1/candidates/{uuid4()}")

        assert response.status_code == 404
        body = response.json()
        assert "Candidate not found" in body["error"]
        assert body["request_id"] == response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_list_normalizes_profiles(self, api_client, db_session):
        profile = sample_profile(cv={"highlights": [], "keyInsights": []})
        await create_test_candidate(db_session, ai_score=77, candidate_profile=profile)
        await create_test_candidate(db_session)

        response = await api_client.get("/api/v1/candidates", params={"limit": 1})

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert body["has_more"] is True
        assert len(body["candidates"]) == 1

        everything = (await api_client.get("/api/v1/candidates")).json()["candidates"]
        scored = [c for c in everything if c["candidate_profile"]]
        assert scored[0]["candidate_profile"]["cv"]["score"] == 77

    @pytest.mark.asyncio
    async def test_list_filter_by_status(self, api_client, db_session):
        await create_test_candidate(db_session, status="Interview")
        await create_test_candidate(db_session, status="Applied")

        response = await api_client.get("/api/v1/candidates", params={"status": "Interview"})

        assert [c["status"] for c in response.json()["candidates"]] == ["Interview"]

    @pytest.mark.asyncio
    async def test_update_scalar_fields(self, api_client, db_session):
        candidate = await create_test_candidate(db_session, candidate_profile=sample_profile())

        response = await api_client.put(
            f"/api/v1/candidates/{candidate.id}", json={"status": "Offer", "recruiter": "Sam"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "Offer"
        assert body["recruiter"] == "Sam"
        assert body["candidate_profile"]["recommendation"] == "Recommend"

    @pytest.mark.asyncio
    async def test_get_by_meeting_code(self, api_client, db_session):
        candidate = await create_test_candidate(db_session, meeting_code="ROOM-7")

        response = await api_client.get("/api/v1/candidates/by-meeting-code/ROOM-7")

        assert response.json()["id"] == str(candidate.id)

    @pytest.mark.asyncio
    async def test_delete_cascades(self, api_client, db_session):
        candidate = await create_test_candidate(db_session)
        db_session.add_all([
            JobApplication(candidate_id=candidate.id, job_id="job-1"),
            InterviewRequest(candidate_id=candidate.id, position="Backend Engineer"),
        ])
        await db_session.commit()

        response = await api_client.delete(f"/api/v1/candidates/{candidate.id}")

        assert response.status_code == 204
        assert (await api_client.get(f"/api/v1/candidates/{candidate.id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_bulk_delete(self, api_client, db_session):
        candidate = await create_test_candidate(db_session)
        missing = uuid4()

        response = await api_client.post(
            "/api/v1/candidates/bulk-delete",
            json={"candidate_ids": [str(candidate.id), str(missing)]}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["deleted_count"] == 1
        assert body["failed_ids"] == [str(missing)]


@pytest.mark.integration
class TestCandidateProfileAPI:
    """Integration tests for structured profile endpoints"""

    @pytest.mark.asyncio
    async def test_patch_section(self, api_client, db_session):
        candidate = await create_test_candidate(db_session, candidate_profile=sample_profile())
        skills = {
            "technical": {"overallScore": 64, "skills": [{"name": "Go", "score": 64}]},
            "soft": {"overallScore": 70, "skills": []},
            "culture": {"overallScore": 71, "skills": []},
        }

        response = await api_client.patch(
            f"/api/v1/candidates/{candidate.id}/profile/skills", json=skills
        )

        assert response.status_code == 200
        profile = response.json()["candidate_profile"]
        assert profile["skills"]["technical"]["overallScore"] == 64
        assert profile["skills"]["technical"]["skills"] == [{"name": "Go", "score": 64}]
        assert profile["career"] == sample_profile()["career"]
        assert profile["recommendation"] == "Recommend"

    @pytest.mark.asyncio
    async def test_patch_unknown_section(self, api_client, db_session):
        candidate = await create_test_candidate(db_session)

        response = await api_client.patch(
            f"/api/v1/candidates/{candidate.id}/profile/hobbies", json={}
        )

        assert response.status_code == 400
        assert "skillInsights" in response.json()["details"]["allowed"]

    @pytest.mark.asyncio
    async def test_patch_invalid_section_value(self, api_client, db_session):
        candidate = await create_test_candidate(db_session)

        response = await api_client.patch(
            f"/api/v1/candidates/{candidate.id}/profile/cv",
            json={"highlights": [], "keyInsights": [], "score": 250}
        )

        assert response.status_code == 400
        assert response.json()["details"]["errors"][0]["loc"] == ["score"]

    @pytest.mark.asyncio
    async def test_patch_unknown_candidate(self, api_client):
        response = await api_client.patch(
            f"/api/v1/candidates/{uuid4()}/profile/career", json={"experience": "3 years"}
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_replace_profile(self, api_client, db_session):
        candidate = await create_test_candidate(db_session)

        response = await api_client.put(
            f"/api/v1/candidates/{candidate.id}/profile",
            json={"candidate_profile": sample_profile(recommendation="Consider")}
        )

        assert response.status_code == 200
        assert response.json()["candidate_profile"]["recommendation"] == "Consider"

    @pytest.mark.asyncio
    async def test_replace_profile_rejects_bad_recommendation(self, api_client, db_session):
        candidate = await create_test_candidate(db_session)

        response = await api_client.put(
            f"/api/v1/candidates/{candidate.id}/profile",
            json={"candidate_profile": sample_profile(recommendation="Hire now")}
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_generate_default_profile(self, api_client, db_session):
        candidate = await create_test_candidate(db_session, ai_score=90)

        response = await api_client.post(f"/api/v1/candidates/{candidate.id}/profile/default")

        skills = response.json()["candidate_profile"]["skills"]
        assert [skills[c]["overallScore"] for c in ("technical", "soft", "culture")] == [72, 81, 77]

    @pytest.mark.asyncio
    async def test_experience_skills(self, api_client, db_session):
        candidate = await create_test_candidate(db_session, candidate_profile=sample_profile())

        response = await api_client.get(f"/api/v1/candidates/{candidate.id}/experience-skills")

        assert response.json() == {"experience": "7 years", "skills": ["Python", "PostgreSQL", "Docker"]}

    @pytest.mark.asyncio
    async def test_context(self, api_client, db_session):
        candidate = await create_test_candidate(db_session, candidate_profile=sample_profile())

        response = await api_client.get(f"/api/v1/candidates/{candidate.id}/context")

        body = response.json()
        assert body["candidate_id"] == str(candidate.id)
        assert body["context"].startswith("# Candidate Information")

    @pytest.mark.asyncio
    async def test_candidate_files(self, api_client, db_session):
        candidate = await create_test_candidate(db_session)
        stored = await create_test_file(db_session, candidate.id)

        response = await api_client.get(f"/api/v1/candidates/{candidate.id}/files")

        files = response.json()["files"]
        assert len(files) == 1
        assert files[0]["url"] == f"https://storage.test/{stored.storage_key}?expires=3600"
