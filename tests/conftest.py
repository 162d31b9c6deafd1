"""Pytest configuration and shared fixtures"""

import copy
from typing import Any, AsyncGenerator, Dict, List, Optional
from uuid import UUID, uuid4

import pytest
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from backend.app.core.database import Base
from backend.app.core.exceptions import BackgroundJobException, NotFoundException, UpstreamException
from backend.app.models import Candidate, CandidateFile, JobApplication, InterviewRequest, PromptTemplate  # noqa: F401


# In-memory SQLite shared across the sessions of one test
TEST_DATABASE_URL = "sqlite+aiosqlite://"


SAMPLE_PROFILE: Dict[str, Any] = {
    "personal": {
        "age": "31",
        "nationality": "Irish",
        "location": "Dublin",
        "dependents": "None",
        "visa_status": "Not required",
    },
    "career": {
        "experience": "7 years",
        "past_roles": "Backend Engineer, Tech Lead",
        "progression": "Rapid",
    },
    "interview": {
        "duration": "",
        "work_eligibility": "",
        "id_check": "",
        "highlights": [],
        "overallFeedback": [],
    },
    "skills": {
        "technical": {
            "overallScore": 86,
            "skills": [{"name": "Python", "score": 90}, {"name": "PostgreSQL", "score": 82}],
        },
        "soft": {"overallScore": 80, "skills": [{"name": "Communication", "score": 80}]},
        "culture": {"overallScore": 78, "skills": [{"name": "Teamwork", "score": 78}]},
    },
    "cv": {
        "highlights": ["Led migration to event-driven architecture"],
        "keyInsights": ["Strong distributed systems background"],
        "score": 84,
    },
    "skillInsights": {
        "matchedSkills": ["Python", "Docker"],
        "missingSkills": ["Kubernetes"],
        "skillGaps": [{"name": "Kubernetes", "percentage": 40}],
        "learningPaths": [{"title": "CKA Prep", "provider": "Linux Foundation"}],
    },
    "recommendation": "Recommend",
}


def sample_profile(**overrides) -> Dict[str, Any]:
    """Fresh copy of the sample profile with top-level sections overridden"""
    profile = copy.deepcopy(SAMPLE_PROFILE)
    profile.update(copy.deepcopy(overrides))
    return profile


class FakeTextGenerator:
    """Stands in for TextGenerationService; replies are consumed in order"""

    def __init__(self, replies: Optional[List[Any]] = None):
        self.replies = list(replies or [])
        self.calls: List[Dict[str, Any]] = []

    async def complete(self, system: str, content: Any, max_tokens: int) -> str:
        self.calls.append({"system": system, "content": content, "max_tokens": max_tokens})
        if not self.replies:
            raise UpstreamException("anthropic", "No reply configured")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class RecordingTaskQueue:
    """Stands in for TaskQueue; records enqueued tasks instead of using Redis"""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.tasks: List[Dict[str, Any]] = []
        self.statuses: Dict[str, Dict[str, Any]] = {}

    async def enqueue_task(self, task_type: str, task_data: Dict[str, Any], priority: int = 0) -> str:
        if self.fail:
            raise BackgroundJobException(
                f"Failed to enqueue task {task_type}: Connection refused",
                details={"task_type": task_type}
            )
        job_id = f"job-{len(self.tasks) + 1}"
        self.tasks.append({"job_id": job_id, "task_type": task_type, "task_data": task_data})
        self.statuses[job_id] = {"status": "queued"}
        return job_id

    async def get_task_status(self, job_id: str) -> Optional[Dict[str, Any]]:
        return self.statuses.get(job_id)


class FakeStorage:
    """Stands in for S3Service with an in-memory object map"""

    def __init__(self):
        self.objects: Dict[str, bytes] = {}

    async def upload_cv(self, content: bytes, candidate_id: str, filename: str,
                        content_type: str = "application/pdf") -> str:
        key = f"cvs/{candidate_id}/{filename}"
        self.objects[key] = content
        return key

    async def download_cv(self, s3_key: str) -> bytes:
        if s3_key not in self.objects:
            raise NotFoundException(f"Stored file not found: {s3_key}")
        return self.objects[s3_key]

    async def delete_cv(self, s3_key: str) -> None:
        self.objects.pop(s3_key, None)

    async def generate_presigned_url(self, s3_key: str, expiration: int = 3600) -> str:
        return f"https://storage.test/{s3_key}?expires={expiration}"


@pytest.fixture
async def test_engine():
    """Fresh in-memory database with the full schema"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def test_session_factory(test_engine):
    """Create test session factory"""
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db_session(test_session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session"""
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def text_generator() -> FakeTextGenerator:
    return FakeTextGenerator()


@pytest.fixture
def recording_queue() -> RecordingTaskQueue:
    return RecordingTaskQueue()


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


async def create_test_candidate(db_session: AsyncSession, **fields) -> Candidate:
    """Insert a candidate row directly"""
    values = {
        "name": "Jane Murphy",
        "initials": "JM",
        "email": f"jane_{uuid4().hex[:8]}@example.com",
        "position": "Backend Engineer",
        "status": "Applied",
    }
    values.update(fields)
    candidate = Candidate(**values)
    db_session.add(candidate)
    await db_session.commit()
    await db_session.refresh(candidate)
    return candidate


async def create_test_file(
    db_session: AsyncSession,
    candidate_id: Optional[UUID] = None,
    **fields
) -> CandidateFile:
    """Insert a stored file row directly"""
    values = {
        "storage_key": f"cvs/{candidate_id}/{uuid4().hex}.pdf",
        "file_name": "resume.pdf",
        "file_size": 1024,
        "file_type": "application/pdf",
        "file_category": "resume",
        "candidate_id": candidate_id,
    }
    values.update(fields)
    candidate_file = CandidateFile(**values)
    db_session.add(candidate_file)
    await db_session.commit()
    await db_session.refresh(candidate_file)
    return candidate_file


@pytest.fixture
async def api_client(test_session_factory, storage, text_generator, recording_queue):
    """HTTP client against the app with database and external services replaced"""
    from httpx import ASGITransport, AsyncClient

    from backend.app.api.dependencies import get_storage, get_task_queue, get_text_generator
    from backend.app.core.database import get_db
    from backend.app.main import app

    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_text_generator] = lambda: text_generator
    app.dependency_overrides[get_task_queue] = lambda: recording_queue

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
