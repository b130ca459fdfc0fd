"""
Pytest configuration and fixtures for testing.
"""

import os
import tempfile

# Configure the app before anything imports settings
_TEST_DIR = tempfile.mkdtemp(prefix="exam-session-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DIR, 'test.db')}"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["AUTO_SUBMIT_ENABLED"] = "false"
os.environ["CACHE_DRIVER"] = "none"
os.environ["LEADERBOARD_RATE_LIMIT"] = "1000/minute"
os.environ["LEADERBOARD_SIZE"] = "10"

import pytest
from fastapi.testclient import TestClient

from app.core.clock import NANOS_PER_SECOND
from app.core.database import Base, SessionLocal, engine
from app.core.dependencies import get_clock
from app.core.hasher import PasswordHelper
from app.core.security import jwt_manager
from app.models import ExamTest, Question, TestSection, User
from app.models.exam_test import CHAPTER_WISE, FULL_SYLLABUS
from main import app

STUDENT_PASSWORD = "Student@123"


class FakeClock:
    """Controllable nanosecond clock."""

    def __init__(self, start: int = 1_700_000_000 * NANOS_PER_SECOND):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: float = 0, minutes: float = 0) -> int:
        self.now += int((seconds + minutes * 60) * NANOS_PER_SECOND)
        return self.now


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def client(db_session, clock):
    """Test client with the authoritative clock replaced by the fake one."""
    app.dependency_overrides[get_clock] = lambda: clock
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _create_user(db, email, name, role="student"):
    user = User(
        email=email,
        name=name,
        hashed_password=PasswordHelper.hash_password(STUDENT_PASSWORD),
        role=role,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _headers(user):
    return {"Authorization": f"Bearer {jwt_manager.create_access_token(user)}"}


@pytest.fixture
def student(db_session):
    return _create_user(db_session, "student@example.com", "Asha Student")


@pytest.fixture
def other_student(db_session):
    return _create_user(db_session, "other@example.com", "Ravi Student")


@pytest.fixture
def admin_user(db_session):
    return _create_user(db_session, "staff@example.com", "Exam Admin", role="admin")


@pytest.fixture
def auth_headers(student):
    return _headers(student)


@pytest.fixture
def other_headers(other_student):
    return _headers(other_student)


@pytest.fixture
def admin_headers(admin_user):
    return _headers(admin_user)


@pytest.fixture
def questions(db_session):
    """
    Six questions: two physics, two chemistry, two maths.
    The correct option of every question is index 1.
    """
    rows = []
    for subject in ["physics", "physics", "chemistry", "chemistry", "maths", "maths"]:
        question = Question(
            subject=subject,
            class_level="class11th",
            question_text=f"A {subject} question",
            options=[{"text": "A"}, {"text": "B"}, {"text": "C"}, {"text": "D"}],
            correct_answer_index=1,
            explanation="B is correct",
        )
        db_session.add(question)
        rows.append(question)
    db_session.commit()
    for question in rows:
        db_session.refresh(question)
    return rows


@pytest.fixture
def full_syllabus_test(db_session, questions, clock):
    """Section 1: 4 questions, 90 min, 1 mark. Section 2: 2 questions, 90 min, 2 marks."""
    test = ExamTest(
        name="Full Syllabus Mock 1",
        kind=FULL_SYLLABUS,
        is_active=True,
        created_at=clock(),
    )
    test.sections = [
        TestSection(
            section_number=1,
            name="Physics + Chemistry",
            duration_minutes=90,
            marks_per_question=1,
            question_ids=[q.id for q in questions[:4]],
            subjects=["physics", "chemistry"],
        ),
        TestSection(
            section_number=2,
            name="Maths",
            duration_minutes=90,
            marks_per_question=2,
            question_ids=[q.id for q in questions[4:]],
            subjects=["maths"],
        ),
    ]
    db_session.add(test)
    db_session.commit()
    db_session.refresh(test)
    return test


@pytest.fixture
def chapter_test(db_session, questions, clock):
    """One section: the two maths questions, 30 min, 2 marks each."""
    test = ExamTest(
        name="Limits and Continuity",
        kind=CHAPTER_WISE,
        is_active=True,
        created_at=clock(),
    )
    test.sections = [
        TestSection(
            section_number=1,
            name="Limits and Continuity",
            duration_minutes=30,
            marks_per_question=2,
            question_ids=[q.id for q in questions[4:]],
            subjects=["maths"],
        )
    ]
    db_session.add(test)
    db_session.commit()
    db_session.refresh(test)
    return test


@pytest.fixture
def answer():
    """Build an answer entry."""

    def _answer(question, index):
        return {"question_id": question.id, "selected_option_index": index}

    return _answer
