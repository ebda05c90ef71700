"""Shared fixtures: a throwaway SQLite database and a small seeded exam."""

import sys
import tempfile
from datetime import datetime, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from server.config import Settings
from server.db.models import Category, Domain, Exam, Flashcard, Skill, User, UserExamAccess
from server.db.session import get_session_factory, init_db, reset_engine

T0 = datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def settings():
    """Settings bound to a fresh SQLite file; engine cache reset around the test."""
    reset_engine()
    with tempfile.TemporaryDirectory() as tmp:
        s = Settings(database_url=f"sqlite:///{Path(tmp) / 'test.db'}")
        init_db(s)
        try:
            yield s
        finally:
            reset_engine()


@pytest.fixture
def db(settings):
    session = get_session_factory(settings)()
    try:
        yield session
    finally:
        session.close()


def make_user(db, email: str = "learner@example.com") -> User:
    user = User(email=email, password_hash="x")
    db.add(user)
    db.flush()
    return user


def grant_access(db, user_id: str, exam_id: str, expires_at=None) -> UserExamAccess:
    row = UserExamAccess(user_id=user_id, exam_id=exam_id, grant_type="manual", expires_at=expires_at)
    db.add(row)
    db.flush()
    return row


def make_exam(db, code: str = "AZ-900") -> dict:
    """
    Seed one exam with two domains:

        Cloud Concepts > Benefits > Elasticity:   cards q1 (order 1), q2 (order 2)
        Cloud Concepts > Benefits > Availability: card  q3 (order 3)
        Security > Identity > Entra ID:           card  q4 (order 4)

    Returns a dict of the created rows keyed by short name.
    """
    exam = Exam(code=code, name=f"{code} Fundamentals", provider="Microsoft", description="")
    concepts = Domain(exam=exam, title="Cloud Concepts", order=1)
    security = Domain(exam=exam, title="Security", order=2)
    benefits = Category(domain=concepts, title="Benefits", order=1)
    identity = Category(domain=security, title="Identity", order=1)
    elasticity = Skill(category=benefits, title="Elasticity", order=1)
    availability = Skill(category=benefits, title="Availability", order=2)
    entra = Skill(category=identity, title="Entra ID", order=1)
    q1 = Flashcard(skill=elasticity, question="What is elasticity?",
                   answer="Scaling resources with demand", explanation="Automatic", order=1)
    q2 = Flashcard(skill=elasticity, question="Vertical vs horizontal scaling?",
                   answer="Up vs out", explanation=None, order=2)
    q3 = Flashcard(skill=availability, question="What does an SLA define?",
                   answer="Guaranteed uptime, e.g. 99.9%", explanation="Service Level Agreement", order=3)
    q4 = Flashcard(skill=entra, question="What is MFA?",
                   answer="Multi-factor authentication", explanation="Something you know and have", order=4)
    db.add(exam)
    db.flush()
    return {
        'exam': exam,
        'concepts': concepts, 'security': security,
        'benefits': benefits, 'identity': identity,
        'elasticity': elasticity, 'availability': availability, 'entra': entra,
        'q1': q1, 'q2': q2, 'q3': q3, 'q4': q4,
    }
