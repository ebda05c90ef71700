"""Database layer: SQLAlchemy models and session."""

from server.db.models import (
    Base,
    Category,
    Domain,
    Exam,
    Flashcard,
    FlashcardProgress,
    Session,
    Skill,
    User,
    UserExamAccess,
)
from server.db.session import get_db, init_db

__all__ = [
    "Base",
    "User",
    "Session",
    "Exam",
    "Domain",
    "Category",
    "Skill",
    "Flashcard",
    "UserExamAccess",
    "FlashcardProgress",
    "get_db",
    "init_db",
]
