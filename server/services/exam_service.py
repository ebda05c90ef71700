"""Exam lookup, access checks and the domain/category/skill outline."""

from datetime import datetime
from typing import Dict, Optional

from sqlalchemy import or_, select
from sqlalchemy.orm import Session as DBSession

from server.db.models import Category, Domain, Exam, Skill, UserExamAccess
from study.clock import resolve_now


class ExamNotFoundError(Exception):
    """Raised when no exam has the requested code."""


class ExamAccessDeniedError(Exception):
    """Raised when the user holds no current access grant for an exam."""


def get_exam_by_code(db: DBSession, code: str) -> Exam:
    exam = db.scalars(select(Exam).where(Exam.code == code)).first()
    if exam is None:
        raise ExamNotFoundError(f"Exam not found: {code}")
    return exam


def has_exam_access(
    db: DBSession,
    user_id: str,
    exam_id: str,
    now: Optional[datetime] = None,
) -> bool:
    now = resolve_now(now)
    stmt = (
        select(UserExamAccess.id)
        .where(
            UserExamAccess.user_id == user_id,
            UserExamAccess.exam_id == exam_id,
            or_(UserExamAccess.expires_at.is_(None), UserExamAccess.expires_at > now),
        )
        .limit(1)
    )
    return db.scalars(stmt).first() is not None


def require_exam_access(db: DBSession, user_id: str, exam: Exam, now: Optional[datetime] = None) -> None:
    if not has_exam_access(db, user_id, exam.id, now=now):
        raise ExamAccessDeniedError(f"Access denied for exam {exam.code}")


def get_exam_structure(db: DBSession, exam: Exam) -> Dict:
    """Domains, categories and skills of an exam, each in display order."""
    domains = db.scalars(
        select(Domain).where(Domain.exam_id == exam.id).order_by(Domain.order, Domain.id)
    ).all()
    categories = db.scalars(
        select(Category)
        .join(Domain, Category.domain_id == Domain.id)
        .where(Domain.exam_id == exam.id)
        .order_by(Category.order, Category.id)
    ).all()
    skills = db.scalars(
        select(Skill)
        .join(Category, Skill.category_id == Category.id)
        .join(Domain, Category.domain_id == Domain.id)
        .where(Domain.exam_id == exam.id)
        .order_by(Skill.order, Skill.id)
    ).all()
    return {
        'domains': [{'id': d.id, 'title': d.title} for d in domains],
        'categories': [{'id': c.id, 'title': c.title, 'domain_id': c.domain_id} for c in categories],
        'skills': [{'id': s.id, 'title': s.title, 'category_id': s.category_id} for s in skills],
    }
