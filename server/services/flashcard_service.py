"""Flashcard listing for study sessions, joined with the requesting user's progress."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterator, NamedTuple, Optional

from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import Session as DBSession
from sqlalchemy.sql import Select

from server.db.models import Category, Domain, Flashcard, FlashcardProgress, Skill
from server.services.progress_service import progress_to_dict
from study.clock import resolve_now
from study.ratings import CardStatus

logger = logging.getLogger("certprep.flashcards")


class InvalidStatusFilter(ValueError):
    """Raised when the status filter is not new/learning/known."""


@dataclass
class FlashcardFilters:
    domain_id: Optional[str] = None
    category_id: Optional[str] = None
    skill_id: Optional[str] = None
    status: Optional[str] = None
    due_only: bool = False
    search: Optional[str] = None


class FlashcardRow(NamedTuple):
    flashcard: Flashcard
    skill: Skill
    category: Category
    domain: Domain
    progress: Optional[FlashcardProgress]


def _parse_status(status: str) -> CardStatus:
    try:
        return CardStatus(status)
    except ValueError:
        raise InvalidStatusFilter(
            f"Invalid status {status!r}. Must be: new, learning, or known"
        ) from None


def build_flashcard_query(
    user_id: str,
    exam_id: str,
    filters: Optional[FlashcardFilters] = None,
    now: Optional[datetime] = None,
) -> Select:
    """
    Flashcards of an exam left-joined with this user's progress rows.

    A missing progress row counts as both "new" and "due".
    """
    filters = filters or FlashcardFilters()
    now = resolve_now(now)

    stmt = (
        select(Flashcard, Skill, Category, Domain, FlashcardProgress)
        .join(Skill, Flashcard.skill_id == Skill.id)
        .join(Category, Skill.category_id == Category.id)
        .join(Domain, Category.domain_id == Domain.id)
        .outerjoin(
            FlashcardProgress,
            and_(
                FlashcardProgress.flashcard_id == Flashcard.id,
                FlashcardProgress.user_id == user_id,
            ),
        )
        .where(Domain.exam_id == exam_id)
    )

    if filters.domain_id:
        stmt = stmt.where(Domain.id == filters.domain_id)
    if filters.category_id:
        stmt = stmt.where(Category.id == filters.category_id)
    if filters.skill_id:
        stmt = stmt.where(Skill.id == filters.skill_id)

    never_studied = FlashcardProgress.id.is_(None)

    if filters.status:
        status = _parse_status(filters.status)
        if status is CardStatus.NEW:
            stmt = stmt.where(or_(FlashcardProgress.status == status.value, never_studied))
        else:
            stmt = stmt.where(FlashcardProgress.status == status.value)

    if filters.due_only:
        stmt = stmt.where(or_(FlashcardProgress.next_review_date <= now, never_studied))

    if filters.search:
        needle = filters.search.strip().lower()
        if needle:
            stmt = stmt.where(or_(
                func.lower(Flashcard.question).contains(needle, autoescape=True),
                func.lower(Flashcard.answer).contains(needle, autoescape=True),
                func.lower(Flashcard.explanation).contains(needle, autoescape=True),
            ))

    return stmt.order_by(Flashcard.order, Flashcard.id)


class FlashcardListing:
    """
    Lazy, restartable result of a flashcard listing.

    Each iteration runs the query again and yields FlashcardRow tuples, so a
    second pass sees a fresh snapshot. Nothing is written.
    """

    def __init__(self, db: DBSession, stmt: Select):
        self._db = db
        self._stmt = stmt

    def __iter__(self) -> Iterator[FlashcardRow]:
        for row in self._db.execute(self._stmt):
            yield FlashcardRow(*row)

    def count(self) -> int:
        return self._db.scalar(
            select(func.count()).select_from(self._stmt.order_by(None).subquery())
        ) or 0


def list_flashcards(
    db: DBSession,
    user_id: str,
    exam_id: str,
    filters: Optional[FlashcardFilters] = None,
    now: Optional[datetime] = None,
) -> FlashcardListing:
    """Raises InvalidStatusFilter for an unknown status filter."""
    stmt = build_flashcard_query(user_id, exam_id, filters, now=now)
    logger.debug("Listing flashcards for user %s exam %s with %s", user_id, exam_id, filters)
    return FlashcardListing(db, stmt)


def flashcard_row_to_dict(row: FlashcardRow) -> Dict:
    card = row.flashcard
    return {
        'id': card.id,
        'question': card.question,
        'answer': card.answer,
        'explanation': card.explanation,
        'order': card.order,
        'skill': {'id': row.skill.id, 'title': row.skill.title},
        'category': {'id': row.category.id, 'title': row.category.title},
        'domain': {'id': row.domain.id, 'title': row.domain.title},
        'progress': progress_to_dict(row.progress) if row.progress is not None else None,
    }
