"""Per-user flashcard progress: apply study ratings and summarise an exam."""

import logging
from datetime import datetime, timedelta
from typing import Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session as DBSession

from server.db.models import Category, Domain, Exam, Flashcard, FlashcardProgress, Skill
from study.clock import ensure_utc, resolve_now
from study.ratings import CardStatus, quality_for_rating, status_for_repetitions
from study.scheduler import DEFAULT_EASE_FACTOR, calculate_next_review

logger = logging.getLogger("certprep.progress")

RECENT_ACTIVITY_DAYS = 7


class FlashcardNotFoundError(Exception):
    """Raised when a rating references a flashcard that does not exist."""


def get_progress(db: DBSession, user_id: str, flashcard_id: str) -> Optional[FlashcardProgress]:
    return db.scalars(
        select(FlashcardProgress).where(
            FlashcardProgress.user_id == user_id,
            FlashcardProgress.flashcard_id == flashcard_id,
        )
    ).first()


def apply_rating(
    db: DBSession,
    user_id: str,
    flashcard_id: str,
    rating,
    now: Optional[datetime] = None,
) -> FlashcardProgress:
    """
    Apply a study-button rating to the user's progress on a flashcard.

    Never-studied cards start from ease 2.5, interval 0, repetitions 0.
    The row is created on the first rating and updated in place afterwards;
    status is always rewritten from the new repetitions. Flushes but does not
    commit.

    Raises:
        InvalidRating if rating is not forgot/hard/good/easy.
        FlashcardNotFoundError if the flashcard does not exist.
    """
    quality = quality_for_rating(rating)
    now = resolve_now(now)

    if db.get(Flashcard, flashcard_id) is None:
        raise FlashcardNotFoundError(f"Flashcard not found: {flashcard_id}")

    progress = get_progress(db, user_id, flashcard_id)
    if progress is None:
        schedule = calculate_next_review(
            quality, DEFAULT_EASE_FACTOR, 0, 0, now=now,
        )
        progress = FlashcardProgress(user_id=user_id, flashcard_id=flashcard_id)
        db.add(progress)
    else:
        schedule = calculate_next_review(
            quality,
            progress.ease_factor,
            progress.interval_days,
            progress.repetitions,
            now=now,
        )

    progress.ease_factor = schedule.ease_factor
    progress.interval_days = schedule.interval_days
    progress.repetitions = schedule.repetitions
    progress.status = status_for_repetitions(schedule.repetitions).value
    progress.next_review_date = schedule.next_review_date
    progress.last_reviewed_at = now
    db.flush()

    logger.debug(
        "User %s rated flashcard %s %s (q=%d): reps=%d interval=%d ease=%.2f",
        user_id, flashcard_id, getattr(rating, "value", rating), quality,
        schedule.repetitions, schedule.interval_days, schedule.ease_factor,
    )
    return progress


def progress_to_dict(progress: FlashcardProgress) -> Dict:
    """JSON-safe view of a progress row."""
    return {
        'id': progress.id,
        'flashcard_id': progress.flashcard_id,
        'status': progress.status,
        'ease_factor': progress.ease_factor,
        'interval_days': progress.interval_days,
        'repetitions': progress.repetitions,
        'next_review_date': ensure_utc(progress.next_review_date).isoformat(),
        'last_reviewed_at': (
            ensure_utc(progress.last_reviewed_at).isoformat()
            if progress.last_reviewed_at else None
        ),
    }


def review_message(progress: FlashcardProgress) -> str:
    return f"Card scheduled for review in {progress.interval_days} day(s)"


def _percentage(part: int, total: int) -> int:
    if total <= 0:
        return 0
    return int(part * 100 / total + 0.5)


def get_exam_progress(
    db: DBSession,
    user_id: str,
    exam: Exam,
    now: Optional[datetime] = None,
) -> Dict:
    """
    Aggregate study progress for one exam.

    Returns:
        {total_flashcards, studied, not_started, new, learning, known,
         due_for_review, completion_percentage, mastery_percentage,
         recent_activity: [{date, count}, ...]}
    """
    now = resolve_now(now)

    exam_cards = (
        select(Flashcard.id)
        .join(Skill, Flashcard.skill_id == Skill.id)
        .join(Category, Skill.category_id == Category.id)
        .join(Domain, Category.domain_id == Domain.id)
        .where(Domain.exam_id == exam.id)
    )
    total = db.scalar(select(func.count()).select_from(exam_cards.subquery())) or 0

    user_rows = (
        FlashcardProgress.user_id == user_id,
        FlashcardProgress.flashcard_id.in_(exam_cards),
    )

    by_status = dict(
        db.execute(
            select(FlashcardProgress.status, func.count())
            .where(*user_rows)
            .group_by(FlashcardProgress.status)
        ).all()
    )
    new_count = by_status.get(CardStatus.NEW.value, 0)
    learning_count = by_status.get(CardStatus.LEARNING.value, 0)
    known_count = by_status.get(CardStatus.KNOWN.value, 0)
    studied = new_count + learning_count + known_count

    due = db.scalar(
        select(func.count())
        .select_from(FlashcardProgress)
        .where(*user_rows, FlashcardProgress.next_review_date <= now)
    ) or 0

    review_day = func.date(FlashcardProgress.last_reviewed_at)
    since = now - timedelta(days=RECENT_ACTIVITY_DAYS)
    recent = db.execute(
        select(review_day, func.count())
        .where(*user_rows, FlashcardProgress.last_reviewed_at >= since)
        .group_by(review_day)
        .order_by(review_day)
    ).all()

    return {
        'total_flashcards': total,
        'studied': studied,
        'not_started': total - studied,
        'new': new_count,
        'learning': learning_count,
        'known': known_count,
        'due_for_review': due,
        'completion_percentage': _percentage(studied, total),
        'mastery_percentage': _percentage(known_count, total),
        'recent_activity': [{'date': str(day), 'count': count} for day, count in recent],
    }
