"""SM-2 spaced repetition scheduler."""

import math
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from typing import Dict, Optional

from study.clock import ensure_utc, resolve_now

DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
PASSING_QUALITY = 3
MAX_INTERVAL_DAYS = 36500


class InvalidQuality(ValueError):
    """Raised when a quality grade is not an integer in 0-5."""


@dataclass(frozen=True)
class ReviewSchedule:
    """Scheduling parameters produced by a single review."""
    ease_factor: float
    interval_days: int
    repetitions: int
    next_review_date: datetime

    def to_dict(self) -> Dict:
        d = asdict(self)
        d['next_review_date'] = self.next_review_date.isoformat()
        return d


def _round_half_up(value: float, ndigits: int = 0) -> float:
    scale = 10 ** ndigits
    return math.floor(value * scale + 0.5) / scale


def _validate_quality(quality) -> int:
    # bool is an int subclass; True/False are not grades
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidQuality(f"Quality must be an integer 0-5, got {quality!r}")
    if not (0 <= quality <= 5):
        raise InvalidQuality(f"Quality must be 0-5, got {quality}")
    return quality


def calculate_next_review(
    quality: int,
    ease_factor: float = DEFAULT_EASE_FACTOR,
    interval_days: int = 0,
    repetitions: int = 0,
    now: Optional[datetime] = None,
) -> ReviewSchedule:
    """
    SM-2 spaced repetition scheduling.

    Args:
        quality:       Recall grade 0-5 (0=blackout, 3=correct with effort, 5=perfect)
        ease_factor:   Current ease factor (2.5 for a card never studied)
        interval_days: Current interval in days (0 for a card never studied)
        repetitions:   Consecutive successful reviews so far (0 for a card never studied)
        now:           Review time; defaults to the UTC clock

    Returns:
        ReviewSchedule with the new ease factor, interval (capped at
        MAX_INTERVAL_DAYS), repetitions and
        next review date (now + interval calendar days).

    Raises:
        InvalidQuality if quality is not an integer in 0-5.
    """
    quality = _validate_quality(quality)
    now = resolve_now(now)

    # EF' = EF + (0.1 - (5-q) * (0.08 + (5-q) * 0.02)); runs for lapses too
    miss = 5 - quality
    new_ease = ease_factor + (0.1 - miss * (0.08 + miss * 0.02))
    new_ease = max(MIN_EASE_FACTOR, new_ease)
    # Interval growth uses the rounded ease
    new_ease = max(MIN_EASE_FACTOR, _round_half_up(new_ease, 2))

    if quality < PASSING_QUALITY:
        new_reps = 0
        new_interval = 1
    else:
        new_reps = repetitions + 1
        if new_reps == 1:
            new_interval = 1
        elif new_reps == 2:
            new_interval = 6
        else:
            grown = _round_half_up(min(interval_days, MAX_INTERVAL_DAYS) * new_ease)
            new_interval = min(MAX_INTERVAL_DAYS, int(grown))

    return ReviewSchedule(
        ease_factor=new_ease,
        interval_days=new_interval,
        repetitions=new_reps,
        next_review_date=now + timedelta(days=new_interval),
    )


def is_due(next_review_date: datetime, now: Optional[datetime] = None) -> bool:
    """A card is due once the clock reaches its next review date."""
    return resolve_now(now) >= ensure_utc(next_review_date)
