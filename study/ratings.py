"""Study-button ratings and the status label derived from repetitions."""

from enum import Enum
from typing import Dict


class InvalidRating(ValueError):
    """Raised when a rating is not one of forgot/hard/good/easy."""


class Rating(str, Enum):
    """The four buttons offered after revealing an answer."""
    FORGOT = "forgot"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"


class CardStatus(str, Enum):
    """Coarse progress label, always derived from repetitions."""
    NEW = "new"
    LEARNING = "learning"
    KNOWN = "known"


# Qualities 1 and 2 are never produced; "hard" still counts as a successful recall.
RATING_QUALITY: Dict[Rating, int] = {
    Rating.FORGOT: 0,
    Rating.HARD: 3,
    Rating.GOOD: 4,
    Rating.EASY: 5,
}

KNOWN_REPETITIONS = 3


def parse_rating(rating) -> Rating:
    if isinstance(rating, Rating):
        return rating
    try:
        return Rating(rating)
    except ValueError:
        raise InvalidRating(
            f"Invalid rating {rating!r}. Must be: forgot, hard, good, or easy"
        ) from None


def quality_for_rating(rating) -> int:
    """Map a study-button rating to an SM-2 quality (0-5)."""
    return RATING_QUALITY[parse_rating(rating)]


def status_for_repetitions(repetitions: int) -> CardStatus:
    if repetitions >= KNOWN_REPETITIONS:
        return CardStatus.KNOWN
    if repetitions > 0:
        return CardStatus.LEARNING
    return CardStatus.NEW
