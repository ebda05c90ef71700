"""Tests for study/ratings.py -- button ratings and derived status."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest
from study.ratings import (
    CardStatus,
    InvalidRating,
    Rating,
    parse_rating,
    quality_for_rating,
    status_for_repetitions,
)


@pytest.mark.parametrize("rating,quality", [
    ("forgot", 0),
    ("hard", 3),
    ("good", 4),
    ("easy", 5),
])
def test_rating_to_quality(rating, quality):
    assert quality_for_rating(rating) == quality
    assert quality_for_rating(Rating(rating)) == quality


def test_hard_counts_as_passing():
    """'hard' maps to 3, so it still advances repetitions."""
    assert quality_for_rating("hard") >= 3


def test_no_rating_produces_quality_1_or_2():
    assert {quality_for_rating(r) for r in Rating}.isdisjoint({1, 2})


@pytest.mark.parametrize("rating", ["again", "Good", "", " easy", None, 4])
def test_unknown_rating_raises(rating):
    with pytest.raises(InvalidRating):
        quality_for_rating(rating)


def test_parse_rating_passthrough():
    assert parse_rating(Rating.GOOD) is Rating.GOOD
    assert parse_rating("easy") is Rating.EASY


@pytest.mark.parametrize("repetitions,status", [
    (0, CardStatus.NEW),
    (1, CardStatus.LEARNING),
    (2, CardStatus.LEARNING),
    (3, CardStatus.KNOWN),
    (4, CardStatus.KNOWN),
    (25, CardStatus.KNOWN),
])
def test_status_for_repetitions(repetitions, status):
    assert status_for_repetitions(repetitions) is status


def test_status_values_are_strings():
    assert [s.value for s in CardStatus] == ["new", "learning", "known"]
