"""Pairwise Elo rating update.

Pure functions: no I/O and no state. Ratings are unbounded — they may drift
below zero or above any nominal ceiling — and are rounded to whole points
after every update.
"""

from __future__ import annotations

from elocompare_core.constants import K_FACTOR
from elocompare_store.models import OUTCOMES


def expected_score(rating_a: float, rating_b: float) -> float:
    """Probability of A beating B under the logistic Elo curve (400-point scale)."""
    return 1.0 / (1.0 + 10.0 ** ((rating_b - rating_a) / 400.0))


def elo_update(
    rating_a: float,
    rating_b: float,
    score_a: float,
    k_factor: float = K_FACTOR,
) -> tuple[int, int]:
    """Return the new (rating_a, rating_b) after one comparison.

    ``score_a`` is the outcome from A's point of view: 1 for a win, 0 for a
    loss, 0.5 for a draw. B's score is the complement.
    """
    if score_a not in OUTCOMES or isinstance(score_a, bool):
        raise ValueError(f"Invalid outcome {score_a!r}; expected 1, 0 or 0.5.")

    expected_a = expected_score(rating_a, rating_b)
    expected_b = 1.0 - expected_a
    new_a = round(rating_a + k_factor * (score_a - expected_a))
    new_b = round(rating_b + k_factor * ((1 - score_a) - expected_b))
    return new_a, new_b
