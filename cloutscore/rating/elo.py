"""Pure Elo rating calculations with experience-based volatility."""

import math
from typing import Protocol

from cloutscore.constants import (
    ELO_SCALE,
    ESTABLISHED_PROFILE_CHANGE,
    ESTABLISHED_THRESHOLD,
    MIN_SCORE,
    NEW_PROFILE_CHANGE,
)
from cloutscore.rating.models import RatingOutcome


class Rated(Protocol):
    """Anything carrying a current score and experience count."""
    score: int
    experience_count: int


def expected_score(score_a: float, score_b: float) -> float:
    """Calculate the probability that A beats B.

    Uses the standard Elo formula: E_A = 1 / (1 + 10^((R_B - R_A) / 400))

    Args:
        score_a: Rating of A
        score_b: Rating of B

    Returns:
        Expected score (0.0 to 1.0) for A
    """
    return 1.0 / (1.0 + math.pow(10.0, (score_b - score_a) / ELO_SCALE))


def is_established(experience_count: int) -> bool:
    return experience_count >= ESTABLISHED_THRESHOLD


def k_factor(experience_count: int) -> int:
    """K-factor for one side: volatile while new, near-frozen once established."""
    if is_established(experience_count):
        return ESTABLISHED_PROFILE_CHANGE
    return NEW_PROFILE_CHANGE


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward positive infinity.

    Python's round() does banker's rounding; ratings must round 2.5 -> 3
    and -2.5 -> -2 so both sides of a matchup agree with stored history.
    """
    return math.floor(value + 0.5)


def compute_outcome(winner: Rated, loser: Rated) -> RatingOutcome:
    """Compute the score change for both sides of a decided comparison.

    Raw changes are rounded once, then the floor is applied to the resulting
    scores, and the returned changes are the difference between floored and
    original scores. A profile already at MIN_SCORE that loses again gets
    a change of exactly 0.

    Args:
        winner: Current state of the profile that won
        loser: Current state of the profile that lost

    Returns:
        RatingOutcome with floor-adjusted changes
    """
    expected_winner = expected_score(winner.score, loser.score)
    expected_loser = 1.0 - expected_winner

    # K-factors are chosen per side
    winner_k = k_factor(winner.experience_count)
    loser_k = k_factor(loser.experience_count)

    winner_raw = round_half_up(winner_k * (1.0 - expected_winner))
    loser_raw = round_half_up(loser_k * (0.0 - expected_loser))

    final_winner_score = max(MIN_SCORE, winner.score + winner_raw)
    final_loser_score = max(MIN_SCORE, loser.score + loser_raw)

    return RatingOutcome(
        winner_change=final_winner_score - winner.score,
        loser_change=final_loser_score - loser.score,
    )
