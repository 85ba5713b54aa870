"""Volatility-adjusted Elo rating for pairwise profile votes."""

from cloutscore.rating.elo import compute_outcome, expected_score, is_established, k_factor
from cloutscore.rating.models import PairingOutcomes, RatingOutcome, VotingPair
from cloutscore.rating.pairing import (
    build_voting_pair,
    precompute_outcomes,
    prefetch_pairs,
    select_random_pair,
)

__all__ = [
    "compute_outcome",
    "expected_score",
    "is_established",
    "k_factor",
    "precompute_outcomes",
    "select_random_pair",
    "build_voting_pair",
    "prefetch_pairs",
    "RatingOutcome",
    "PairingOutcomes",
    "VotingPair",
]
