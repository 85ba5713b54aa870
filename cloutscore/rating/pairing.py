"""Voting pair selection and outcome precomputation.

Everything here runs against a client's last-known profile snapshot and is
for display only; the aggregation pipeline recomputes authoritative changes.
"""

import random

from cloutscore.constants import PREFETCH_COUNT
from cloutscore.errors import NotEnoughProfilesError
from cloutscore.models import Profile
from cloutscore.rating.elo import compute_outcome
from cloutscore.rating.models import PairingOutcomes, VotingPair


def precompute_outcomes(profile_a: Profile, profile_b: Profile) -> PairingOutcomes:
    """Compute both possible outcomes for a pair up front.

    Args:
        profile_a: First profile shown
        profile_b: Second profile shown

    Returns:
        PairingOutcomes where ``outcome_a`` is A beating B and
        ``outcome_b`` is B beating A
    """
    return PairingOutcomes(
        outcome_a=compute_outcome(profile_a, profile_b),
        outcome_b=compute_outcome(profile_b, profile_a),
    )


def select_random_pair(
    profiles: list[Profile],
    exclude_id: str | None = None,
    rng: random.Random | None = None,
) -> tuple[Profile, Profile]:
    """Pick two distinct profiles uniformly at random.

    Raises:
        NotEnoughProfilesError: fewer than two profiles remain after exclusion
    """
    available = [p for p in profiles if p.id != exclude_id] if exclude_id else list(profiles)
    if len(available) < 2:
        raise NotEnoughProfilesError(needed=2, available=len(available))

    profile_a, profile_b = (rng or random).sample(available, 2)
    return profile_a, profile_b


def build_voting_pair(profile_a: Profile, profile_b: Profile) -> VotingPair:
    outcomes = precompute_outcomes(profile_a, profile_b)
    return VotingPair(
        profile_a=profile_a,
        profile_b=profile_b,
        outcome_a=outcomes.outcome_a,
        outcome_b=outcomes.outcome_b,
    )


def prefetch_pairs(
    profiles: list[Profile],
    count: int = PREFETCH_COUNT,
    exclude_id: str | None = None,
    rng: random.Random | None = None,
) -> list[VotingPair]:
    """Build a queue of random voting pairs with outcomes precomputed."""
    pairs = []
    for _ in range(count):
        profile_a, profile_b = select_random_pair(profiles, exclude_id=exclude_id, rng=rng)
        pairs.append(build_voting_pair(profile_a, profile_b))
    return pairs
