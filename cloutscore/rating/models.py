"""Data models for rating outcomes and voting pairs."""

from pydantic import BaseModel, ConfigDict

from cloutscore.models import Profile


class RatingOutcome(BaseModel):
    """Score change each side receives for one comparison.

    Changes are already floor-adjusted: adding them to the original scores
    never goes below MIN_SCORE.
    """
    model_config = ConfigDict(frozen=True)

    winner_change: int
    loser_change: int


class PairingOutcomes(BaseModel):
    """Both possible outcomes for a pair, computed before the vote is cast."""
    model_config = ConfigDict(frozen=True)

    outcome_a: RatingOutcome  # profile A beats profile B
    outcome_b: RatingOutcome  # profile B beats profile A


class VotingPair(BaseModel):
    """Two profiles shown side by side with their potential score swings."""
    profile_a: Profile
    profile_b: Profile
    outcome_a: RatingOutcome
    outcome_b: RatingOutcome
