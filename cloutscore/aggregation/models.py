"""Data models for the vote aggregation pipeline."""

from pydantic import BaseModel, ConfigDict, Field


class ProfileDelta(BaseModel):
    """Net relative increment committed to one profile by one tick."""
    model_config = ConfigDict(frozen=True)

    score_delta: int = 0
    experience_delta: int = 0


class TickResult(BaseModel):
    """Summary of one aggregation tick."""
    votes_fetched: int = 0
    votes_applied: int = 0
    votes_skipped: int = 0
    deltas: dict[str, ProfileDelta] = Field(default_factory=dict)
    sealed_ids: list[str] = Field(default_factory=list)
    skipped_ids: list[str] = Field(default_factory=list)

    @property
    def profiles_updated(self) -> int:
        return len(self.deltas)

    @property
    def is_noop(self) -> bool:
        return self.votes_fetched == 0


class AggregatorConfig(BaseModel):
    """Configuration for the aggregation pipeline."""
    # Upper bound on votes fetched per tick; None = all pending votes.
    # Stores with a per-transaction operation limit must set this.
    max_votes: int | None = Field(default=None, ge=1)
