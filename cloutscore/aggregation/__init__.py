"""Batch aggregation of vote events into profile scores."""

from cloutscore.aggregation.models import AggregatorConfig, ProfileDelta, TickResult
from cloutscore.aggregation.pipeline import VoteAggregator
from cloutscore.aggregation.store import MemoryVoteStore, VoteStore, VotingStore
from cloutscore.aggregation.working_set import ProfileWorkingSet

__all__ = [
    "VoteAggregator",
    "ProfileWorkingSet",
    "MemoryVoteStore",
    "VoteStore",
    "VotingStore",
    "AggregatorConfig",
    "ProfileDelta",
    "TickResult",
]
