"""Store protocols and an in-process implementation.

The pipeline only needs ``VoteStore``. Clients (vote submission, profile
creation, rankings) use ``VotingStore``. Both are implemented by
``MemoryVoteStore`` here and by the Cosmos DB store in the Functions app.
"""

import threading
from datetime import datetime
from typing import Protocol

from cloutscore.aggregation.models import ProfileDelta
from cloutscore.constants import MIN_SCORE
from cloutscore.errors import StoreError
from cloutscore.models import Profile, VoteEvent, VoteStatus


class VoteStore(Protocol):
    """Transactional document store as seen by the aggregation pipeline."""

    def fetch_pending_votes(self, limit: int | None = None) -> list[VoteEvent]:
        """Return pending votes, oldest first, at most ``limit`` of them."""
        ...

    def fetch_profile(self, profile_id: str) -> Profile | None:
        ...

    def commit_profile_deltas(self, deltas: dict[str, ProfileDelta]) -> None:
        """Atomically apply relative increments to every profile in ``deltas``.

        Raises:
            StoreError: nothing was applied
        """
        ...

    def mark_votes_processed(self, vote_ids: list[str]) -> None:
        """Atomically seal every listed vote.

        Raises:
            StoreError: nothing was sealed
        """
        ...


class VotingStore(Protocol):
    """Client-facing operations: appends and reads."""

    def append_vote(self, vote: VoteEvent) -> VoteEvent:
        ...

    def create_profile(self, profile: Profile) -> Profile:
        ...

    def fetch_profile(self, profile_id: str) -> Profile | None:
        ...

    def list_profiles(self) -> list[Profile]:
        ...

    def recent_votes_by_voter(self, voter_id: str, since: datetime) -> list[VoteEvent]:
        ...

    def top_profiles(self, limit: int) -> list[Profile]:
        ...


class MemoryVoteStore:
    """In-process store with all-or-nothing batch writes.

    Votes keep insertion order, which is also their arrival order.
    """

    def __init__(
        self,
        profiles: list[Profile] | None = None,
        votes: list[VoteEvent] | None = None,
    ):
        self._lock = threading.Lock()
        self._profiles: dict[str, Profile] = {p.id: p for p in profiles or []}
        self._votes: dict[str, VoteEvent] = {v.id: v for v in votes or []}

    # Pipeline side

    def fetch_pending_votes(self, limit: int | None = None) -> list[VoteEvent]:
        with self._lock:
            pending = [v for v in self._votes.values() if v.status is VoteStatus.PENDING]
        pending.sort(key=lambda v: v.created_at)
        if limit is not None:
            pending = pending[:limit]
        return pending

    def fetch_profile(self, profile_id: str) -> Profile | None:
        with self._lock:
            return self._profiles.get(profile_id)

    def commit_profile_deltas(self, deltas: dict[str, ProfileDelta]) -> None:
        with self._lock:
            updated: dict[str, Profile] = {}
            for profile_id, delta in deltas.items():
                profile = self._profiles.get(profile_id)
                if profile is None:
                    raise StoreError(f"Cannot commit delta: profile '{profile_id}' does not exist")
                new_score = profile.score + delta.score_delta
                if new_score < MIN_SCORE:
                    raise StoreError(
                        f"Cannot commit delta: profile '{profile_id}' would drop to {new_score}"
                    )
                updated[profile_id] = profile.model_copy(update={
                    "score": new_score,
                    "experience_count": profile.experience_count + delta.experience_delta,
                })
            self._profiles.update(updated)

    def mark_votes_processed(self, vote_ids: list[str]) -> None:
        with self._lock:
            sealed: dict[str, VoteEvent] = {}
            for vote_id in vote_ids:
                vote = self._votes.get(vote_id)
                if vote is None:
                    raise StoreError(f"Cannot seal vote '{vote_id}': not found")
                sealed[vote_id] = vote.seal()
            self._votes.update(sealed)

    # Client side

    def append_vote(self, vote: VoteEvent) -> VoteEvent:
        with self._lock:
            if vote.id in self._votes:
                raise StoreError(f"Vote '{vote.id}' already exists")
            self._votes[vote.id] = vote
        return vote

    def create_profile(self, profile: Profile) -> Profile:
        with self._lock:
            if profile.id in self._profiles:
                raise StoreError(f"Profile '{profile.id}' already exists")
            self._profiles[profile.id] = profile
        return profile

    def list_profiles(self) -> list[Profile]:
        with self._lock:
            return list(self._profiles.values())

    def recent_votes_by_voter(self, voter_id: str, since: datetime) -> list[VoteEvent]:
        with self._lock:
            return [
                v for v in self._votes.values()
                if v.voter_id == voter_id and v.created_at > since
            ]

    def top_profiles(self, limit: int) -> list[Profile]:
        with self._lock:
            profiles = list(self._profiles.values())
        profiles.sort(key=lambda p: p.score, reverse=True)
        return profiles[:limit]

    def get_vote(self, vote_id: str) -> VoteEvent | None:
        with self._lock:
            return self._votes.get(vote_id)
