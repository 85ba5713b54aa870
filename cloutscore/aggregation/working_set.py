"""Per-tick in-memory profile state used during vote replay."""

from collections.abc import Iterable

from pydantic import BaseModel

from cloutscore.aggregation.models import ProfileDelta
from cloutscore.aggregation.store import VoteStore
from cloutscore.logging import get_logger
from cloutscore.models import Profile, VoteEvent
from cloutscore.rating.elo import compute_outcome
from cloutscore.rating.models import RatingOutcome

log = get_logger(__name__)


class WorkingProfile(BaseModel):
    """Mutable replay state for one profile, remembering its snapshot."""
    profile_id: str
    original_score: int
    original_experience_count: int
    score: int
    experience_count: int
    touched: bool = False

    @classmethod
    def from_profile(cls, profile: Profile) -> "WorkingProfile":
        return cls(
            profile_id=profile.id,
            original_score=profile.score,
            original_experience_count=profile.experience_count,
            score=profile.score,
            experience_count=profile.experience_count,
        )

    def delta(self) -> ProfileDelta:
        return ProfileDelta(
            score_delta=self.score - self.original_score,
            experience_delta=self.experience_count - self.original_experience_count,
        )


class ProfileWorkingSet:
    """Snapshot of every profile a tick touches, owned by that tick alone.

    Votes are applied against the current in-memory state, so several votes
    on the same profile within one tick compound instead of all being rated
    against the pre-tick snapshot.
    """

    def __init__(self):
        self._profiles: dict[str, WorkingProfile] = {}
        self.missing: set[str] = set()

    @classmethod
    def snapshot(cls, store: VoteStore, profile_ids: Iterable[str]) -> "ProfileWorkingSet":
        """Read each profile once from the store.

        Profiles the store does not know are recorded in ``missing``.
        """
        working_set = cls()
        for profile_id in profile_ids:
            profile = store.fetch_profile(profile_id)
            if profile is None:
                working_set.missing.add(profile_id)
            else:
                working_set.add(profile)
        log.debug(
            "working_set_snapshot",
            profiles=len(working_set._profiles),
            missing=len(working_set.missing),
        )
        return working_set

    def add(self, profile: Profile) -> None:
        self._profiles[profile.id] = WorkingProfile.from_profile(profile)

    def __contains__(self, profile_id: str) -> bool:
        return profile_id in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)

    def get(self, profile_id: str) -> WorkingProfile:
        return self._profiles[profile_id]

    def missing_for(self, vote: VoteEvent) -> list[str]:
        return [pid for pid in vote.profile_ids if pid not in self._profiles]

    def apply(self, vote: VoteEvent) -> RatingOutcome:
        """Rate one vote against current state and fold the result in.

        Raises:
            KeyError: the vote references a profile outside the working set
        """
        winner = self._profiles[vote.winner_id]
        loser = self._profiles[vote.loser_id]

        outcome = compute_outcome(winner, loser)

        winner.score += outcome.winner_change
        winner.experience_count += 1
        winner.touched = True
        loser.score += outcome.loser_change
        loser.experience_count += 1
        loser.touched = True
        return outcome

    def deltas(self) -> dict[str, ProfileDelta]:
        """Net change per touched profile, relative to the snapshot."""
        return {
            profile_id: wp.delta()
            for profile_id, wp in self._profiles.items()
            if wp.touched
        }
