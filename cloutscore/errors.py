"""Exception hierarchy for CloutScore."""

from __future__ import annotations


class CloutScoreError(Exception):
    """Base exception for CloutScore."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class StoreError(CloutScoreError):
    """A read or write against the backing document store failed."""


class SealFailedError(StoreError):
    """Profile deltas were committed but the source votes could not be sealed.

    The votes stay pending and will be replayed by a later tick against the
    post-commit scores.
    """

    def __init__(self, message: str, committed_deltas: dict, vote_ids: list[str]) -> None:
        super().__init__(message)
        self.committed_deltas = committed_deltas
        self.vote_ids = vote_ids


class ProfileNotFoundError(CloutScoreError):
    def __init__(self, profile_id: str) -> None:
        self.profile_id = profile_id
        super().__init__(f"Profile with id '{profile_id}' not found")


class InvalidVoteError(CloutScoreError):
    """A vote was rejected before being appended."""


class DuplicateVoteError(InvalidVoteError):
    """The voter already recorded this matchup inside the anti-abuse window."""


class IllegalTransitionError(CloutScoreError):
    """A vote was asked to move to a status it cannot reach."""


class NotEnoughProfilesError(CloutScoreError):
    def __init__(self, needed: int, available: int) -> None:
        self.needed = needed
        self.available = available
        super().__init__(f"Not enough profiles. Need at least {needed}, have {available}.")


class TickInProgressError(CloutScoreError):
    """An aggregation tick was started while another one is still running."""
