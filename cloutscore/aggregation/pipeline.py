"""Batch aggregation of pending votes into profile scores.

One tick:
1. fetch pending votes (none -> no-op)
2. order them by arrival
3. snapshot every referenced profile once
4. replay votes sequentially against the snapshot, skipping votes whose
   profiles are missing
5. commit the net per-profile deltas as relative increments (atomic)
6. seal every fetched vote (atomic, only after 5 succeeded)

If step 6 fails after step 5 committed, the votes remain pending and a later
tick replays them against the already-updated scores. That window is not
closed here.
"""

import threading

from cloutscore.aggregation.models import AggregatorConfig, TickResult
from cloutscore.aggregation.store import VoteStore
from cloutscore.aggregation.working_set import ProfileWorkingSet
from cloutscore.errors import SealFailedError, StoreError, TickInProgressError
from cloutscore.events import NullTickEventHandler, TickEventHandler
from cloutscore.logging import get_logger
from cloutscore.models import VoteEvent

log = get_logger(__name__)


def order_votes(votes: list[VoteEvent]) -> list[VoteEvent]:
    """Arrival order: creation time, ties keep the order the store returned."""
    return sorted(votes, key=lambda v: v.created_at)


def referenced_profile_ids(votes: list[VoteEvent]) -> list[str]:
    """Distinct profile ids referenced by the votes, in first-seen order."""
    return list(dict.fromkeys(pid for vote in votes for pid in vote.profile_ids))


class VoteAggregator:
    """Turns pending votes into committed profile score updates.

    Ticks on one aggregator never overlap; a second concurrent call fails
    fast with TickInProgressError instead of waiting.
    """

    def __init__(
        self,
        store: VoteStore,
        config: AggregatorConfig | None = None,
        event_handler: TickEventHandler | None = None
    ):
        self.store = store
        self.config = config or AggregatorConfig()
        self.event_handler = event_handler or NullTickEventHandler()
        self._tick_lock = threading.Lock()

    def run_tick(self) -> TickResult:
        """Run one aggregation tick.

        Returns:
            TickResult describing what was applied and sealed

        Raises:
            TickInProgressError: another tick is still running
            StoreError: fetch or commit failed; nothing was sealed
            SealFailedError: deltas were committed but sealing failed
        """
        if not self._tick_lock.acquire(blocking=False):
            raise TickInProgressError("An aggregation tick is already running")
        try:
            return self._run_tick()
        except Exception as exc:
            log.error("tick_failed", error=str(exc), error_type=type(exc).__name__)
            raise
        finally:
            self._tick_lock.release()

    def _run_tick(self) -> TickResult:
        log.info("tick_started", max_votes=self.config.max_votes)

        votes = self.store.fetch_pending_votes(limit=self.config.max_votes)
        if not votes:
            log.info("tick_noop", reason="no_pending_votes")
            return TickResult()

        votes = order_votes(votes)
        self.event_handler.on_tick_start(len(votes))
        log.info("votes_fetched", count=len(votes))

        working_set = ProfileWorkingSet.snapshot(self.store, referenced_profile_ids(votes))
        result = self._replay(votes, working_set)

        if result.deltas:
            self.store.commit_profile_deltas(result.deltas)
            log.info("profiles_committed", count=result.profiles_updated)

        vote_ids = [vote.id for vote in votes]
        try:
            self.store.mark_votes_processed(vote_ids)
        except StoreError as exc:
            raise SealFailedError(
                f"Committed {result.profiles_updated} profile deltas but failed to seal "
                f"{len(vote_ids)} votes: {exc}",
                committed_deltas=result.deltas,
                vote_ids=vote_ids,
            ) from exc
        result.sealed_ids = vote_ids
        log.info("votes_sealed", count=len(vote_ids))

        log.info(
            "tick_complete",
            votes_fetched=result.votes_fetched,
            votes_applied=result.votes_applied,
            votes_skipped=result.votes_skipped,
            profiles_updated=result.profiles_updated,
        )
        self.event_handler.on_tick_complete(result)
        return result

    def _replay(self, votes: list[VoteEvent], working_set: ProfileWorkingSet) -> TickResult:
        """Apply votes in order, accumulating deltas in the working set."""
        result = TickResult(votes_fetched=len(votes))

        for vote in votes:
            missing = working_set.missing_for(vote)
            if missing:
                log.warning(
                    "vote_skipped_missing_profile",
                    vote_id=vote.id,
                    winner_id=vote.winner_id,
                    loser_id=vote.loser_id,
                    missing=missing,
                )
                result.skipped_ids.append(vote.id)
                self.event_handler.on_vote_skipped(vote, missing)
                continue

            outcome = working_set.apply(vote)
            result.votes_applied += 1
            self.event_handler.on_vote_applied(vote, outcome)

        result.votes_skipped = len(result.skipped_ids)
        result.deltas = working_set.deltas()
        return result
