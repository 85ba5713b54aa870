"""Timer-triggered vote aggregation."""

from __future__ import annotations

import logging

import azure.functions as func

from cloutscore.aggregation import AggregatorConfig, VoteAggregator
from cloutscore.errors import SealFailedError

from .clients import get_vote_store
from .config import MAX_VOTES_PER_TICK, VOTE_BATCH_SCHEDULE, logger
from .telemetry import TelemetryTickHandler, log_event

bp = func.Blueprint()

_aggregator: VoteAggregator | None = None


def get_aggregator() -> VoteAggregator:
    global _aggregator
    if _aggregator is None:
        _aggregator = VoteAggregator(
            get_vote_store(),
            config=AggregatorConfig(max_votes=MAX_VOTES_PER_TICK),
            event_handler=TelemetryTickHandler(logger),
        )
    return _aggregator


# The host holds a blob lease per timer function, so one instance fires each
# occurrence and ticks never overlap between hosts. use_monitor only persists
# schedule state, which is what makes past_due detection work.
@bp.timer_trigger(
    schedule=VOTE_BATCH_SCHEDULE,
    arg_name="timer",
    run_on_startup=False,
    use_monitor=True,
)
def process_votes(timer: func.TimerRequest) -> None:
    """Aggregate pending votes into profile scores."""
    if timer.past_due:
        logger.warning("process_votes timer is past due")

    try:
        result = get_aggregator().run_tick()
    except SealFailedError as exc:
        log_event(
            logger,
            logging.ERROR,
            "vote_seal_failed",
            profiles_committed=len(exc.committed_deltas),
            vote_ids=",".join(exc.vote_ids),
            error=exc.message,
        )
        raise
    except Exception:
        logger.exception("process_votes tick failed")
        raise

    if result.is_noop:
        logger.info("No unprocessed votes found.")
        return

    logger.info(
        "Processed %d votes (%d skipped), updated %d profiles",
        result.votes_applied,
        result.votes_skipped,
        result.profiles_updated,
    )
