"""Telemetry helpers for Azure Functions logging."""

from __future__ import annotations

import logging
from typing import Any

from cloutscore.aggregation.models import TickResult
from cloutscore.models import VoteEvent
from cloutscore.rating.models import RatingOutcome


def log_event(logger: logging.Logger, level: int, event_name: str, **dimensions: Any) -> None:
    """Log an event with Application Insights custom dimensions."""
    if dimensions:
        logger.log(level, event_name, extra={"custom_dimensions": dimensions})
    else:
        logger.log(level, event_name)


class TelemetryTickHandler:
    """Forwards aggregation tick events to Application Insights."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def on_tick_start(self, pending: int, **kwargs: Any) -> None:
        log_event(self.logger, logging.INFO, "vote_tick_start", pending=pending)

    def on_vote_applied(self, vote: VoteEvent, outcome: RatingOutcome, **kwargs: Any) -> None:
        pass

    def on_vote_skipped(self, vote: VoteEvent, missing_profile_ids: list[str], **kwargs: Any) -> None:
        log_event(
            self.logger,
            logging.WARNING,
            "vote_skipped",
            vote_id=vote.id,
            missing_profile_ids=",".join(missing_profile_ids),
        )

    def on_tick_complete(self, result: TickResult, **kwargs: Any) -> None:
        log_event(
            self.logger,
            logging.INFO,
            "vote_tick_complete",
            votes_fetched=result.votes_fetched,
            votes_applied=result.votes_applied,
            votes_skipped=result.votes_skipped,
            profiles_updated=result.profiles_updated,
        )
