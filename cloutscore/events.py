"""Event hooks for observing aggregation ticks.

The pipeline emits these without knowing who listens; the Functions app
forwards them to Application Insights and tests record them.
"""

from typing import TYPE_CHECKING, Any, Protocol

from cloutscore.models import VoteEvent

if TYPE_CHECKING:
    from cloutscore.aggregation.models import TickResult
    from cloutscore.rating.models import RatingOutcome


class TickEventHandler(Protocol):
    """Protocol for handlers that observe an aggregation tick."""

    def on_tick_start(self, pending: int, **kwargs: Any) -> None:
        """Called after pending votes were fetched.

        Args:
            pending: Number of votes fetched for this tick
            **kwargs: Additional context
        """
        ...

    def on_vote_applied(
        self,
        vote: VoteEvent,
        outcome: "RatingOutcome",
        **kwargs: Any
    ) -> None:
        """Called after a vote was replayed into the working set.

        Args:
            vote: The vote that was applied
            outcome: Floor-adjusted changes it produced
            **kwargs: Additional context
        """
        ...

    def on_vote_skipped(
        self,
        vote: VoteEvent,
        missing_profile_ids: list[str],
        **kwargs: Any
    ) -> None:
        """Called when a vote references a profile that does not exist.

        Args:
            vote: The skipped vote
            missing_profile_ids: Referenced ids that were not found
            **kwargs: Additional context
        """
        ...

    def on_tick_complete(self, result: "TickResult", **kwargs: Any) -> None:
        """Called once deltas are committed and votes sealed.

        Args:
            result: Summary of the tick
            **kwargs: Additional context
        """
        ...


class NullTickEventHandler:
    """Handler that ignores every event."""

    def on_tick_start(self, *args: Any, **kwargs: Any) -> None:
        pass

    def on_vote_applied(self, *args: Any, **kwargs: Any) -> None:
        pass

    def on_vote_skipped(self, *args: Any, **kwargs: Any) -> None:
        pass

    def on_tick_complete(self, *args: Any, **kwargs: Any) -> None:
        pass
