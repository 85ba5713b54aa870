"""Domain models for profiles and vote events.

Stored documents are loosely shaped; they are validated into these
fixed-field models at the storage boundary via ``from_document``.
"""

import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator

from cloutscore.constants import INITIAL_SCORE, MIN_SCORE
from cloutscore.errors import IllegalTransitionError


def utc_now() -> datetime:
    return datetime.now(UTC)


def isoformat_utc(dt: datetime) -> str:
    """Fixed-width UTC timestamp, e.g. 2026-01-01T12:00:00.000000Z.

    The store orders votes by comparing these strings, so the fraction is
    always written even when it is zero.
    """
    return dt.astimezone(UTC).isoformat(timespec="microseconds").replace("+00:00", "Z")


class Profile(BaseModel):
    """A ranked entity.

    ``score`` and ``experience_count`` are only ever changed by the
    aggregation pipeline; the identity fields belong to the client side.
    """
    id: str
    score: int = Field(default=INITIAL_SCORE, ge=MIN_SCORE)
    experience_count: int = Field(default=0, ge=0)  # votes taken part in
    first_name: str = ""
    last_name: str = ""
    image_url: str = ""
    is_auth_user: bool = True
    created_at: datetime | None = None

    @field_serializer("created_at")
    def _serialize_created_at(self, value: datetime | None) -> str | None:
        return None if value is None else isoformat_utc(value)

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip() or self.id

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "Profile":
        """Build a Profile from a stored document.

        Missing rating fields fall back to a freshly created profile's values.
        """
        score = doc.get("score")
        experience_count = doc.get("experience_count")
        return cls(
            id=str(doc["id"]),
            score=INITIAL_SCORE if score is None else score,
            experience_count=0 if experience_count is None else experience_count,
            first_name=doc.get("first_name") or "",
            last_name=doc.get("last_name") or "",
            image_url=doc.get("image_url") or "",
            is_auth_user=bool(doc.get("is_auth_user", True)),
            created_at=doc.get("created_at"),
        )

    def to_document(self, **extra: Any) -> dict[str, Any]:
        doc = self.model_dump(mode="json")
        doc.update(extra)
        return doc


class VoteStatus(str, Enum):
    """Lifecycle of a vote event. The only transition is PENDING -> SEALED."""
    PENDING = "pending"
    SEALED = "sealed"


class VoteEvent(BaseModel):
    """One pairwise outcome: ``winner_id`` beat ``loser_id``.

    Vote events are immutable; sealing returns a new sealed copy.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    winner_id: str
    loser_id: str
    voter_id: str
    created_at: datetime
    status: VoteStatus = VoteStatus.PENDING

    @field_serializer("created_at")
    def _serialize_created_at(self, value: datetime) -> str:
        return isoformat_utc(value)

    @model_validator(mode="after")
    def _check_distinct_profiles(self) -> "VoteEvent":
        if self.winner_id == self.loser_id:
            raise ValueError("winner_id and loser_id must reference distinct profiles")
        return self

    @property
    def processed(self) -> bool:
        return self.status is VoteStatus.SEALED

    @property
    def profile_ids(self) -> tuple[str, str]:
        return self.winner_id, self.loser_id

    def seal(self) -> "VoteEvent":
        if self.status is VoteStatus.SEALED:
            raise IllegalTransitionError(f"Vote {self.id} is already sealed")
        return self.model_copy(update={"status": VoteStatus.SEALED})

    def is_matchup(self, profile_a: str, profile_b: str) -> bool:
        """True if this vote was between the two profiles, in either direction."""
        return {self.winner_id, self.loser_id} == {profile_a, profile_b}

    @classmethod
    def new(
        cls,
        winner_id: str,
        loser_id: str,
        voter_id: str,
        created_at: datetime | None = None,
    ) -> "VoteEvent":
        return cls(
            id=str(uuid.uuid4()),
            winner_id=winner_id,
            loser_id=loser_id,
            voter_id=voter_id,
            created_at=created_at or utc_now(),
        )

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "VoteEvent":
        """Build a VoteEvent from a stored document.

        Documents written before ``status`` existed only carry ``processed``.
        """
        status = doc.get("status")
        if status is None:
            status = VoteStatus.SEALED if doc.get("processed") else VoteStatus.PENDING
        return cls(
            id=str(doc["id"]),
            winner_id=doc["winner_id"],
            loser_id=doc["loser_id"],
            voter_id=doc.get("voter_id") or "",
            created_at=doc["created_at"],
            status=status,
        )

    def to_document(self, **extra: Any) -> dict[str, Any]:
        doc = self.model_dump(mode="json")
        doc["processed"] = self.processed
        doc.update(extra)
        return doc


class Ranking(BaseModel):
    """A profile's position on the leaderboard (1-based)."""
    rank: int
    profile: Profile
