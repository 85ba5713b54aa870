"""Cosmos DB implementation of the vote and profile store.

Profiles and votes live in two containers, both partitioned on ``/board``
with one value per leaderboard. Keeping a leaderboard in a single logical
partition is what lets a transactional batch cover every profile of a tick.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from azure.core.exceptions import AzureError
from azure.cosmos import exceptions as cosmos_exceptions
from pydantic import ValidationError

from cloutscore.aggregation.models import ProfileDelta
from cloutscore.constants import INITIAL_SCORE, MIN_SCORE
from cloutscore.errors import StoreError
from cloutscore.models import Profile, VoteEvent, VoteStatus, isoformat_utc

from .config import COSMOS_BATCH_LIMIT, PARTITION_KEY_FIELD, logger
from .utils import now_iso

PENDING_VOTES_QUERY = "SELECT {top}* FROM c WHERE c.processed = false ORDER BY c.created_at ASC"
RECENT_VOTES_QUERY = "SELECT * FROM c WHERE c.voter_id = @voter_id AND c.created_at > @since"
TOP_PROFILES_QUERY = "SELECT TOP @limit * FROM c ORDER BY c.score DESC"

RATING_FIELDS = ("score", "experience_count")


class CosmosVoteStore:
    def __init__(self, profiles, votes, partition: str):
        self.profiles = profiles
        self.votes = votes
        self.partition = partition
        # profile id -> rating fields its stored document lacks, as of the last read
        self._unrated_fields: dict[str, set[str]] = {}

    def _query(self, container, query: str, parameters: list[dict[str, Any]] | None = None) -> list[dict[str, Any]]:
        try:
            return list(
                container.query_items(
                    query=query,
                    parameters=parameters or [],
                    partition_key=self.partition,
                )
            )
        except AzureError as exc:
            raise StoreError(f"Cosmos query failed: {exc}") from exc

    def _execute_batch(self, container, operations: list[tuple], what: str) -> None:
        if len(operations) > COSMOS_BATCH_LIMIT:
            raise StoreError(
                f"Cannot {what} atomically: {len(operations)} operations exceed the "
                f"Cosmos batch limit of {COSMOS_BATCH_LIMIT}"
            )
        try:
            container.execute_item_batch(batch_operations=operations, partition_key=self.partition)
        except AzureError as exc:
            raise StoreError(f"Failed to {what}: {exc}") from exc

    @staticmethod
    def _parse(model, doc: dict[str, Any]):
        try:
            return model.from_document(doc)
        except (KeyError, ValidationError) as exc:
            raise StoreError(f"Malformed {model.__name__} document {doc.get('id')!r}: {exc}") from exc

    # Pipeline side

    def fetch_pending_votes(self, limit: int | None = None) -> list[VoteEvent]:
        if limit is None:
            docs = self._query(self.votes, PENDING_VOTES_QUERY.format(top=""))
        else:
            docs = self._query(
                self.votes,
                PENDING_VOTES_QUERY.format(top="TOP @limit "),
                [{"name": "@limit", "value": limit}],
            )
        return [self._parse(VoteEvent, doc) for doc in docs]

    def fetch_profile(self, profile_id: str) -> Profile | None:
        try:
            doc = self.profiles.read_item(item=profile_id, partition_key=self.partition)
        except cosmos_exceptions.CosmosResourceNotFoundError:
            return None
        except AzureError as exc:
            raise StoreError(f"Failed to read profile {profile_id}: {exc}") from exc
        profile = self._parse(Profile, doc)
        missing = {field for field in RATING_FIELDS if not isinstance(doc.get(field), int)}
        if missing:
            self._unrated_fields[profile_id] = missing
        else:
            self._unrated_fields.pop(profile_id, None)
        return profile

    def _profile_patch(self, profile_id: str, delta: ProfileDelta) -> tuple:
        """Build one profile's patch operation for the commit batch.

        ``incr`` on an absent field would store the bare delta, so fields the
        last read found missing are written as absolute values from their
        defaults instead, guarded on still being missing.
        """
        unrated = self._unrated_fields.get(profile_id, set())
        patch_ops = []
        clauses = []
        for field, default, change in (
            ("score", INITIAL_SCORE, delta.score_delta),
            ("experience_count", 0, delta.experience_delta),
        ):
            if field in unrated:
                patch_ops.append({"op": "set", "path": f"/{field}", "value": default + change})
                clauses.append(f"NOT IS_NUMBER(c.{field})")
            else:
                patch_ops.append({"op": "incr", "path": f"/{field}", "value": change})
        if delta.score_delta < 0 and "score" not in unrated:
            # Reject the whole batch rather than push a concurrently lowered score under the floor.
            clauses.append(f"c.score >= {MIN_SCORE - delta.score_delta}")
        if clauses:
            condition = {"filter_predicate": "FROM c WHERE " + " AND ".join(clauses)}
            return ("patch", (profile_id, patch_ops), condition)
        return ("patch", (profile_id, patch_ops))

    def commit_profile_deltas(self, deltas: dict[str, ProfileDelta]) -> None:
        operations = [self._profile_patch(profile_id, delta) for profile_id, delta in deltas.items()]
        if operations:
            self._execute_batch(self.profiles, operations, "commit profile deltas")
            for profile_id in deltas:
                self._unrated_fields.pop(profile_id, None)

    def mark_votes_processed(self, vote_ids: list[str]) -> None:
        sealed_at = now_iso()
        patch_ops = [
            {"op": "set", "path": "/processed", "value": True},
            {"op": "set", "path": "/status", "value": VoteStatus.SEALED.value},
            {"op": "set", "path": "/processed_at", "value": sealed_at},
        ]
        # Sealing is one-way: a vote that is already sealed fails the batch.
        condition = {"filter_predicate": "FROM c WHERE c.processed = false"}
        operations = [("patch", (vote_id, patch_ops), condition) for vote_id in vote_ids]
        if operations:
            self._execute_batch(self.votes, operations, "seal votes")

    # Client side

    def append_vote(self, vote: VoteEvent) -> VoteEvent:
        try:
            self.votes.create_item(vote.to_document(**{PARTITION_KEY_FIELD: self.partition}))
        except AzureError as exc:
            raise StoreError(f"Failed to append vote: {exc}") from exc
        return vote

    def create_profile(self, profile: Profile) -> Profile:
        try:
            self.profiles.create_item(profile.to_document(**{PARTITION_KEY_FIELD: self.partition}))
        except cosmos_exceptions.CosmosResourceExistsError as exc:
            raise StoreError(f"Profile '{profile.id}' already exists") from exc
        except AzureError as exc:
            raise StoreError(f"Failed to create profile: {exc}") from exc
        return profile

    def list_profiles(self) -> list[Profile]:
        return [self._parse(Profile, doc) for doc in self._query(self.profiles, "SELECT * FROM c")]

    def recent_votes_by_voter(self, voter_id: str, since: datetime) -> list[VoteEvent]:
        docs = self._query(
            self.votes,
            RECENT_VOTES_QUERY,
            [
                {"name": "@voter_id", "value": voter_id},
                {"name": "@since", "value": isoformat_utc(since)},
            ],
        )
        return [self._parse(VoteEvent, doc) for doc in docs]

    def top_profiles(self, limit: int) -> list[Profile]:
        docs = self._query(self.profiles, TOP_PROFILES_QUERY, [{"name": "@limit", "value": limit}])
        return [self._parse(Profile, doc) for doc in docs]

    def ping(self) -> bool:
        """Lightweight connectivity check for health endpoints."""
        try:
            self._query(self.profiles, "SELECT TOP 1 c.id FROM c")
            return True
        except StoreError as exc:
            logger.warning("Cosmos DB connection test failed: %s", exc)
            return False
