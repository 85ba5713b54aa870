"""Unit tests for the in-process vote store."""

from datetime import UTC, datetime, timedelta

import pytest

from cloutscore.aggregation import MemoryVoteStore, ProfileDelta
from cloutscore.errors import IllegalTransitionError, StoreError
from cloutscore.models import Profile, VoteEvent, VoteStatus

pytestmark = pytest.mark.unit

T0 = datetime(2026, 3, 1, 9, 0, tzinfo=UTC)


def make_vote(vote_id: str, offset_seconds: int = 0, voter_id: str = "voter") -> VoteEvent:
    return VoteEvent(
        id=vote_id,
        winner_id="a",
        loser_id="b",
        voter_id=voter_id,
        created_at=T0 + timedelta(seconds=offset_seconds),
    )


@pytest.fixture
def store():
    return MemoryVoteStore(
        [Profile(id="a", score=1000), Profile(id="b", score=150, experience_count=3)],
        [make_vote("v2", 20), make_vote("v1", 10), make_vote("v3", 30)],
    )


class TestPendingVotes:
    def test_oldest_first(self, store):
        assert [v.id for v in store.fetch_pending_votes()] == ["v1", "v2", "v3"]

    def test_limit(self, store):
        assert [v.id for v in store.fetch_pending_votes(limit=2)] == ["v1", "v2"]

    def test_sealed_votes_excluded(self, store):
        store.mark_votes_processed(["v1"])
        assert [v.id for v in store.fetch_pending_votes()] == ["v2", "v3"]
        assert store.get_vote("v1").status is VoteStatus.SEALED


class TestCommitProfileDeltas:
    """Commits are all-or-nothing."""

    def test_relative_increment(self, store):
        store.commit_profile_deltas({
            "a": ProfileDelta(score_delta=30, experience_delta=2),
            "b": ProfileDelta(score_delta=-30, experience_delta=2),
        })

        assert store.fetch_profile("a").score == 1030
        assert store.fetch_profile("b").score == 120
        assert store.fetch_profile("b").experience_count == 5

    def test_missing_profile_aborts_whole_commit(self, store):
        with pytest.raises(StoreError):
            store.commit_profile_deltas({
                "a": ProfileDelta(score_delta=30, experience_delta=1),
                "ghost": ProfileDelta(score_delta=-30, experience_delta=1),
            })

        assert store.fetch_profile("a").score == 1000

    def test_floor_violation_aborts_whole_commit(self, store):
        with pytest.raises(StoreError):
            store.commit_profile_deltas({
                "a": ProfileDelta(score_delta=60, experience_delta=1),
                "b": ProfileDelta(score_delta=-60, experience_delta=1),
            })

        assert store.fetch_profile("a").score == 1000
        assert store.fetch_profile("b").score == 150


class TestMarkVotesProcessed:
    def test_unknown_vote_aborts_seal(self, store):
        with pytest.raises(StoreError):
            store.mark_votes_processed(["v1", "nope"])

        assert store.get_vote("v1").status is VoteStatus.PENDING

    def test_resealing_is_rejected(self, store):
        store.mark_votes_processed(["v1"])

        with pytest.raises(IllegalTransitionError):
            store.mark_votes_processed(["v2", "v1"])

        assert store.get_vote("v2").status is VoteStatus.PENDING


class TestClientOperations:
    def test_append_vote_duplicate_id(self, store):
        with pytest.raises(StoreError):
            store.append_vote(make_vote("v1"))

    def test_create_profile_duplicate_id(self, store):
        with pytest.raises(StoreError):
            store.create_profile(Profile(id="a"))

    def test_recent_votes_by_voter(self, store):
        store.append_vote(make_vote("other", 40, voter_id="someone-else"))

        recent = store.recent_votes_by_voter("voter", since=T0 + timedelta(seconds=15))

        assert sorted(v.id for v in recent) == ["v2", "v3"]

    def test_top_profiles(self, store):
        store.create_profile(Profile(id="c", score=1400))

        assert [p.id for p in store.top_profiles(2)] == ["c", "a"]
