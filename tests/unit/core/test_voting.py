"""Unit tests for client-side voting operations."""

import pytest

from cloutscore.aggregation import MemoryVoteStore, VoteAggregator
from cloutscore.errors import DuplicateVoteError, InvalidVoteError, ProfileNotFoundError, StoreError
from cloutscore.models import Profile, VoteStatus
from cloutscore.voting import create_profile, fetch_rankings, get_profile, has_voted_recently, submit_vote

pytestmark = pytest.mark.unit


@pytest.fixture
def store():
    return MemoryVoteStore([Profile(id="a"), Profile(id="b"), Profile(id="c", score=1200)])


class TestCreateProfile:
    def test_new_profile_defaults(self, store):
        profile = create_profile(store, "d", "Grace", "Hopper")

        assert profile.score == 1000
        assert profile.experience_count == 0
        assert profile.created_at is not None
        assert store.fetch_profile("d").display_name == "Grace Hopper"

    def test_duplicate_profile(self, store):
        with pytest.raises(StoreError):
            create_profile(store, "a", "Ada", "Lovelace")


class TestSubmitVote:
    """Tests for submit_vote."""

    def test_vote_is_appended_pending(self, store):
        vote = submit_vote(store, "a", "b", "u1")

        assert vote.status is VoteStatus.PENDING
        assert [v.id for v in store.fetch_pending_votes()] == [vote.id]
        # Scores only move when the aggregator runs
        assert store.fetch_profile("a").score == 1000

    def test_vote_applied_by_next_tick(self, store):
        submit_vote(store, "a", "b", "u1")

        VoteAggregator(store).run_tick()

        assert store.fetch_profile("a").score == 1050

    def test_self_vote_rejected(self, store):
        with pytest.raises(InvalidVoteError):
            submit_vote(store, "a", "a", "u1")

    def test_unknown_profile_rejected(self, store):
        with pytest.raises(InvalidVoteError, match="ghost"):
            submit_vote(store, "a", "ghost", "u1")

    def test_repeat_matchup_rejected(self, store):
        submit_vote(store, "a", "b", "u1")

        with pytest.raises(DuplicateVoteError):
            submit_vote(store, "a", "b", "u1")

    def test_repeat_matchup_reverse_direction_rejected(self, store):
        """Flipping the winner does not get around the window."""
        submit_vote(store, "a", "b", "u1")

        with pytest.raises(DuplicateVoteError):
            submit_vote(store, "b", "a", "u1")

    def test_other_voter_or_matchup_allowed(self, store):
        submit_vote(store, "a", "b", "u1")

        submit_vote(store, "a", "b", "u2")
        submit_vote(store, "a", "c", "u1")

        assert len(store.fetch_pending_votes()) == 3

    def test_check_can_be_disabled(self, store):
        submit_vote(store, "a", "b", "u1")
        submit_vote(store, "a", "b", "u1", check_recent=False)

        assert len(store.fetch_pending_votes()) == 2


class TestHasVotedRecently:
    def test_fails_open_on_store_error(self, store, monkeypatch):
        def broken(voter_id, since):
            raise StoreError("unavailable")

        monkeypatch.setattr(store, "recent_votes_by_voter", broken)

        assert has_voted_recently(store, "u1", "a", "b") is False

    def test_empty_history(self, store):
        assert has_voted_recently(store, "u1", "a", "b") is False


class TestFetchRankings:
    def test_ranked_from_one(self, store):
        rankings = fetch_rankings(store, limit=2)

        assert [r.rank for r in rankings] == [1, 2]
        assert rankings[0].profile.id == "c"


class TestGetProfile:
    def test_found(self, store):
        assert get_profile(store, "c").score == 1200

    def test_missing(self, store):
        with pytest.raises(ProfileNotFoundError) as exc_info:
            get_profile(store, "ghost")
        assert exc_info.value.profile_id == "ghost"
