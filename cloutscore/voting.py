"""Client-side operations: profile creation, vote submission, rankings.

Vote submission only appends a pending vote; scores change when the
aggregation pipeline next runs.
"""

from datetime import timedelta

from cloutscore.aggregation.store import VotingStore
from cloutscore.constants import INITIAL_SCORE, RANKINGS_LIMIT, RECENT_VOTE_WINDOW_MINUTES
from cloutscore.errors import DuplicateVoteError, InvalidVoteError, ProfileNotFoundError
from cloutscore.logging import get_logger
from cloutscore.models import Profile, Ranking, VoteEvent, utc_now

log = get_logger(__name__)


def create_profile(
    store: VotingStore,
    profile_id: str,
    first_name: str,
    last_name: str,
    image_url: str = "",
    is_auth_user: bool = True,
) -> Profile:
    """Create a new profile at the initial score with no experience."""
    profile = Profile(
        id=profile_id,
        first_name=first_name,
        last_name=last_name,
        image_url=image_url,
        is_auth_user=is_auth_user,
        score=INITIAL_SCORE,
        experience_count=0,
        created_at=utc_now(),
    )
    created = store.create_profile(profile)
    log.info("profile_created", profile_id=profile_id)
    return created


def has_voted_recently(
    store: VotingStore,
    voter_id: str,
    winner_id: str,
    loser_id: str,
    within_minutes: int = RECENT_VOTE_WINDOW_MINUTES,
) -> bool:
    """Check whether the voter already judged this matchup recently.

    The matchup is unordered: A-over-B and B-over-A both count. Fails open:
    if the store cannot be read the vote is allowed.
    """
    since = utc_now() - timedelta(minutes=within_minutes)
    try:
        recent = store.recent_votes_by_voter(voter_id, since)
    except Exception as exc:
        log.warning("recent_vote_check_failed", voter_id=voter_id, error=str(exc))
        return False
    return any(vote.is_matchup(winner_id, loser_id) for vote in recent)


def submit_vote(
    store: VotingStore,
    winner_id: str,
    loser_id: str,
    voter_id: str,
    check_recent: bool = True,
    within_minutes: int = RECENT_VOTE_WINDOW_MINUTES,
) -> VoteEvent:
    """Append a pending vote for ``winner_id`` over ``loser_id``.

    Raises:
        InvalidVoteError: self-vote or a profile does not exist
        DuplicateVoteError: the voter repeated this matchup inside the window
    """
    if winner_id == loser_id:
        raise InvalidVoteError("A profile cannot be voted against itself")

    for profile_id in (winner_id, loser_id):
        if store.fetch_profile(profile_id) is None:
            raise InvalidVoteError(f"Profile with id '{profile_id}' not found")

    if check_recent and has_voted_recently(store, voter_id, winner_id, loser_id, within_minutes):
        raise DuplicateVoteError(
            f"Voter '{voter_id}' already voted on this matchup in the last {within_minutes} minutes"
        )

    vote = store.append_vote(VoteEvent.new(winner_id, loser_id, voter_id))
    log.info("vote_recorded", vote_id=vote.id, winner_id=winner_id, loser_id=loser_id)
    return vote


def fetch_rankings(store: VotingStore, limit: int = RANKINGS_LIMIT) -> list[Ranking]:
    """Top profiles by score, highest first, ranked from 1."""
    profiles = store.top_profiles(limit)
    return [Ranking(rank=i, profile=profile) for i, profile in enumerate(profiles, 1)]


def get_profile(store: VotingStore, profile_id: str) -> Profile:
    """Look up one profile.

    Raises:
        ProfileNotFoundError: no profile with this id
    """
    profile = store.fetch_profile(profile_id)
    if profile is None:
        raise ProfileNotFoundError(profile_id)
    return profile
