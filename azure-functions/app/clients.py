"""Azure Cosmos DB client helpers."""

from __future__ import annotations

from .config import (
    COSMOS_DATABASE,
    COSMOS_ENDPOINT,
    COSMOS_KEY,
    LEADERBOARD_PARTITION,
    PROFILES_CONTAINER,
    VOTES_CONTAINER,
)

_cosmos_client = None
_vote_store = None


def get_cosmos_client():
    global _cosmos_client
    if _cosmos_client is None:
        if not COSMOS_ENDPOINT or not COSMOS_KEY:
            raise RuntimeError("Cosmos DB configuration missing")
        from azure.cosmos import CosmosClient

        _cosmos_client = CosmosClient(COSMOS_ENDPOINT, COSMOS_KEY)
    return _cosmos_client


def get_profiles_container():
    database = get_cosmos_client().get_database_client(COSMOS_DATABASE)
    return database.get_container_client(PROFILES_CONTAINER)


def get_votes_container():
    database = get_cosmos_client().get_database_client(COSMOS_DATABASE)
    return database.get_container_client(VOTES_CONTAINER)


def get_vote_store():
    global _vote_store
    if _vote_store is None:
        from .store import CosmosVoteStore

        _vote_store = CosmosVoteStore(
            profiles=get_profiles_container(),
            votes=get_votes_container(),
            partition=LEADERBOARD_PARTITION,
        )
    return _vote_store
