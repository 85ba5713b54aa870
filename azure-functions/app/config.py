"""Configuration and logging for CloutScore Azure Functions."""

from __future__ import annotations

import logging
import os

from cloutscore.logging import configure_logging

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger("cloutscore.azure")

# Ensure structlog-backed core modules emit JSON lines under the Functions host.
configure_logging(cli_mode=False, log_level=LOG_LEVEL)

COSMOS_ENDPOINT = os.environ.get("AZURE_COSMOS_ENDPOINT", "")
COSMOS_KEY = os.environ.get("AZURE_COSMOS_KEY", "")
COSMOS_DATABASE = os.environ.get("AZURE_COSMOS_DATABASE", "cloutscore")
PROFILES_CONTAINER = os.environ.get("AZURE_COSMOS_PROFILES_CONTAINER", "profiles")
VOTES_CONTAINER = os.environ.get("AZURE_COSMOS_VOTES_CONTAINER", "votes")

# Both containers are partitioned on /board. Every document of one
# leaderboard shares this value so a transactional batch can span them.
LEADERBOARD_PARTITION = os.environ.get("LEADERBOARD_PARTITION", "global")
PARTITION_KEY_FIELD = "board"

# Cosmos transactional batches accept at most 100 operations. One vote can
# touch two profiles, so 50 votes is the most one atomic commit can hold.
COSMOS_BATCH_LIMIT = 100
MAX_VOTES_PER_TICK = int(os.environ.get("MAX_VOTES_PER_TICK", str(COSMOS_BATCH_LIMIT // 2)))
if not 1 <= MAX_VOTES_PER_TICK <= COSMOS_BATCH_LIMIT // 2:
    raise ValueError(
        f"MAX_VOTES_PER_TICK must be between 1 and {COSMOS_BATCH_LIMIT // 2}, got {MAX_VOTES_PER_TICK}"
    )

# NCRONTAB (seconds first). Default: every 5 minutes.
VOTE_BATCH_SCHEDULE = os.environ.get("VOTE_BATCH_SCHEDULE", "0 */5 * * * *")

RECENT_VOTE_WINDOW_MINUTES = int(os.environ.get("RECENT_VOTE_WINDOW_MINUTES", "5"))
RANKINGS_LIMIT = int(os.environ.get("RANKINGS_LIMIT", "100"))
MAX_PAIRS_PER_REQUEST = 10

DEBUG = os.environ.get("DEBUG", "").lower() == "true"
