"""Scoring constants shared by the rating function, pipeline and clients."""

# Scoring
INITIAL_SCORE = 1000
MIN_SCORE = 100

# Volatility
NEW_PROFILE_CHANGE = 100  # K-factor while a profile is unproven
ESTABLISHED_PROFILE_CHANGE = 1  # K-factor once a profile is established
ESTABLISHED_THRESHOLD = 100  # votes needed to be "established"

# Elo logistic scale
ELO_SCALE = 400.0

# Number of voting pairs a client keeps precomputed
PREFETCH_COUNT = 10

# Anti-abuse window for repeated matchups by one voter
RECENT_VOTE_WINDOW_MINUTES = 5

# Rankings
RANKINGS_LIMIT = 100

# Optimistic score cache lifetime
SCORE_CACHE_TTL_SECONDS = 5 * 60
