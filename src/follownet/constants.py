"""Tunable defaults shared by the engine, loader and CLI."""

# Query limits
DEFAULT_TOP_K = 5
DEFAULT_SUGGESTION_LIMIT = 5

# Returned by separation queries when no path exists
UNREACHABLE = -1

# Synthetic follow generation: random attempts per user
DEFAULT_FOLLOW_ATTEMPTS_PER_USER = 30

# Report
DEFAULT_SEPARATION_SAMPLES = 5
DEFAULT_USERS_FILE = "user_data.csv"
