"""In-memory directed follow graph with social network queries.

Public API:
- SocialGraph: users, follow/unfollow, cascade delete, queries
- UserProfile / UserSummary: input records and detached result rows
- ConsistencyError / EmptyGraphError: the only conditions that raise
"""

from .errors import ConsistencyError, EmptyGraphError
from .graph import SocialGraph
from .models import UserProfile, UserSummary

__all__ = [
    "SocialGraph",
    "UserProfile",
    "UserSummary",
    "ConsistencyError",
    "EmptyGraphError",
]
