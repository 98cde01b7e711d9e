"""Core data models for the social graph.

Uses Pydantic v2 for validation. Profiles describe who a user is; summaries
are detached result rows handed back to callers.
"""

from pydantic import BaseModel, Field


class UserProfile(BaseModel):
    """Identity and display attributes of a user."""

    username: str = Field(min_length=1)
    first_name: str = ""
    last_name: str = ""


class UserSummary(BaseModel):
    """A point-in-time copy of a user and its counters.

    Query results are built from these so they stay valid after the graph
    changes.
    """

    username: str
    first_name: str = ""
    last_name: str = ""
    following_count: int = 0
    follower_count: int = 0
    score: int | None = None  # ranking or suggestion score, when relevant

    def to_row(self) -> tuple[str, str, str, int, int]:
        """Return the diagnostic listing tuple for this user."""
        return (
            self.username,
            self.first_name,
            self.last_name,
            self.following_count,
            self.follower_count,
        )
