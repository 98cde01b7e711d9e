"""Social graph - orchestrates the identity index, relationships and queries."""

import logging
from typing import Iterable

from .adjacency import UserNode
from .constants import DEFAULT_SUGGESTION_LIMIT, DEFAULT_TOP_K, UNREACHABLE
from .index import IdentityIndex
from .models import UserProfile, UserSummary
from .query import QueryService
from .relations import follow, sever_all, unfollow

logger = logging.getLogger(__name__)

UserRecord = UserProfile | dict | tuple


def _to_profile(record: UserRecord) -> UserProfile:
    """Accept a UserProfile, a mapping, or a (username, first, last) tuple."""
    if isinstance(record, UserProfile):
        return record
    if isinstance(record, dict):
        return UserProfile.model_validate(record)
    username, *rest = record
    first_name = rest[0] if len(rest) > 0 else ""
    last_name = rest[1] if len(rest) > 1 else ""
    return UserProfile(username=username, first_name=first_name, last_name=last_name)


class SocialGraph:
    """Directed follow graph over uniquely named users.

    The index owns the nodes. Edges are changed only through follow,
    unfollow and delete_user, which keep both adjacency sides in sync.
    Insertion order of usernames is remembered for positional access.
    """

    def __init__(self) -> None:
        self._index = IdentityIndex()
        self._order: list[str] = []
        self._edge_count = 0
        self.queries = QueryService(get_index=lambda: self._index)

    @property
    def index(self) -> IdentityIndex:
        """The identity index, for read access. Use delete_user to remove users."""
        return self._index

    # --- Users ---

    def add_user(self, username: str, first_name: str = "", last_name: str = "") -> bool:
        """Add a user. Returns False if the username is already taken."""
        profile = UserProfile(username=username, first_name=first_name, last_name=last_name)
        return self._add_profile(profile)

    def _add_profile(self, profile: UserProfile) -> bool:
        if not self._index.insert(UserNode(profile)):
            logger.debug(f"Duplicate username rejected: {profile.username}")
            return False
        self._order.append(profile.username)
        return True

    def get_user(self, username: str) -> UserNode | None:
        return self._index.lookup(username)

    def user_at(self, position: int) -> UserNode | None:
        """User by insertion position, or None when out of range."""
        if position < 0 or position >= len(self._order):
            return None
        return self._index.lookup(self._order[position])

    def delete_user(self, username: str) -> bool:
        """Delete a user after severing every edge that touches it.

        Returns False if the user does not exist.
        """
        user = self._index.lookup(username)
        if user is None:
            return False

        touching = user.following_count + user.follower_count
        try:
            severed = sever_all(user)
        finally:
            # Account for edges already gone if cleanup stopped partway
            self._edge_count -= touching - (user.following_count + user.follower_count)
        self._index.remove(username)
        self._order.remove(username)
        logger.info(f"Deleted user {username} ({severed} edges severed)")
        return True

    @property
    def user_count(self) -> int:
        return len(self._index)

    @property
    def connection_count(self) -> int:
        return self._edge_count

    @property
    def usernames(self) -> list[str]:
        """Usernames in insertion order."""
        return list(self._order)

    # --- Relationships ---

    def follow(self, follower: str, followee: str) -> bool:
        """Make follower follow followee. False for unknown users or invalid edges."""
        source = self._index.lookup(follower)
        target = self._index.lookup(followee)
        if source is None or target is None:
            logger.debug(f"Cannot follow {follower} -> {followee}: unknown user")
            return False
        if not follow(source, target):
            return False
        self._edge_count += 1
        return True

    def unfollow(self, follower: str, followee: str) -> bool:
        """Remove follower -> followee. False if either is unknown or no edge exists."""
        source = self._index.lookup(follower)
        if source is None:
            return False
        if not unfollow(source, followee):
            return False
        self._edge_count -= 1
        return True

    def is_following(self, follower: str, followee: str) -> bool:
        source = self._index.lookup(follower)
        return source is not None and followee in source.following

    # --- Bulk load ---

    def load_users(self, records: Iterable[UserRecord]) -> int:
        """Insert many users. Returns the number actually inserted."""
        inserted = sum(1 for record in records if self._add_profile(_to_profile(record)))
        logger.debug(f"Loaded {inserted} users ({self.user_count} total)")
        return inserted

    def load_follows(self, pairs: Iterable[tuple[str, str]]) -> int:
        """Create many edges. Returns the number of new edges."""
        created = sum(1 for follower, followee in pairs if self.follow(follower, followee))
        logger.debug(f"Created {created} follows ({self.connection_count} total)")
        return created

    # --- Queries (delegated to QueryService) ---

    def separation_degree(self, source: str, target: str) -> int:
        return self.queries.separation_degree(source, target)

    def separation_degree_at(self, source: int, target: int) -> int:
        """Separation between users identified by insertion position."""
        first, second = self.user_at(source), self.user_at(target)
        if first is None or second is None:
            return UNREACHABLE
        return self.queries.separation_degree(first.username, second.username)

    def suggest_friends(
        self, username: str, limit: int = DEFAULT_SUGGESTION_LIMIT
    ) -> list[UserSummary]:
        return self.queries.suggest_friends(username, limit)

    def suggest_friends_at(
        self, position: int, limit: int = DEFAULT_SUGGESTION_LIMIT
    ) -> list[UserSummary]:
        user = self.user_at(position)
        if user is None:
            return []
        return self.queries.suggest_friends(user.username, limit)

    def most_connected(self, limit: int = DEFAULT_TOP_K) -> list[UserSummary]:
        return self.queries.most_connected(limit)

    def most_influential(self, limit: int = DEFAULT_TOP_K) -> list[UserSummary]:
        return self.queries.most_influential(limit)

    def average_connections(self) -> float:
        return self.queries.average_connections()

    def listing(self) -> list[UserSummary]:
        return self.queries.listing()

    # --- Diagnostics ---

    def check_consistency(self) -> list[str]:
        """Validate edges, index and counters. Returns list of errors.

        This is a debug/test utility to detect drift after mutations.
        An empty list means the graph is consistent.
        """
        errors = self._index.check_balance()

        total = 0
        for user in self._index:
            for target in user.following.snapshot():
                total += 1
                if target is user:
                    errors.append(f"{user.username} follows itself")
                if self._index.lookup(target.username) is not target:
                    errors.append(f"{user.username} follows missing user {target.username}")
                if user.username not in target.followers:
                    errors.append(
                        f"{user.username} -> {target.username} missing from followers"
                    )
            for source in user.followers.snapshot():
                if self._index.lookup(source.username) is not source:
                    errors.append(f"{user.username} has missing follower {source.username}")
                if user.username not in source.following:
                    errors.append(
                        f"{source.username} -> {user.username} missing from following"
                    )

        if total != self._edge_count:
            errors.append(f"Edge count is {self._edge_count} but graph holds {total}")
        if sorted(self._order) != self._index.keys():
            errors.append("Insertion order is out of sync with the index")

        return errors
