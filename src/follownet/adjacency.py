"""Per-user adjacency collections and the node record that owns them.

Each UserNode carries two AdjacencyLists:
- following: users this node follows (outgoing edges)
- followers: users following this node (incoming edges)

Collections hold weak references only. The IdentityIndex is the single
strong owner of every node, so dropping a node from the index is enough to
release it once its edges have been severed.
"""

from __future__ import annotations

import weakref
from dataclasses import dataclass, field

from .models import UserProfile, UserSummary


class AdjacencyList:
    """Set-like collection of users keyed by username, owned by one node."""

    def __init__(self, owner: UserNode):
        self._owner = weakref.ref(owner)
        self._members: weakref.WeakValueDictionary[str, UserNode] = (
            weakref.WeakValueDictionary()
        )

    def owner(self) -> UserNode | None:
        """Return the node this collection belongs to."""
        return self._owner()

    def add(self, node: UserNode) -> bool:
        """Add a user. Fails for the owner itself or a user already present."""
        if node is self._owner() or node.username in self._members:
            return False
        self._members[node.username] = node
        return True

    def remove(self, username: str) -> bool:
        """Remove a user by username. Fails if absent."""
        if username not in self._members:
            return False
        del self._members[username]
        return True

    def lookup(self, username: str) -> UserNode | None:
        """O(1) lookup of a member by username."""
        return self._members.get(username)

    def snapshot(self) -> list[UserNode]:
        """Copy of the current members, safe to iterate while mutating."""
        return list(self._members.values())

    def keys(self) -> list[str]:
        """Copy of the current member usernames."""
        return list(self._members.keys())

    def __len__(self) -> int:
        return len(self._members)

    def __contains__(self, username: object) -> bool:
        return username in self._members

    def __repr__(self) -> str:
        owner = self._owner()
        name = owner.username if owner is not None else "<released>"
        return f"AdjacencyList(owner={name!r}, size={len(self)})"


@dataclass(eq=False)
class UserNode:
    """A user and its two adjacency collections.

    Counters are derived from the collections and cannot be set directly.
    Nodes compare and hash by identity.
    """

    profile: UserProfile
    following: AdjacencyList = field(init=False, repr=False)
    followers: AdjacencyList = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.following = AdjacencyList(self)
        self.followers = AdjacencyList(self)

    @classmethod
    def create(cls, username: str, first_name: str = "", last_name: str = "") -> UserNode:
        """Shorthand for building a node from plain attributes."""
        return cls(UserProfile(username=username, first_name=first_name, last_name=last_name))

    @property
    def username(self) -> str:
        return self.profile.username

    @property
    def first_name(self) -> str:
        return self.profile.first_name

    @property
    def last_name(self) -> str:
        return self.profile.last_name

    @property
    def following_count(self) -> int:
        return len(self.following)

    @property
    def follower_count(self) -> int:
        return len(self.followers)

    def to_summary(self, score: int | None = None) -> UserSummary:
        """Return a detached summary of this user."""
        return UserSummary(
            username=self.username,
            first_name=self.first_name,
            last_name=self.last_name,
            following_count=self.following_count,
            follower_count=self.follower_count,
            score=score,
        )
