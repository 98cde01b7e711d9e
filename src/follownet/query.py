"""Read-only query operations on the social graph.

Kept apart from graph.py so traversal and ranking never mutate state.
SocialGraph delegates all query methods to QueryService via thin wrappers.
"""

import heapq
import logging
from collections import deque
from typing import Callable

from .adjacency import UserNode
from .constants import DEFAULT_SUGGESTION_LIMIT, DEFAULT_TOP_K, UNREACHABLE
from .errors import EmptyGraphError
from .index import IdentityIndex
from .models import UserSummary

logger = logging.getLogger(__name__)


def connection_score(user: UserNode) -> int:
    """Raw connectivity: edges in plus edges out."""
    return user.following_count + user.follower_count


def influence_score(user: UserNode) -> int:
    """Sum of follower counts over a user's direct followers.

    A second-order popularity proxy (weighted in-degree), not a centrality
    measure such as PageRank.
    """
    return sum(follower.follower_count for follower in user.followers.snapshot())


class QueryService:
    """Read-only queries over the identity index and node adjacency.

    Uses a callable accessor so it always reads the current index.
    """

    def __init__(self, get_index: Callable[[], IdentityIndex]):
        self._get_index = get_index

    def separation_degree(self, source: str, target: str) -> int:
        """Hop count along "following" edges from source to target.

        Breadth-first, frontier by frontier, with a visited set so cycles
        terminate. Returns 0 for source == target and UNREACHABLE (-1) when
        either user is missing or no path exists.
        """
        index = self._get_index()
        start = index.lookup(source)
        if start is None or index.lookup(target) is None:
            return UNREACHABLE

        visited = {start.username}
        queue: deque[tuple[UserNode, int]] = deque([(start, 0)])

        while queue:
            current, depth = queue.popleft()
            if current.username == target:
                return depth

            for neighbor in current.following.snapshot():
                if neighbor.username not in visited:
                    visited.add(neighbor.username)
                    queue.append((neighbor, depth + 1))

        return UNREACHABLE

    def suggest_friends(
        self, username: str, limit: int = DEFAULT_SUGGESTION_LIMIT
    ) -> list[UserSummary]:
        """Suggest users followed by the people this user follows.

        Each candidate is scored by how many of the user's followees follow
        it. The user and anyone already followed are excluded. Ordered by
        descending score, then username.
        """
        user = self._get_index().lookup(username)
        if user is None or limit <= 0:
            return []

        tally: dict[str, int] = {}
        candidates: dict[str, UserNode] = {}
        for friend in user.following.snapshot():
            for candidate in friend.following.snapshot():
                if candidate is user or candidate.username in user.following:
                    continue
                tally[candidate.username] = tally.get(candidate.username, 0) + 1
                candidates[candidate.username] = candidate

        ranked = sorted(tally.items(), key=lambda item: (-item[1], item[0]))
        return [
            candidates[name].to_summary(score=count)
            for name, count in ranked[:limit]
        ]

    def most_connected(self, limit: int = DEFAULT_TOP_K) -> list[UserSummary]:
        """Top users by following + follower count."""
        return self._top_k(connection_score, limit)

    def most_influential(self, limit: int = DEFAULT_TOP_K) -> list[UserSummary]:
        """Top users by influence score (see influence_score)."""
        return self._top_k(influence_score, limit)

    def average_connections(self) -> float:
        """Total follow edges divided by number of users.

        Raises:
            EmptyGraphError: If the graph has no users.
        """
        index = self._get_index()
        if len(index) == 0:
            raise EmptyGraphError("Average connections is undefined for an empty graph")
        edges = sum(user.following_count for user in index)
        return edges / len(index)

    def listing(self) -> list[UserSummary]:
        """Every user with counters, in username order."""
        return [user.to_summary() for user in self._get_index()]

    def _top_k(self, score: Callable[[UserNode], int], limit: int) -> list[UserSummary]:
        if limit <= 0:
            return []
        scored = [(score(user), user) for user in self._get_index()]
        # Highest score first; username breaks ties deterministically
        top = heapq.nsmallest(limit, scored, key=lambda pair: (-pair[0], pair[1].username))
        logger.debug(f"Ranked {len(scored)} users, returning {len(top)}")
        return [user.to_summary(score=value) for value, user in top]
