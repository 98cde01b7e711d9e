"""Identity index: an AVL tree mapping usernames to user nodes.

The index is the only strong owner of UserNode objects. Every structural
change rebalances the path back to the root so the tree height stays
O(log n), keeping insert, lookup and remove logarithmic.
"""

from __future__ import annotations

from typing import Iterator

from .adjacency import UserNode
from .errors import ConsistencyError


class _TreeNode:
    """A single AVL tree node holding one user."""

    def __init__(self, user: UserNode):
        self.user = user
        self.left: _TreeNode | None = None
        self.right: _TreeNode | None = None
        self.height = 1

    @property
    def key(self) -> str:
        return self.user.username


def _height(node: _TreeNode | None) -> int:
    return node.height if node else 0


def _update_height(node: _TreeNode) -> None:
    node.height = 1 + max(_height(node.left), _height(node.right))


def _balance_factor(node: _TreeNode | None) -> int:
    if node is None:
        return 0
    return _height(node.left) - _height(node.right)


def _rotate_right(y: _TreeNode) -> _TreeNode:
    x = y.left
    assert x is not None
    y.left = x.right
    x.right = y
    _update_height(y)
    _update_height(x)
    return x


def _rotate_left(x: _TreeNode) -> _TreeNode:
    y = x.right
    assert y is not None
    x.right = y.left
    y.left = x
    _update_height(x)
    _update_height(y)
    return y


def _rebalance(node: _TreeNode) -> _TreeNode:
    """Restore the AVL property at node and return the new subtree root."""
    _update_height(node)
    balance = _balance_factor(node)

    if balance > 1:
        # Left-right case reduces to left-left
        if _balance_factor(node.left) < 0:
            node.left = _rotate_left(node.left)
        return _rotate_right(node)

    if balance < -1:
        # Right-left case reduces to right-right
        if _balance_factor(node.right) > 0:
            node.right = _rotate_right(node.right)
        return _rotate_left(node)

    return node


class IdentityIndex:
    """Ordered map from username to UserNode.

    Iteration is always in username order, which makes listings and
    tie-breaking deterministic.
    """

    def __init__(self) -> None:
        self._root: _TreeNode | None = None
        self._size = 0

    # --- Mutations ---

    def insert(self, user: UserNode) -> bool:
        """Insert a user. Returns False (no change) if the username exists."""
        if self.lookup(user.username) is not None:
            return False
        self._root = self._insert(self._root, user)
        self._size += 1
        return True

    def remove(self, username: str) -> bool:
        """Remove a user by username. Returns False if absent.

        Raises:
            ConsistencyError: If the user still has edges. Sever them first
                (SocialGraph.delete_user does) so no neighbour keeps a
                reference to a user the index no longer owns.
        """
        user = self.lookup(username)
        if user is None:
            return False
        if user.following_count or user.follower_count:
            raise ConsistencyError(
                f"Cannot remove {username} from the index while it has "
                f"{user.following_count} following and {user.follower_count} followers"
            )
        self._root = self._remove(self._root, username)
        self._size -= 1
        return True

    def _insert(self, node: _TreeNode | None, user: UserNode) -> _TreeNode:
        if node is None:
            return _TreeNode(user)
        if user.username < node.key:
            node.left = self._insert(node.left, user)
        else:
            node.right = self._insert(node.right, user)
        return _rebalance(node)

    def _remove(self, node: _TreeNode | None, username: str) -> _TreeNode | None:
        if node is None:
            return None

        if username < node.key:
            node.left = self._remove(node.left, username)
        elif username > node.key:
            node.right = self._remove(node.right, username)
        else:
            if node.left is None:
                return node.right
            if node.right is None:
                return node.left
            # Two children: adopt the in-order successor, then drop it
            successor = node.right
            while successor.left is not None:
                successor = successor.left
            node.user = successor.user
            node.right = self._remove(node.right, successor.key)

        return _rebalance(node)

    # --- Lookups ---

    def lookup(self, username: str) -> UserNode | None:
        """O(log n) lookup of a user by username."""
        node = self._root
        while node is not None:
            if username == node.key:
                return node.user
            node = node.left if username < node.key else node.right
        return None

    def nodes(self) -> list[UserNode]:
        """All users in username order."""
        return list(self)

    def keys(self) -> list[str]:
        """All usernames in order."""
        return [user.username for user in self]

    @property
    def height(self) -> int:
        """Tree height (0 when empty)."""
        return _height(self._root)

    def __iter__(self) -> Iterator[UserNode]:
        # In-order traversal with an explicit stack
        stack: list[_TreeNode] = []
        node = self._root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node.user
            node = node.right

    def __len__(self) -> int:
        return self._size

    def __contains__(self, username: object) -> bool:
        return isinstance(username, str) and self.lookup(username) is not None

    def check_balance(self) -> list[str]:
        """Validate ordering, heights and balance factors. Returns list of errors.

        Debug/test utility. An empty list means the tree is a valid AVL tree.
        """
        errors: list[str] = []

        def visit(node: _TreeNode | None, low: str | None, high: str | None) -> int:
            if node is None:
                return 0
            if (low is not None and node.key <= low) or (high is not None and node.key >= high):
                errors.append(f"{node.key!r} is out of order")
            left = visit(node.left, low, node.key)
            right = visit(node.right, node.key, high)
            if node.height != 1 + max(left, right):
                errors.append(f"{node.key!r} has stale height {node.height}")
            if abs(left - right) > 1:
                errors.append(f"{node.key!r} is unbalanced ({left} vs {right})")
            return 1 + max(left, right)

        visit(self._root, None, None)
        counted = sum(1 for _ in self)
        if counted != self._size:
            errors.append(f"size is {self._size} but tree holds {counted} users")
        return errors
