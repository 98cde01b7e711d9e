"""Tests for the AVL identity index."""

import random

from follownet.adjacency import UserNode
from follownet.index import IdentityIndex


def _index_of(*usernames: str) -> IdentityIndex:
    index = IdentityIndex()
    for name in usernames:
        index.insert(UserNode.create(name))
    return index


def test_empty_index():
    """Test that a new index is empty and queryable."""
    index = IdentityIndex()
    assert len(index) == 0
    assert index.height == 0
    assert index.lookup("anyone") is None
    assert index.keys() == []
    assert index.nodes() == []
    assert index.remove("anyone") is False


def test_insert_and_lookup():
    """Test that inserted users can be found by username."""
    node = UserNode.create("emily", "Emily", "Rodriguez")
    index = IdentityIndex()

    assert index.insert(node) is True
    assert index.lookup("emily") is node
    assert "emily" in index
    assert "ghost" not in index
    assert len(index) == 1


def test_duplicate_insert_rejected():
    """Test that a second user with the same username is not inserted."""
    index = IdentityIndex()
    original = UserNode.create("sam", "Sam", "One")
    impostor = UserNode.create("sam", "Sam", "Two")

    assert index.insert(original) is True
    assert index.insert(impostor) is False
    assert index.lookup("sam") is original
    assert len(index) == 1


def test_keys_are_sorted():
    """Test that traversal is in username order regardless of insert order."""
    index = _index_of("mike", "alice", "zoe", "bob", "kate")
    assert index.keys() == ["alice", "bob", "kate", "mike", "zoe"]
    assert [n.username for n in index] == index.keys()


def test_sequential_inserts_stay_balanced():
    """Test that sorted inserts (worst case for a plain BST) keep log height."""
    index = _index_of(*(f"user{i:04d}" for i in range(1000)))

    assert len(index) == 1000
    # AVL height bound: < 1.45 * log2(n + 2)
    assert index.height <= 14
    assert index.check_balance() == []


def test_remove_leaf_and_inner_nodes():
    """Test removing users with zero, one, and two children."""
    index = _index_of("d", "b", "f", "a", "c", "e", "g", "h")

    assert index.remove("a") is True   # leaf
    assert index.remove("g") is True   # one child
    assert index.remove("d") is True   # two children (root)
    assert index.keys() == ["b", "c", "e", "f", "h"]
    assert index.lookup("d") is None
    assert index.check_balance() == []


def test_remove_missing_returns_false():
    """Test that removing an absent user changes nothing."""
    index = _index_of("a", "b")
    assert index.remove("zzz") is False
    assert len(index) == 2


def test_remove_only_user_leaves_empty_index():
    """Test that removing the sole user leaves a usable empty index."""
    index = _index_of("solo")

    assert index.remove("solo") is True
    assert len(index) == 0
    assert index.height == 0
    assert index.keys() == []
    assert index.lookup("solo") is None

    # Still usable afterwards
    assert index.insert(UserNode.create("next")) is True
    assert index.keys() == ["next"]


def test_interleaved_insert_and_remove():
    """Test ordering, membership and balance after random churn."""
    rng = random.Random(42)
    index = IdentityIndex()
    expected: set[str] = set()

    for _ in range(2000):
        name = f"u{rng.randrange(300)}"
        if rng.random() < 0.6:
            assert index.insert(UserNode.create(name)) == (name not in expected)
            expected.add(name)
        else:
            assert index.remove(name) == (name in expected)
            expected.discard(name)

    assert index.keys() == sorted(expected)
    assert len(index) == len(expected)
    assert index.check_balance() == []


def test_nodes_returns_copy():
    """Test that nodes() is a fresh list the caller may modify."""
    index = _index_of("a", "b")
    nodes = index.nodes()
    nodes.clear()
    assert len(index.nodes()) == 2
