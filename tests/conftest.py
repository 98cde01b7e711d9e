"""Shared test fixtures and helpers for follownet tests."""

import tempfile
from pathlib import Path

import pytest

from follownet.graph import SocialGraph


# --- Helper Functions (not fixtures) ---


def make_graph(usernames: list[str], follows: list[tuple[str, str]]) -> SocialGraph:
    """Build a graph from bare usernames and follow pairs.

    Args:
        usernames: Users to insert, in order
        follows: (follower, followee) pairs to connect

    Returns:
        A populated SocialGraph.
    """
    graph = SocialGraph()
    graph.load_users((name, name.title(), "Test") for name in usernames)
    graph.load_follows(follows)
    return graph


def following_of(graph: SocialGraph, username: str) -> set[str]:
    """Usernames the given user follows."""
    return set(graph.get_user(username).following.keys())


def followers_of(graph: SocialGraph, username: str) -> set[str]:
    """Usernames following the given user."""
    return set(graph.get_user(username).followers.keys())


SAMPLE_USERS = ["alice", "bob", "carol", "dave", "erin", "frank"]

SAMPLE_FOLLOWS = [
    ("alice", "bob"),
    ("alice", "carol"),
    ("bob", "dave"),
    ("bob", "erin"),
    ("carol", "dave"),
    ("carol", "frank"),
    ("dave", "alice"),
    ("erin", "dave"),
]


# --- Fixtures ---


@pytest.fixture
def temp_data_dir():
    """Provide a temporary directory for dataset files.

    Yields a Path to a temporary directory that's cleaned up after the test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def graph():
    """Provide an empty SocialGraph."""
    return SocialGraph()


@pytest.fixture
def chain_graph():
    """A -> B -> C -> D and no other edges."""
    return make_graph(["A", "B", "C", "D"], [("A", "B"), ("B", "C"), ("C", "D")])


@pytest.fixture
def sample_graph():
    """Six users with eight follows.

    Counts (following/followers): alice 2/1, bob 2/1, carol 2/1,
    dave 1/3, erin 1/1, frank 0/1.
    """
    return make_graph(SAMPLE_USERS, SAMPLE_FOLLOWS)


@pytest.fixture
def users_csv(temp_data_dir):
    """A users CSV matching SAMPLE_USERS."""
    path = temp_data_dir / "user_data.csv"
    path.write_text(
        "".join(f"{name},{name.title()},Test\n" for name in SAMPLE_USERS),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def follows_csv(temp_data_dir):
    """A follows CSV matching SAMPLE_FOLLOWS."""
    path = temp_data_dir / "follows.csv"
    path.write_text(
        "".join(f"{a},{b}\n" for a, b in SAMPLE_FOLLOWS),
        encoding="utf-8",
    )
    return path
