"""Tests for adjacency collections and user nodes."""

import gc

import pytest
from pydantic import ValidationError

from follownet.adjacency import UserNode


@pytest.fixture
def owner():
    return UserNode.create("owner", "Olive", "Owner")


@pytest.fixture
def others():
    return [UserNode.create(name) for name in ("amy", "ben", "cat")]


class TestAdjacencyList:
    """Set semantics of a single collection."""

    def test_add_and_lookup(self, owner, others):
        amy = others[0]
        assert owner.following.add(amy) is True
        assert owner.following.lookup("amy") is amy
        assert "amy" in owner.following
        assert len(owner.following) == 1

    def test_add_owner_rejected(self, owner):
        assert owner.following.add(owner) is False
        assert owner.followers.add(owner) is False
        assert len(owner.following) == 0
        assert len(owner.followers) == 0

    def test_add_duplicate_rejected(self, owner, others):
        amy = others[0]
        assert owner.following.add(amy) is True
        assert owner.following.add(amy) is False
        assert len(owner.following) == 1

    def test_remove(self, owner, others):
        for node in others:
            owner.followers.add(node)

        assert owner.followers.remove("ben") is True
        assert owner.followers.remove("ben") is False
        assert owner.followers.lookup("ben") is None
        assert sorted(owner.followers.keys()) == ["amy", "cat"]

    def test_remove_missing(self, owner):
        assert owner.following.remove("nobody") is False

    def test_owner(self, owner):
        assert owner.following.owner() is owner
        assert owner.followers.owner() is owner

    def test_snapshot_is_stable_under_mutation(self, owner, others):
        for node in others:
            owner.following.add(node)

        snapshot = owner.following.snapshot()
        for node in snapshot:
            owner.following.remove(node.username)

        assert len(snapshot) == 3
        assert len(owner.following) == 0

    def test_does_not_keep_members_alive(self, owner):
        stranger = UserNode.create("stranger")
        owner.followers.add(stranger)
        assert "stranger" in owner.followers

        del stranger
        gc.collect()

        assert owner.followers.lookup("stranger") is None
        assert len(owner.followers) == 0


class TestUserNode:
    """Derived counters and summaries."""

    def test_counters_track_collections(self, owner, others):
        assert owner.following_count == 0
        assert owner.follower_count == 0

        owner.following.add(others[0])
        owner.followers.add(others[1])
        owner.followers.add(others[2])

        assert owner.following_count == 1
        assert owner.follower_count == 2

    def test_counters_are_read_only(self, owner):
        with pytest.raises(AttributeError):
            owner.following_count = 10

    def test_to_summary(self, owner, others):
        owner.followers.add(others[0])
        summary = owner.to_summary(score=7)

        assert summary.username == "owner"
        assert summary.first_name == "Olive"
        assert summary.last_name == "Owner"
        assert summary.follower_count == 1
        assert summary.score == 7
        assert summary.to_row() == ("owner", "Olive", "Owner", 0, 1)

    def test_summary_is_detached(self, owner, others):
        summary = owner.to_summary()
        owner.followers.add(others[0])
        assert summary.follower_count == 0

    def test_identity_equality(self):
        a = UserNode.create("same")
        b = UserNode.create("same")
        assert a != b
        assert len({a, b}) == 2

    def test_empty_username_rejected(self):
        with pytest.raises(ValidationError):
            UserNode.create("")
