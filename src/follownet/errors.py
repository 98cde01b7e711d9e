"""Exceptions raised by the graph engine.

Missing users, duplicate inserts and invalid edges are ordinary outcomes and
are reported through return values. Only the conditions below raise.
"""


class ConsistencyError(RuntimeError):
    """An edge is present on one side of a follower/followee pair only."""


class EmptyGraphError(ValueError):
    """A population-wide statistic was requested on a graph with no users."""
