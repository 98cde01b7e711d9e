"""Follow/unfollow orchestration across the two sides of an edge.

An edge A -> B lives in two places: B in A.following and A in B.followers.
These functions are the only code that writes to adjacency collections, and
they keep both sides in agreement. A one-sided edge is a bug, not a user
error, so it raises ConsistencyError instead of returning False.
"""

import logging

from .adjacency import UserNode
from .errors import ConsistencyError

logger = logging.getLogger(__name__)


def follow(follower: UserNode, followee: UserNode) -> bool:
    """Create the edge follower -> followee.

    Returns False without touching either collection for a self-follow or
    an edge that already exists.
    """
    if follower is followee:
        logger.debug(f"Rejected self-follow by {follower.username}")
        return False

    forward = followee.username in follower.following
    backward = follower.username in followee.followers
    if forward and backward:
        logger.debug(f"{follower.username} already follows {followee.username}")
        return False
    if forward != backward:
        _violation(follower, followee)

    follower.following.add(followee)
    followee.followers.add(follower)
    return True


def unfollow(follower: UserNode, followee_username: str) -> bool:
    """Remove the edge follower -> followee_username.

    Returns False if follower does not currently follow that user.
    """
    followee = follower.following.lookup(followee_username)
    if followee is None:
        logger.debug(f"{follower.username} does not follow {followee_username}")
        return False

    if follower.username not in followee.followers:
        _violation(follower, followee)

    follower.following.remove(followee_username)
    followee.followers.remove(follower.username)
    return True


def sever_all(node: UserNode) -> int:
    """Remove every edge touching node, in both directions.

    Iterates snapshots because each unfollow mutates the collection being
    walked. Returns the number of edges removed.
    """
    severed = 0
    for target in node.following.snapshot():
        if unfollow(node, target.username):
            severed += 1
    for source in node.followers.snapshot():
        if unfollow(source, node.username):
            severed += 1
        else:
            _violation(source, node)
    return severed


def _violation(follower: UserNode, followee: UserNode) -> None:
    message = (
        f"Edge {follower.username} -> {followee.username} is one-sided: "
        f"following={followee.username in follower.following}, "
        f"followers={follower.username in followee.followers}"
    )
    logger.error(message)
    raise ConsistencyError(message)
