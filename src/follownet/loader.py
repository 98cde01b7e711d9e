"""Dataset readers and synthetic follow generation.

Feeds the engine plain records; nothing in the engine imports this module.

File formats (headerless CSV):
- users:   username,first_name,last_name
- follows: follower_username,followee_username
"""

import csv
import logging
import random
from pathlib import Path
from typing import Iterator, Sequence

from .constants import DEFAULT_FOLLOW_ATTEMPTS_PER_USER
from .graph import SocialGraph
from .models import UserProfile

logger = logging.getLogger(__name__)


def read_users(path: Path) -> list[UserProfile]:
    """Read user records from a CSV file.

    Blank lines are skipped. Rows without a username are logged and skipped.
    """
    users = []
    with open(path, newline="", encoding="utf-8") as f:
        for line_no, row in enumerate(csv.reader(f), start=1):
            if not row or not any(cell.strip() for cell in row):
                continue
            cells = [cell.strip() for cell in row] + ["", ""]
            if not cells[0]:
                logger.warning(f"Skipping row {line_no} of {path.name}: missing username")
                continue
            users.append(
                UserProfile(username=cells[0], first_name=cells[1], last_name=cells[2])
            )
    return users


def read_follows(path: Path) -> list[tuple[str, str]]:
    """Read follower/followee pairs from a CSV file."""
    pairs = []
    with open(path, newline="", encoding="utf-8") as f:
        for line_no, row in enumerate(csv.reader(f), start=1):
            cells = [cell.strip() for cell in row if cell.strip()]
            if not cells:
                continue
            if len(cells) < 2:
                logger.warning(f"Skipping row {line_no} of {path.name}: expected two usernames")
                continue
            pairs.append((cells[0], cells[1]))
    return pairs


def generate_follows(
    usernames: Sequence[str],
    attempts_per_user: int = DEFAULT_FOLLOW_ATTEMPTS_PER_USER,
    seed: int | None = None,
) -> Iterator[tuple[str, str]]:
    """Yield random (follower, followee) pairs.

    Makes len(usernames) * attempts_per_user draws. Pairs may repeat or be
    self-follows; the graph rejects those, so fewer edges than attempts are
    created. A private Random instance keeps results reproducible for a seed.
    """
    if not usernames:
        return
    rng = random.Random(seed)
    for _ in range(len(usernames) * attempts_per_user):
        yield rng.choice(usernames), rng.choice(usernames)


def build_graph(
    users_path: Path,
    follows_path: Path | None = None,
    attempts_per_user: int = DEFAULT_FOLLOW_ATTEMPTS_PER_USER,
    seed: int | None = None,
) -> SocialGraph:
    """Load users from disk and connect them.

    Edges come from follows_path when given, otherwise they are generated.
    """
    graph = SocialGraph()
    graph.load_users(read_users(users_path))

    if follows_path is not None:
        pairs = read_follows(follows_path)
    else:
        pairs = generate_follows(graph.usernames, attempts_per_user, seed)
    graph.load_follows(pairs)

    logger.info(
        f"Built graph with {graph.user_count} users and {graph.connection_count} follows"
    )
    return graph
