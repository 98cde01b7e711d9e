"""CLI for exploring a follow graph loaded from CSV."""

import json
import logging
import random
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .constants import (
    DEFAULT_FOLLOW_ATTEMPTS_PER_USER,
    DEFAULT_SEPARATION_SAMPLES,
    DEFAULT_SUGGESTION_LIMIT,
    DEFAULT_TOP_K,
    DEFAULT_USERS_FILE,
    UNREACHABLE,
)
from .errors import EmptyGraphError
from .graph import SocialGraph
from .loader import build_graph
from .models import UserSummary

console = Console()


def _get_graph(ctx: click.Context) -> SocialGraph:
    """Build the graph once per invocation from the group options."""
    if ctx.obj.get("graph") is None:
        try:
            ctx.obj["graph"] = build_graph(
                ctx.obj["users_path"],
                ctx.obj["follows_path"],
                attempts_per_user=ctx.obj["attempts"],
                seed=ctx.obj["seed"],
            )
        except OSError as e:
            raise click.ClickException(f"Cannot read dataset: {e}") from e
    return ctx.obj["graph"]


def _user_table(title: str, users: list[UserSummary], score_label: str | None = None) -> Table:
    table = Table(title=escape(title))
    table.add_column("#", justify="right", style="dim")
    table.add_column("Username", style="cyan")
    table.add_column("Name")
    table.add_column("Following", justify="right")
    table.add_column("Followers", justify="right")
    if score_label:
        table.add_column(score_label, justify="right", style="green")

    for rank, user in enumerate(users, start=1):
        row = [
            str(rank),
            escape(user.username),
            escape(f"{user.first_name} {user.last_name}".strip()),
            str(user.following_count),
            str(user.follower_count),
        ]
        if score_label:
            row.append(str(user.score))
        table.add_row(*row)
    return table


def _print_users(title: str, users: list[UserSummary], as_json: bool, score_label: str | None = None) -> None:
    if as_json:
        click.echo(json.dumps([u.model_dump() for u in users], indent=2))
    elif users:
        console.print(_user_table(title, users, score_label))
    else:
        console.print(f"[yellow]{escape(title)}: no results[/yellow]")


def _require_user(graph: SocialGraph, username: str) -> None:
    if graph.get_user(username) is None:
        raise click.BadParameter(f"Unknown user '{username}'", param_hint="USERNAME")


def _format_separation(degree: int) -> str:
    return "[red]not connected[/red]" if degree == UNREACHABLE else f"[bold]{degree}[/bold]"


@click.group()
@click.option(
    "--users", "users_path",
    envvar="FOLLOWNET_USERS",
    default=DEFAULT_USERS_FILE,
    show_default=True,
    type=click.Path(path_type=Path),
    help="CSV of username,first_name,last_name",
)
@click.option(
    "--follows", "follows_path",
    envvar="FOLLOWNET_FOLLOWS",
    type=click.Path(path_type=Path),
    help="CSV of follower,followee pairs (default: generate randomly)",
)
@click.option("--seed", envvar="FOLLOWNET_SEED", type=int, help="Seed for generated follows")
@click.option(
    "--attempts",
    default=DEFAULT_FOLLOW_ATTEMPTS_PER_USER,
    show_default=True,
    help="Random follow attempts per user when generating",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx, users_path, follows_path, seed, attempts, verbose):
    """Follownet - analyze who follows whom."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        stream=sys.stderr,
    )
    ctx.ensure_object(dict)
    ctx.obj.update(
        users_path=users_path,
        follows_path=follows_path,
        seed=seed,
        attempts=attempts,
        graph=None,
    )


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def users(ctx, as_json):
    """List every user with follow counts."""
    graph = _get_graph(ctx)
    _print_users("Users", graph.listing(), as_json)


def _print_stats(graph: SocialGraph) -> None:
    console.print(f"Users: [bold]{graph.user_count}[/bold]")
    console.print(f"Follows: [bold]{graph.connection_count}[/bold]")
    try:
        console.print(f"Average connections: [bold]{graph.average_connections():.2f}[/bold]")
    except EmptyGraphError:
        console.print("Average connections: [yellow]n/a (no users)[/yellow]")


@cli.command()
@click.pass_context
def stats(ctx):
    """Show network statistics."""
    _print_stats(_get_graph(ctx))


@cli.command()
@click.option("-n", "--limit", default=DEFAULT_TOP_K, show_default=True, help="Number of users")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def connected(ctx, limit, as_json):
    """Show users with the most followers plus followees."""
    graph = _get_graph(ctx)
    _print_users("Most connected", graph.most_connected(limit), as_json, "Connections")


@cli.command()
@click.option("-n", "--limit", default=DEFAULT_TOP_K, show_default=True, help="Number of users")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def influential(ctx, limit, as_json):
    """Show users whose followers are themselves most followed."""
    graph = _get_graph(ctx)
    _print_users("Most influential", graph.most_influential(limit), as_json, "Influence")


@cli.command()
@click.argument("username")
@click.option("-n", "--limit", default=DEFAULT_SUGGESTION_LIMIT, show_default=True, help="Number of suggestions")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def suggest(ctx, username, limit, as_json):
    """Suggest accounts for USERNAME to follow, by mutual connections."""
    graph = _get_graph(ctx)
    _require_user(graph, username)
    _print_users(f"Suggestions for {username}", graph.suggest_friends(username, limit), as_json, "Mutual")


@cli.command()
@click.argument("source")
@click.argument("target")
@click.pass_context
def separation(ctx, source, target):
    """Show degrees of separation from SOURCE to TARGET."""
    graph = _get_graph(ctx)
    degree = graph.separation_degree(source, target)
    console.print(f"{escape(source)} -> {escape(target)}: {_format_separation(degree)}")


@cli.command()
@click.option("--user", "username", help="User to suggest friends for (default: first loaded)")
@click.option(
    "--samples",
    default=DEFAULT_SEPARATION_SAMPLES,
    show_default=True,
    help="Random user pairs to measure separation for",
)
@click.pass_context
def report(ctx, username, samples):
    """Print the full network report."""
    graph = _get_graph(ctx)

    _print_users("Network users", graph.listing(), as_json=False)
    console.print()
    _print_stats(graph)
    console.print()
    _print_users(f"{DEFAULT_TOP_K} most connected", graph.most_connected(DEFAULT_TOP_K), False, "Connections")
    _print_users(f"{DEFAULT_TOP_K} most influential", graph.most_influential(DEFAULT_TOP_K), False, "Influence")

    if username is None and graph.user_count:
        username = graph.usernames[0]
    if username is not None:
        _require_user(graph, username)
        _print_users(
            f"Friend suggestions for {username}",
            graph.suggest_friends(username, DEFAULT_SUGGESTION_LIMIT),
            False,
            "Mutual",
        )

    if graph.user_count < 2:
        return
    console.print()
    console.print("[bold]Degrees of separation[/bold]")
    names = graph.usernames
    rng = random.Random(ctx.obj["seed"])
    for _ in range(samples):
        first, second = rng.sample(range(len(names)), 2)
        a, b = names[first], names[second]
        console.print(f"  {escape(a)} -> {escape(b)}: {_format_separation(graph.separation_degree_at(first, second))}")


if __name__ == "__main__":
    cli()
