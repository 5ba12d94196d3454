"""CLI entry point for roba.

Invoked as::

    roba [OPTIONS] COMMAND [ARGS]...

or during development::

    python -m roba.cli.main

Commands
--------
- validate   Validate a YAML policy file
- show       Show the effective grants of a collective or actor
- check      Decide whether an entity may perform an action on a resource
- parse      Decode scope strings into a grant table
- version    Show version information
"""
from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import click
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from roba.evaluation import ALWAYS
from roba.grants import ACTIONS, Action, GrantSet, GrantType

if TYPE_CHECKING:
    from roba.config.loader import Policy

console = Console()
err_console = Console(stderr=True)

_GRANT_STYLES: dict[GrantType, str] = {
    GrantType.ANY: "green",
    GrantType.OWN: "yellow",
    GrantType.NONE: "dim",
}


def _grant_table(title: str, grants: dict[str, GrantSet]) -> Table:
    table = Table(title=title, box=box.SIMPLE)
    table.add_column("Resource", style="cyan")
    for action in ACTIONS:
        table.add_column(action.value.capitalize())
    for resource_name, grant_set in grants.items():
        cells = []
        for action in ACTIONS:
            grant = grant_set.grant_for(action)
            cells.append(f"[{_GRANT_STYLES[grant]}]{grant.value}[/{_GRANT_STYLES[grant]}]")
        table.add_row(resource_name, *cells)
    return table


def _load_policy(policy_file: str) -> Policy:
    from roba.config.loader import PolicyConfigError, PolicyLoader

    try:
        return PolicyLoader().load(policy_file)
    except PolicyConfigError as exc:
        err_console.print(f"[red]Policy error:[/red] {exc}")
        sys.exit(1)


_FILE_OPTION = click.option(
    "--file",
    "-f",
    "policy_file",
    required=True,
    type=click.Path(exists=True),
    help="Path to a YAML policy file.",
)


# ---------------------------------------------------------------------------
# Root command group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="roba")
def cli() -> None:
    """roba — resource ownership based authorization tools."""


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from roba import __version__

    console.print(
        Panel(
            f"[bold]roba[/bold]  v[cyan]{__version__}[/cyan]\n"
            "In-process authorization for collectives, actors and owned resources.",
            title="Version",
            border_style="blue",
        )
    )


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


@cli.command(name="validate")
@_FILE_OPTION
def validate_command(policy_file: str) -> None:
    """Validate a YAML policy file."""
    policy = _load_policy(policy_file)

    console.print(
        Panel(
            f"[green]VALID[/green]  {policy_file}\n"
            f"  Collectives: {len(policy.collectives)}  Actors: {len(policy.actors)}",
            title="Policy Validation",
            border_style="green",
        )
    )

    table = Table(title="Collectives", box=box.SIMPLE)
    table.add_column("Name", style="cyan")
    table.add_column("Scope", style="magenta")
    table.add_column("Resources")
    for collective in policy.collectives.values():
        table.add_row(
            collective.name,
            collective.scope,
            ", ".join(p.name for p in collective.permissions) or "-",
        )
    console.print(table)


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


@cli.command(name="show")
@_FILE_OPTION
@click.option(
    "--entity",
    "-e",
    required=True,
    help="Actor id or collective name.",
)
def show_command(policy_file: str, entity: str) -> None:
    """Show the effective grants of an actor or collective."""
    policy = _load_policy(policy_file)
    subject = policy.entity(entity)
    if subject is None:
        err_console.print(f"[red]Unknown entity:[/red] {entity}")
        sys.exit(1)

    console.print(f"  Entity: [cyan]{subject!r}[/cyan]")
    console.print(_grant_table(f"Grants for {entity}", dict(subject.grants)))


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------


@cli.command(name="check")
@_FILE_OPTION
@click.option("--entity", "-e", required=True, help="Actor id or collective name.")
@click.option(
    "--action",
    "-a",
    required=True,
    type=click.Choice([a.value for a in ACTIONS]),
    help="Action to check.",
)
@click.option("--resource", "-r", required=True, help="Resource collection name.")
@click.option("--id", "instance_id", default=None, help="Instance id; checks an instance instead of the collection.")
@click.option("--owner", default=None, help="Owner id of the instance; requires --id.")
@click.option("--scope", "-s", default="*", show_default=True, help="Scope of the resource.")
def check_command(
    policy_file: str,
    entity: str,
    action: str,
    resource: str,
    instance_id: str | None,
    owner: str | None,
    scope: str,
) -> None:
    """Check whether an entity may perform an action on a resource."""
    from roba.resources import Resource

    if owner is not None and instance_id is None:
        raise click.UsageError("--owner requires --id.")

    policy = _load_policy(policy_file)
    subject = policy.entity(entity)
    if subject is None:
        err_console.print(f"[red]Unknown entity:[/red] {entity}")
        sys.exit(1)

    try:
        if instance_id is None:
            target = Resource.collection(resource, scope)
        else:
            target = Resource.instance(resource, instance_id, owner or "", scope)
    except ValueError as exc:
        err_console.print(f"[red]Invalid resource:[/red] {exc}")
        sys.exit(1)

    allowed = subject.can.check(Action(action), target, ALWAYS)

    status_str = "[green]ALLOWED[/green]" if allowed else "[red]DENIED[/red]"
    console.print(Panel(status_str, title="Permission Check", border_style="blue"))
    console.print(f"  Entity:   [cyan]{entity}[/cyan]")
    console.print(f"  Action:   [cyan]{action}[/cyan]")
    console.print(f"  Resource: [cyan]{target.serialize()}[/cyan]")

    sys.exit(0 if allowed else 1)


# ---------------------------------------------------------------------------
# parse
# ---------------------------------------------------------------------------


@cli.command(name="parse")
@click.argument("scope_strings", nargs=-1, required=True)
def parse_command(scope_strings: tuple[str, ...]) -> None:
    """Decode scope strings (resource.action.grant) into a grant table."""
    from roba.permissions.parser import InvalidScopeString, parse_permissions_list

    try:
        permissions = parse_permissions_list(scope_strings)
    except InvalidScopeString as exc:
        err_console.print(f"[red]{exc}[/red]")
        sys.exit(1)

    console.print(_grant_table("Permissions", {p.name: p.grants for p in permissions}))


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    cli()
