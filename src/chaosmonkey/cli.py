"""CLI entry point for chaosmonkey."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Sequence
from datetime import datetime
from typing import NoReturn

import click
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from chaosmonkey import __version__
from chaosmonkey.aws import auto_scaling_groups, delete_simpledb_domain
from chaosmonkey.config import ClientConfig
from chaosmonkey.core import ChaosMonkey, ChaosMonkeyError
from chaosmonkey.models import (
    STRATEGIES,
    STRATEGY_SHUTDOWN_INSTANCE,
    Event,
    Strategy,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _columnize(rows: Sequence[Sequence[str]]) -> str:
    """Align *rows* into left-justified columns separated by two spaces."""
    widths = [max(len(row[i]) for row in rows) for i in range(len(rows[0]))]
    lines = [
        "  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip()
        for row in rows
    ]
    return "\n".join(lines)


def _event_rows(events: Sequence[Event]) -> list[list[str]]:
    rows = [["InstanceID", "AutoScalingGroupName", "Region", "Strategy", "TriggeredAt"]]
    for e in events:
        rows.append(
            [
                e.instance_id,
                e.auto_scaling_group_name,
                e.region,
                e.strategy,
                e.triggered_at.isoformat(),
            ]
        )
    return rows


def _fail(exc: Exception) -> NoReturn:
    click.echo(f"Error: {exc}", err=True)
    sys.exit(1)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__)
@click.option("--endpoint", default="", help="Chaos Monkey API endpoint (env: CHAOSMONKEY_ENDPOINT).")
@click.option("--username", default="", help="HTTP Basic Auth username (env: CHAOSMONKEY_USERNAME).")
@click.option("--password", default="", help="HTTP Basic Auth password (env: CHAOSMONKEY_PASSWORD).")
@click.option("--region", default="", help="AWS region sent along with chaos events.")
@click.option("-v", "--verbose", is_flag=True, help="Log HTTP and AWS calls to stderr.")
@click.pass_context
def main(
    ctx: click.Context,
    endpoint: str,
    username: str,
    password: str,
    region: str,
    verbose: bool,
) -> None:
    """Chaos Monkey client: trigger and list chaos events."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.WARNING
        ),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )
    ctx.obj = ClientConfig(
        endpoint=endpoint,
        username=username,
        password=password,
        region=region,
    )


@main.command("trigger")
@click.argument("group")
@click.option(
    "--strategy",
    default=STRATEGY_SHUTDOWN_INSTANCE,
    show_default=True,
    help="Chaos strategy. Any name the server supports is accepted.",
)
@click.option("--json-output", is_flag=True, help="Emit the event as JSON.")
@click.pass_obj
def trigger_command(
    config: ClientConfig, group: str, strategy: str, json_output: bool
) -> None:
    """Trigger a chaos event against auto scaling group GROUP."""
    try:
        event = ChaosMonkey(config).trigger_event(group, Strategy(strategy))
    except ChaosMonkeyError as exc:
        _fail(exc)

    if json_output:
        click.echo(event.model_dump_json(indent=2))
        return
    click.echo(_columnize(_event_rows([event])))


@main.command("events")
@click.option(
    "--since",
    type=click.DateTime(),
    default=None,
    help="Only list events triggered at or after this UTC time.",
)
@click.option("--json-output", is_flag=True, help="Emit events as JSON.")
@click.pass_obj
def events_command(
    config: ClientConfig, since: datetime | None, json_output: bool
) -> None:
    """List past chaos events."""
    client = ChaosMonkey(config)
    try:
        events = client.events_since(since) if since else client.events()
    except ChaosMonkeyError as exc:
        _fail(exc)

    if json_output:
        click.echo(json.dumps([e.model_dump(mode="json") for e in events], indent=2))
        return
    click.echo(_columnize(_event_rows(events)))


@main.command("strategies")
def strategies_command() -> None:
    """List the chaos strategies built into Chaos Monkey."""
    for strategy in STRATEGIES:
        click.echo(strategy)


@main.command("groups")
@click.option("--region", "aws_region", required=True, help="AWS region to list.")
@click.option("--json-output", is_flag=True, help="Emit groups as JSON.")
def groups_command(aws_region: str, json_output: bool) -> None:
    """List the auto scaling groups of an AWS region."""
    try:
        groups = auto_scaling_groups(aws_region)
    except (BotoCoreError, ClientError) as exc:
        _fail(exc)

    if json_output:
        click.echo(json.dumps([g.model_dump() for g in groups], indent=2))
        return

    rows = [["AutoScalingGroupName", "Instances", "Desired", "Min", "Max"]]
    for g in groups:
        rows.append(
            [
                g.name,
                str(g.instances_in_service),
                str(g.desired_capacity),
                str(g.min_size),
                str(g.max_size),
            ]
        )
    click.echo(_columnize(rows))


@main.command("delete-simpledb-domain")
@click.argument("domain")
@click.option("--region", "aws_region", required=True, help="AWS region of the domain.")
def delete_simpledb_domain_command(domain: str, aws_region: str) -> None:
    """Delete SimpleDB domain DOMAIN (e.g. Chaos Monkey's SIMIAN_ARMY)."""
    try:
        delete_simpledb_domain(domain, aws_region)
    except (ChaosMonkeyError, BotoCoreError, ClientError) as exc:
        _fail(exc)
    click.echo(f"Deleted SimpleDB domain '{domain}'.")


if __name__ == "__main__":
    main()
