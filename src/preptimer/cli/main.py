"""CLI entry point for preptimer.

Uses Click to expose the ``preptimer`` command group.  Commands read and
write order snapshots through :class:`OrderStore` and render values
computed by the pure timer engine.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, TypeVar

import click

import preptimer
from preptimer.core.board import TimerBoard
from preptimer.core.countdown import (
    TimerState,
    calculate_timer_state,
    get_progress_percentage,
    is_order_preparing,
)
from preptimer.core.formatting import format_time
from preptimer.core.history import format_timing_comparison, get_timing_status, get_timing_summary
from preptimer.core.snapshot import parse_timestamp
from preptimer.core.store import DEFAULT_STORE_PATH, OrderStore, PrepTimerError
from preptimer.core.validation import validate_preparation_time

T = TypeVar("T")

_FINISHED_STATUSES = frozenset({"ready", "completed"})


def _run(action: Callable[[], T]) -> T:
    """Execute *action*, converting ``PrepTimerError`` to a CLI error.

    On ``PrepTimerError`` the message is printed to stderr and the
    process exits with code 1.
    """
    try:
        return action()
    except PrepTimerError as exc:
        click.echo(str(exc), err=True)
        sys.exit(1)


def _parse_now(ctx: click.Context, param: click.Parameter, value: str | None) -> datetime | None:
    if value is None:
        return None
    parsed = parse_timestamp(value)
    if parsed is None:
        raise click.BadParameter(f"not an ISO-8601 timestamp: {value}")
    return parsed


_now_option = click.option(
    "--now",
    callback=_parse_now,
    help="Evaluate at this ISO-8601 instant instead of the wall clock.",
)


def _open_store(ctx: click.Context) -> OrderStore:
    return _run(lambda: OrderStore(ctx.obj["store_path"]))


def _describe_state(state: TimerState) -> str:
    label = "overtime" if state.is_overtime else "remaining"
    progress = get_progress_percentage(state)
    return f"{format_time(state.remaining_seconds)} {label} ({progress:.0f}%)"


def _is_finished(snapshot: Any) -> bool:
    status = snapshot.status
    return isinstance(status, str) and status.strip().casefold() in _FINISHED_STATUSES


@click.group()
@click.version_option(version=preptimer.__version__, prog_name="preptimer")
@click.option(
    "--store",
    "store_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_STORE_PATH,
    envvar="PREPTIMER_STORE",
    show_default=True,
    help="JSON file holding order snapshots.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, store_path: Path, verbose: bool) -> None:
    """preptimer: preparation countdowns for food orders."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["store_path"] = store_path


@cli.command()
@click.argument("value")
def validate(value: str) -> None:
    """Check VALUE as a preparation estimate in minutes."""
    result = validate_preparation_time(value)
    if not result.is_valid:
        click.echo(result.error, err=True)
        sys.exit(1)
    click.echo("OK")


@cli.command()
@click.argument("order_id")
@click.argument("minutes")
@_now_option
@click.pass_context
def start(ctx: click.Context, order_id: str, minutes: str, now: datetime | None) -> None:
    """Start preparing ORDER_ID with an estimate of MINUTES."""
    store = _open_store(ctx)
    snapshot = _run(lambda: store.start_preparing(order_id, minutes, now))
    click.echo(f"Order {order_id} preparing: {snapshot.preparation_time} minutes")


@cli.command()
@click.argument("order_id")
@_now_option
@click.pass_context
def ready(ctx: click.Context, order_id: str, now: datetime | None) -> None:
    """Mark ORDER_ID as ready."""
    store = _open_store(ctx)
    snapshot = _run(lambda: store.mark_ready(order_id, now))
    click.echo(f"Order {order_id} ready. {format_timing_comparison(snapshot)}")


@cli.command()
@click.argument("order_id", required=False)
@_now_option
@click.option("--json", "as_json", is_flag=True, help="Print machine-readable output.")
@click.pass_context
def status(ctx: click.Context, order_id: str | None, now: datetime | None, as_json: bool) -> None:
    """Show the countdown of ORDER_ID, or of every preparing order."""
    store = _open_store(ctx)
    if order_id is not None:
        orders = {order_id: _run(lambda: store.get(order_id))}
    else:
        orders = store.all()

    states = {
        oid: calculate_timer_state(snapshot, now)
        for oid, snapshot in orders.items()
        if is_order_preparing(snapshot)
    }
    if as_json:
        click.echo(json.dumps({oid: state.to_dict() for oid, state in states.items()}, indent=2))
    elif not states:
        click.echo(f"Order {order_id} is not preparing" if order_id else "No orders preparing")
    else:
        for oid, state in states.items():
            click.echo(f"{oid}  {_describe_state(state)}")
    sys.exit(0 if states else 1)


@cli.command()
@click.option("--interval", type=float, default=1.0, show_default=True, help="Seconds between ticks.")
@click.option("--ticks", type=int, default=None, help="Stop after this many ticks.")
@click.pass_context
def watch(ctx: click.Context, interval: float, ticks: int | None) -> None:
    """Live countdown of every preparing order, refreshed from the store."""
    store_path = ctx.obj["store_path"]
    board = TimerBoard()
    for oid, snapshot in _open_store(ctx).all().items():
        if is_order_preparing(snapshot):
            board.track(oid, snapshot)
    if not board.active():
        click.echo("No orders preparing")
        return

    def on_tick(now: datetime, states: dict[str, TimerState]) -> None:
        for oid, state in states.items():
            click.echo(f"{oid}  {_describe_state(state)}")
        fresh = _run(lambda: OrderStore(store_path)).all()
        for oid in board.active():
            if oid not in fresh:
                board.cancel(oid)
        for oid, snapshot in fresh.items():
            if oid in board.active() or is_order_preparing(snapshot):
                board.track(oid, snapshot)

    board.run(interval=interval, ticks=ticks, on_tick=on_tick)


@cli.command()
@click.argument("order_id", required=False)
@click.option("--json", "as_json", is_flag=True, help="Print machine-readable output.")
@click.pass_context
def report(ctx: click.Context, order_id: str | None, as_json: bool) -> None:
    """Compare estimated and actual preparation time of finished orders."""
    store = _open_store(ctx)
    if order_id is not None:
        orders = {order_id: _run(lambda: store.get(order_id))}
    else:
        orders = {oid: s for oid, s in store.all().items() if _is_finished(s)}

    if as_json:
        payload = {
            oid: {
                "summary": get_timing_summary(snapshot).to_dict(),
                "status": get_timing_status(snapshot).to_dict(),
            }
            for oid, snapshot in orders.items()
        }
        click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return
    if not orders:
        click.echo("No finished orders")
        return
    for oid, snapshot in orders.items():
        timing = get_timing_status(snapshot)
        click.echo(f"{oid}  {timing.icon} {timing.label}  {format_timing_comparison(snapshot)}")


@cli.command()
@click.argument("order_id")
@click.pass_context
def forget(ctx: click.Context, order_id: str) -> None:
    """Remove ORDER_ID from the store."""
    store = _open_store(ctx)
    _run(lambda: store.forget(order_id))
    click.echo(f"Order {order_id} removed")
