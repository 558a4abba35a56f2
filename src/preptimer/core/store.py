"""Order store — persists order snapshots to a JSON file between invocations."""

from __future__ import annotations

import dataclasses
import fcntl
import json
import logging
from pathlib import Path
from typing import Any

from preptimer.core.snapshot import OrderSnapshot, coerce_minutes, resolve_now
from preptimer.core.validation import validate_preparation_time

logger = logging.getLogger(__name__)

DEFAULT_STORE_PATH = Path.home() / ".config" / "preptimer" / "orders.json"


class PrepTimerError(Exception):
    """Base class for errors raised outside the pure timer engine."""


class InvalidPreparationTimeError(PrepTimerError):
    """Raised when a preparation estimate fails validation."""


class UnknownOrderError(PrepTimerError):
    """Raised when an order id is not in the store."""


class StoreCorruptedError(PrepTimerError):
    """Raised when the store file cannot be decoded."""


class OrderStore:
    """Snapshots keyed by order id, written to disk after every mutation.

    Only raw snapshot fields are stored; countdowns are always recomputed
    from them, so reloading after a restart yields the same timers.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path: Path = path if path is not None else DEFAULT_STORE_PATH
        self._orders: dict[str, OrderSnapshot] = {}
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    # -- public API ----------------------------------------------------------

    def all(self) -> dict[str, OrderSnapshot]:
        return dict(self._orders)

    def get(self, order_id: str) -> OrderSnapshot:
        try:
            return self._orders[order_id]
        except KeyError:
            raise UnknownOrderError(f"Unknown order: {order_id}") from None

    def put(self, order_id: str, snapshot: OrderSnapshot) -> None:
        self._orders[order_id] = snapshot
        self._save()

    def start_preparing(self, order_id: str, minutes: Any, now: Any = None) -> OrderSnapshot:
        """Move *order_id* into the preparing phase with a *minutes* estimate."""
        result = validate_preparation_time(minutes)
        if not result.is_valid:
            raise InvalidPreparationTimeError(result.error)
        estimate = coerce_minutes(minutes)
        if estimate is not None and estimate.is_integer():
            estimate = int(estimate)
        snapshot = OrderSnapshot(
            status="preparing",
            preparation_time=estimate,
            preparing_at=resolve_now(now).isoformat(),
        )
        self.put(order_id, snapshot)
        logger.info("Order %s preparing for %s minutes", order_id, estimate)
        return snapshot

    def mark_ready(self, order_id: str, now: Any = None) -> OrderSnapshot:
        """Record that *order_id* finished preparation at *now*."""
        snapshot = dataclasses.replace(
            self.get(order_id), status="ready", ready_at=resolve_now(now).isoformat()
        )
        self.put(order_id, snapshot)
        logger.info("Order %s ready", order_id)
        return snapshot

    def forget(self, order_id: str) -> None:
        self.get(order_id)
        del self._orders[order_id]
        self._save()

    # -- persistence ---------------------------------------------------------

    def _save(self) -> None:
        """Write all snapshots to the JSON file with file locking."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "orders": {
                order_id: snapshot.to_dict() for order_id, snapshot in self._orders.items()
            }
        }
        with open(self._path, "w", encoding="utf-8") as f:
            fcntl.flock(f, fcntl.LOCK_EX)
            json.dump(data, f, indent=2)
        logger.debug("Saved %d orders to %s", len(self._orders), self._path)

    def _load(self) -> None:
        """Load snapshots from the JSON file if it exists."""
        if not self._path.exists():
            return

        with open(self._path, encoding="utf-8") as f:
            fcntl.flock(f, fcntl.LOCK_SH)
            try:
                data = json.load(f)
            except (json.JSONDecodeError, UnicodeDecodeError) as exc:
                raise StoreCorruptedError(f"Cannot read {self._path}: {exc}") from exc

        orders = data.get("orders") if isinstance(data, dict) else None
        if not isinstance(orders, dict):
            raise StoreCorruptedError(f"Cannot read {self._path}: missing 'orders' table")

        for order_id, raw in orders.items():
            snapshot = OrderSnapshot.from_mapping(raw)
            if snapshot is None:
                logger.warning("Skipping malformed order %s in %s", order_id, self._path)
                continue
            self._orders[order_id] = snapshot
