"""Order snapshot — the read-only input every engine function consumes."""

from __future__ import annotations

import logging
import math
import numbers
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any

from dateutil.parser import isoparse

logger = logging.getLogger(__name__)

PREPARING_STATUSES = frozenset({"preparing", "processing"})

# attribute name -> accepted mapping keys
_FIELD_KEYS = {
    "status": ("status",),
    "preparation_time": ("preparationTime", "preparation_time"),
    "preparing_at": ("preparingAt", "preparing_at"),
    "ready_at": ("readyAt", "ready_at"),
}


def parse_timestamp(value: Any) -> datetime | None:
    """Parse *value* into an aware ``datetime``, or return ``None``.

    Accepts ``datetime`` instances and ISO-8601 strings.  Naive values are
    taken to be UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = isoparse(text)
        except (ValueError, OverflowError):
            logger.debug("Unparsable timestamp %r", value)
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def as_float(value: Any) -> float | None:
    """Return ``float(value)`` for real numbers and decimals, else ``None``."""
    if isinstance(value, bool) or not isinstance(value, (numbers.Real, Decimal)):
        return None
    try:
        return float(value)
    except (ValueError, OverflowError):
        return None


def coerce_minutes(value: Any) -> float | None:
    """Return *value* as a finite number of minutes, or ``None``."""
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        number = as_float(value)
    if number is None or not math.isfinite(number):
        return None
    return number


def resolve_now(now: Any = None) -> datetime:
    """Return the injected instant as an aware datetime, or the UTC wall clock."""
    if now is None:
        return datetime.now(timezone.utc)
    resolved = parse_timestamp(now)
    if resolved is None:
        logger.debug("Ignoring unusable 'now' value %r, using wall clock", now)
        return datetime.now(timezone.utc)
    return resolved


def is_preparing_status(status: Any) -> bool:
    """True if *status* names the preparing phase, compared case-insensitively."""
    if isinstance(status, Enum):
        status = status.value
    if not isinstance(status, str):
        return False
    return status.strip().casefold() in PREPARING_STATUSES


def _isoformat(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


@dataclass(frozen=True)
class OrderSnapshot:
    """Point-in-time view of an order's preparation-relevant fields.

    Field values are kept exactly as received; every engine function treats
    them as untrusted and parses them on use.
    """

    status: Any = None
    preparation_time: Any = None
    preparing_at: Any = None
    ready_at: Any = None

    @classmethod
    def from_mapping(cls, data: Any) -> OrderSnapshot | None:
        """Build a snapshot from a camelCase or snake_case mapping.

        Returns ``None`` for anything that is not a mapping.
        """
        if not isinstance(data, Mapping):
            return None
        values = {}
        for attr, keys in _FIELD_KEYS.items():
            values[attr] = next((data[key] for key in keys if key in data), None)
        return cls(**values)

    @classmethod
    def coerce(cls, obj: Any) -> OrderSnapshot | None:
        """Return *obj* as a snapshot, or ``None`` if it has an unusable shape."""
        if isinstance(obj, cls):
            return obj
        snapshot = cls.from_mapping(obj)
        if snapshot is None and obj is not None:
            logger.debug("Rejected snapshot of type %s", type(obj).__name__)
        return snapshot

    @property
    def estimated_minutes(self) -> float | None:
        return coerce_minutes(self.preparation_time)

    @property
    def started_at(self) -> datetime | None:
        return parse_timestamp(self.preparing_at)

    @property
    def finished_at(self) -> datetime | None:
        return parse_timestamp(self.ready_at)

    def to_dict(self) -> dict[str, Any]:
        """Return the snapshot in its camelCase wire form."""
        status = self.status.value if isinstance(self.status, Enum) else self.status
        return {
            "status": status,
            "preparationTime": self.preparation_time,
            "preparingAt": _isoformat(self.preparing_at),
            "readyAt": _isoformat(self.ready_at),
        }
