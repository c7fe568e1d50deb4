"""Notification records emitted by contracts.

Events are appended to the chain's EventLog while an atomic unit runs. They
are part of the unit: a rolled-back unit leaves no events behind.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .addresses import Address


@dataclass(frozen=True)
class Event:
    """A single notification.

    Attributes:
        name: Event name (e.g., "Transfer", "Locked")
        address: Address of the emitting contract
        args: Event payload
    """

    name: str
    address: Address
    args: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return {"event_type": self.name, "address": self.address, **self.args}


class EventLog:
    """Append-only, in-memory list of events with truncate-on-rollback."""

    _events: list[Event]

    def __init__(self) -> None:
        self._events = []

    def append(self, event: Event) -> None:
        """Record an event."""
        self._events.append(event)

    def __len__(self) -> int:
        return len(self._events)

    def since(self, position: int) -> list[Event]:
        """Events recorded after a previous len() checkpoint."""
        return self._events[position:]

    def truncate(self, position: int) -> None:
        """Drop every event recorded after position."""
        del self._events[position:]

    def filter(
        self,
        name: str | None = None,
        address: Address | None = None,
    ) -> list[Event]:
        """Return events matching an optional name and emitter address."""
        return [
            e for e in self._events
            if (name is None or e.name == name)
            and (address is None or e.address == address)
        ]

    def all(self) -> list[Event]:
        """Return a copy of every recorded event."""
        return list(self._events)
