"""JSONL event logger - durable record of committed chain events"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .events import Event


class EventLogger:
    """Append-only JSONL log of committed events.

    The chain hands over events only after their atomic unit commits, so the
    file never contains events of a rolled-back unit. Every line carries a
    monotonic 'sequence' field for ordering.
    """

    output_path: Path
    _sequence: int

    def __init__(self, output_file: str | Path, truncate: bool = True) -> None:
        """Initialize the event logger.

        Args:
            output_file: JSONL file path (parent directories are created)
            truncate: Clear an existing file on init (new run)
        """
        self.output_path = Path(output_file)
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self._sequence = 0
        if truncate or not self.output_path.exists():
            self.output_path.write_text("")

    @property
    def sequence(self) -> int:
        """Number of events written so far."""
        return self._sequence

    def log(self, event_type: str, data: dict[str, Any]) -> None:
        """Log an event to the JSONL file."""
        self._sequence += 1
        record: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "sequence": self._sequence,
            "event_type": event_type,
            **data,
        }
        with open(self.output_path, "a") as f:
            f.write(json.dumps(record) + "\n")

    def log_events(self, events: list[Event]) -> None:
        """Log a batch of committed events in order."""
        for event in events:
            self.log(event.name, {"address": event.address, **event.args})

    def read(self) -> list[dict[str, Any]]:
        """Read back every logged record."""
        records: list[dict[str, Any]] = []
        with open(self.output_path) as f:
            for line in f:
                line = line.strip()
                if line:
                    records.append(json.loads(line))
        return records
