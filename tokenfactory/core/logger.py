"""JSONL event logger - append-only record of every core operation"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..config import get
from .errors import ContractError
from .messages import Response


class EventLogger:
    """Append-only JSONL event log.

    Every event carries a UTC timestamp and a monotonic ``sequence`` so
    operations can be ordered even when timestamps collide.
    """

    output_path: Path
    _sequence: int

    def __init__(self, output_file: str | Path, truncate: bool = False) -> None:
        """Initialize the event logger.

        Args:
            output_file: JSONL file to append to (parents are created)
            truncate: Start from an empty file instead of appending
        """
        self.output_path = Path(output_file)
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        if truncate or not self.output_path.exists():
            self.output_path.write_text("")
        self._sequence = 0

    def log(self, event_type: str, data: dict[str, Any]) -> None:
        """Log an event to the JSONL file."""
        self._sequence += 1
        event: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "sequence": self._sequence,
            "event_type": event_type,
            **data,
        }
        with open(self.output_path, "a") as f:
            f.write(json.dumps(event) + "\n")

    def log_success(self, operation: str, sender: str | None, response: Response) -> None:
        """Log a committed operation with its attributes and message count."""
        self.log(operation, {
            "sender": sender,
            "success": True,
            "attributes": dict(response.attributes),
            "message_count": len(response.messages),
        })

    def log_failure(self, operation: str, sender: str | None, error: ContractError) -> None:
        """Log a rejected operation with its error code."""
        self.log(operation, {
            "sender": sender,
            "success": False,
            "error_code": error.code.value,
            "error": error.message,
        })

    def read_recent(self, n: int | None = None) -> list[dict[str, Any]]:
        """Read the last N events from the log.

        N defaults to logging.default_recent from config.
        """
        if n is None:
            default_recent = get("logging.default_recent")
            n = default_recent if isinstance(default_recent, int) else 50
        if not self.output_path.exists():
            return []
        lines = [line for line in self.output_path.read_text().split("\n") if line]
        recent = lines[-n:] if len(lines) > n else lines
        return [json.loads(line) for line in recent]
