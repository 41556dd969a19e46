"""Stdout sink emitting NDJSON for log-forwarder ingestion."""

from __future__ import annotations

import json
import sys
import threading
from typing import Mapping

from ..config import LoggingSettings


class StdoutSink:
    """Write structured records to stdout as NDJSON."""

    def __init__(self, settings: LoggingSettings, stream=None) -> None:
        self._settings = settings # The settings for the sink
        self._stream = stream or sys.stdout # The stream to write to
        self._lock = threading.Lock() # Serializes writes across threads

    def emit(self, record: Mapping[str, object]) -> None:
        """Emit a record to the stdout sink."""

        payload = dict(record)
        payload.setdefault("severity", payload.get("level", "INFO"))

        line = json.dumps(payload, separators=(",", ":"), default=str)

        with self._lock:
            self._stream.write(line + "\n")
            self._stream.flush()
