"""
Event logging utilities for NDJSON format.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from .state import get_events_file

logger = logging.getLogger(__name__)


class EventTypes:
    DEPLOY_START = "DEPLOY_START"
    DEPLOY_DONE = "DEPLOY_DONE"
    STOP = "STOP"
    START = "START"
    DESTROY_DONE = "DESTROY_DONE"
    FORCE_DESTROY = "FORCE_DESTROY"
    ERROR = "ERROR"


class EventLog:
    """Append-only lifecycle history, one JSON object per line."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else get_events_file()

    def emit(self, event_type: str, software: str, data: Optional[Dict[str, Any]] = None) -> None:
        """
        Append an event.

        Args:
            event_type: One of EventTypes
            software: Slug the event concerns
            data: Event payload (must not contain secret values)
        """
        event = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "type": event_type,
            "software": software,
            "data": data or {},
        }

        # best effort
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(json.dumps(event) + "\n")
                f.flush()
        except OSError as e:
            logger.warning("Failed to write event %s to %s: %s", event_type, self.path, e)

    def read(self, software: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Read events, optionally only those for one slug.

        Returns:
            List of events, oldest first
        """
        if not self.path.exists():
            return []

        events = []
        with open(self.path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    event = json.loads(line)
                except json.JSONDecodeError:
                    continue  # Skip malformed lines
                if software is None or event.get("software") == software:
                    events.append(event)

        return events
