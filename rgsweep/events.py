"""
Run report utilities for NDJSON format.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

PathLike = Union[str, Path]


def emit_event(report_path: Optional[PathLike], event_type: str, data: Dict[str, Any]) -> None:
    """
    Append an event to a run report.

    Args:
        report_path: NDJSON file to append to; nothing is written when None
        event_type: Event type (e.g., "DECISION", "DISPATCH")
        data: Event data
    """
    if report_path is None:
        return

    event = {
        "ts": datetime.now().isoformat(),
        "type": event_type,
        "data": data
    }

    with open(report_path, "a") as f:
        f.write(json.dumps(event) + "\n")
        f.flush()


def read_events(report_path: PathLike) -> List[Dict[str, Any]]:
    """
    Read all events from a run report.

    Args:
        report_path: NDJSON file

    Returns:
        List of events
    """
    report_file = Path(report_path)
    if not report_file.exists():
        return []

    events = []
    with open(report_file, "r") as f:
        for line in f:
            line = line.strip()
            if line:
                try:
                    events.append(json.loads(line))
                except json.JSONDecodeError:
                    continue  # Skip malformed lines

    return events


class EventTypes:
    RUN_START = "RUN_START"
    DECISION = "DECISION"
    DELETION_BLOCKED = "DELETION_BLOCKED"
    DISPATCH = "DISPATCH"
    JOB_OUTCOME = "JOB_OUTCOME"
    FATAL = "FATAL"
    RUN_DONE = "RUN_DONE"
