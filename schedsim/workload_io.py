from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence

from .errors import InvalidInputError
from .models import DEFAULT_PRIORITY, Process
from .store import ProcessStore

logger = logging.getLogger(__name__)

PID_COLUMNS = ("pid", "id", "process", "process_id", "name")
ARRIVAL_COLUMNS = ("arrival_time", "arrival", "at", "arrive")
BURST_COLUMNS = ("burst_time", "burst", "bt", "duration")
PRIORITY_COLUMNS = ("priority", "prio", "pr", "p")


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.

    Column names are matched case-insensitively against a few common aliases
    (``pid``/``id``, ``arrival``/``at``, ``burst``/``bt``, ``priority``).
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        rows = _read_json(path)
    elif suffix == ".csv":
        rows = _read_csv(path)
    else:
        raise InvalidInputError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    store = ProcessStore()
    for line, row in enumerate(rows, start=1):
        process = _process_from_mapping(row, line)
        try:
            store.add_process(process)
        except InvalidInputError as exc:
            raise InvalidInputError(f"Row {line}: {exc}") from exc

    logger.info("Loaded %d processes from %s", len(store), path)
    return list(store.snapshot())


def _read_json(path: Path) -> Sequence[Any]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise InvalidInputError(f"Invalid JSON in {path}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise InvalidInputError(f"{path} is not valid UTF-8") from exc

    if not isinstance(raw, list):
        raise InvalidInputError("JSON workload must be a list of process objects")
    return raw


def _read_csv(path: Path) -> Sequence[Mapping[str, Any]]:
    with path.open("r", encoding="utf-8", newline="") as f:
        try:
            return list(csv.DictReader(f))
        except UnicodeDecodeError as exc:
            raise InvalidInputError(f"{path} is not valid UTF-8") from exc


def _lookup(mapping: Mapping[str, Any], aliases: Sequence[str]) -> Optional[Any]:
    normalized = {str(k).strip().lower(): v for k, v in mapping.items() if k is not None}
    for alias in aliases:
        if alias in normalized:
            return normalized[alias]
    return None


def _as_int(value: Any, field: str, line: int) -> int:
    if isinstance(value, bool):
        raise InvalidInputError(f"Row {line}: {field} must be an integer, got {value!r}")
    try:
        if isinstance(value, float):
            if not value.is_integer():
                raise ValueError(value)
            return int(value)
        return int(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"Row {line}: {field} must be an integer, got {value!r}") from exc


def _process_from_mapping(mapping: Any, line: int) -> Process:
    if not isinstance(mapping, Mapping):
        raise InvalidInputError(f"Row {line}: invalid process entry: {mapping!r}")

    pid = _lookup(mapping, PID_COLUMNS)
    arrival = _lookup(mapping, ARRIVAL_COLUMNS)
    burst = _lookup(mapping, BURST_COLUMNS)
    if pid in (None, "") or arrival in (None, "") or burst in (None, ""):
        raise InvalidInputError(f"Row {line}: invalid process entry: {dict(mapping)!r}")

    priority_val = _lookup(mapping, PRIORITY_COLUMNS)
    if priority_val in (None, ""):
        priority = DEFAULT_PRIORITY
    else:
        priority = _as_int(priority_val, "priority", line)

    return Process(
        pid=str(pid).strip(),
        arrival_time=_as_int(arrival, "arrival time", line),
        burst_time=_as_int(burst, "burst time", line),
        priority=priority,
    )
