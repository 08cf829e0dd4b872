from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Iterable, List, Tuple

from .models import Process, ProcessClaim
from .paging import parse_reference_string


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        return _load_json(path)
    if suffix == ".csv":
        return _load_csv(path)

    raise ValueError(f"Unsupported workload format: {suffix} (use .json or .csv)")


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, list):
        raise ValueError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        return [_process_from_mapping(row) for row in reader]


def _process_from_mapping(mapping) -> Process:
    try:
        pid = int(mapping["pid"])
        arrival_time = int(mapping["arrival_time"])
        burst_time = int(mapping["burst_time"])
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid process entry: {mapping!r}") from exc

    priority_val = mapping.get("priority")
    try:
        priority = int(priority_val) if priority_val not in (None, "") else 0
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid priority in process entry: {mapping!r}") from exc

    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )


def load_references(path: str | Path) -> List[int]:
    """
    Load a page reference string (comma or whitespace separated) from a text file.
    """
    text = Path(path).read_text(encoding="utf-8")
    return parse_reference_string(text)


def _int_vector(values: Iterable, what: str) -> Tuple[int, ...]:
    try:
        return tuple(int(v) for v in values)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid {what}: {values!r}") from exc


def load_bankers_scenario(path: str | Path) -> Tuple[Tuple[int, ...], List[ProcessClaim]]:
    """
    Load a Banker's scenario from JSON::

        {"total": [10, 5, 7],
         "processes": [{"pid": 0, "allocation": [0, 1, 0], "maximum": [7, 5, 3]}, ...]}
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, dict) or "total" not in raw or "processes" not in raw:
        raise ValueError("Banker's scenario must be an object with 'total' and 'processes'")

    total = _int_vector(raw["total"], "total resource vector")
    claims: List[ProcessClaim] = []
    for entry in raw["processes"]:
        try:
            pid = int(entry["pid"])
            allocation = _int_vector(entry["allocation"], f"allocation of process {pid}")
            maximum = _int_vector(entry["maximum"], f"maximum of process {pid}")
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Invalid process entry: {entry!r}") from exc
        claims.append(ProcessClaim(pid=pid, allocation=allocation, maximum=maximum))

    return total, claims
