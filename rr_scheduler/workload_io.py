from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import List

from .errors import ConfigurationError
from .models import ProcessSpec

logger = logging.getLogger(__name__)


def load_workload(path: str | Path) -> List[ProcessSpec]:
    """
    Load a workload from a JSON or CSV file into a list of ProcessSpec rows.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        specs = _load_json(path)
    elif suffix == ".csv":
        specs = _load_csv(path)
    else:
        raise ConfigurationError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    logger.info("Loaded %d processes from %s", len(specs), path)
    return specs


def _load_json(path: Path) -> List[ProcessSpec]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Invalid JSON in {path}: {exc}") from exc

    if not isinstance(raw, list):
        raise ConfigurationError("JSON workload must be a list of process objects")

    return [_spec_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[ProcessSpec]:
    specs: List[ProcessSpec] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            specs.append(_spec_from_mapping(row))
    return specs


def _spec_from_mapping(mapping) -> ProcessSpec:
    try:
        name = str(mapping["name"]).strip()
        burst_time = int(mapping["burst_time"])
        arrival_val = mapping.get("arrival_time")
        arrival_time = int(arrival_val) if arrival_val not in (None, "") else 0
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid process entry: {mapping!r}") from exc

    id_val = mapping.get("id")
    pid_val = mapping.get("pid")
    try:
        pid = int(pid_val) if pid_val not in (None, "") else None
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid pid in process entry: {mapping!r}") from exc

    return ProcessSpec(
        name=name,
        burst_time=burst_time,
        arrival_time=arrival_time,
        id=str(id_val) if id_val not in (None, "") else None,
        pid=pid,
    )
