"""Tunable constants for the remito and inventory parsers.

The PDF heuristics were calibrated on a single remito template.  They are
grouped in :class:`LayoutProfile` so another template can be supported by
shipping a JSON profile instead of editing the parser.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Tuple

from .errors import IngestError

# Unit-of-measure tokens that anchor the quantity column.
DEFAULT_UNITS: Tuple[str, ...] = (
    "UN", "UNI", "UND", "KG", "GR", "CX", "CJ", "LT", "L", "ML", "MT", "M",
    "M2", "M3", "PAR", "PZ", "PZA", "JGO", "ROL", "BOL", "BLS", "KIT", "DOC",
)

# Markers printed on the second and third copy of a remito.
STOP_MARKERS: Tuple[str, ...] = ("DUPLICADO", "TRIPLICADO")

HEADER_SCAN_ROWS = 10
INVENTORY_SHEET_HINT = "inventario"

# Column positions used when the header row does not name a role.
DEFAULT_COLUMNS = {"id": 0, "code": 1, "description": 2, "quantity": 3}


@dataclass(frozen=True)
class LayoutProfile:
    line_tolerance: float = 5.0      # max baseline distance within one line
    units_per_space: float = 5.5     # horizontal units rendered as one space
    units: Tuple[str, ...] = DEFAULT_UNITS
    stop_markers: Tuple[str, ...] = STOP_MARKERS

    def __post_init__(self) -> None:
        if self.line_tolerance < 0:
            raise IngestError("line_tolerance must not be negative")
        if self.units_per_space <= 0:
            raise IngestError("units_per_space must be positive")
        object.__setattr__(self, "units", tuple(u.upper() for u in self.units))
        object.__setattr__(self, "stop_markers", tuple(self.stop_markers))


DEFAULT_PROFILE = LayoutProfile()


def load_profile(path: Path) -> LayoutProfile:
    """Read a :class:`LayoutProfile` from a JSON object.

    Missing keys keep their defaults.

    Raises
    ------
    IngestError
        If the file is not a JSON object, names an unknown setting or
        holds a value of the wrong type.
    """
    path = Path(path)
    with path.open(encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise IngestError(f"Invalid layout profile {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise IngestError(f"Layout profile {path} must be a JSON object")

    known = {f.name for f in fields(LayoutProfile)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise IngestError(f"Unknown layout profile keys: {', '.join(unknown)}")

    for key in ("line_tolerance", "units_per_space"):
        if key not in raw:
            continue
        value = raw[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise IngestError(f"Layout profile {key} must be a number, got {value!r}")
    for key in ("units", "stop_markers"):
        if key not in raw:
            continue
        value = raw[key]
        if not isinstance(value, list) or not all(isinstance(v, str) and v for v in value):
            raise IngestError(f"Layout profile {key} must be a list of strings, got {value!r}")
        raw[key] = tuple(value)
    return LayoutProfile(**raw)
