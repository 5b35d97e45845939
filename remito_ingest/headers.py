from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple

from .config import DEFAULT_COLUMNS, HEADER_SCAN_ROWS


@dataclass
class ColumnMap:
    id: int = DEFAULT_COLUMNS["id"]
    code: int = DEFAULT_COLUMNS["code"]
    description: int = DEFAULT_COLUMNS["description"]
    quantity: int = DEFAULT_COLUMNS["quantity"]


def fold(value: Any) -> str:
    """Lower-case ``value`` and drop accents ("Código" -> "codigo")."""
    if value is None:
        return ""
    text = unicodedata.normalize("NFKD", str(value))
    return "".join(c for c in text if not unicodedata.combining(c)).lower().strip()


def _role(header: str) -> str | None:
    if "codigo" in header:
        return "code"
    if "descripcion" in header:
        return "description"
    if "saldo" in header or "stock" in header:
        return "quantity"
    if "id" in header and "inventario" in header:
        return "id"
    return None


def map_columns(header_row: Sequence[Any]) -> ColumnMap:
    found = {}
    for idx, cell in enumerate(header_row):
        role = _role(fold(cell))
        if role and role not in found:
            found[role] = idx
    return ColumnMap(**found)


def locate_header(
    rows: List[Sequence[Any]], scan_limit: int = HEADER_SCAN_ROWS
) -> Tuple[int, ColumnMap]:
    """Find the header row and map its columns to roles.

    The header is the first of the leading ``scan_limit`` rows with a cell
    mentioning "codigo".  Without one, row 0 is assumed and unmatched roles
    keep their positional defaults.
    """
    header_idx = 0
    for idx, row in enumerate(rows[:scan_limit]):
        if any("codigo" in fold(cell) for cell in row):
            header_idx = idx
            break
    header_row = rows[header_idx] if rows else []
    return header_idx, map_columns(header_row)
