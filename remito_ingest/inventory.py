"""Inventory count sheets exported by the ERP ("2-Inventario")."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence, Tuple

from .aggregator import ItemAggregator
from .headers import ColumnMap, locate_header
from .models import InventoryItem, InventorySheet, SpreadsheetRow
from .sources import sniff_source

logger = logging.getLogger(__name__)


def cell_text(value: Any) -> Optional[str]:
    """Render a raw cell as stripped text; ``None`` when blank."""
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def coerce_quantity(value: Any) -> float:
    """Best-effort numeric value of a quantity cell, 0.0 when unusable."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip().replace(" ", "")
    if "," in text:
        # "1.234,50" -> "1234.50"
        text = text.replace(".", "").replace(",", ".")
    try:
        return float(text)
    except ValueError:
        return 0.0


def _cell(row: Sequence[Any], idx: int) -> Any:
    return row[idx] if 0 <= idx < len(row) else None


def read_sheet_rows(
    rows: List[Sequence[Any]], header_index: int, columns: ColumnMap
) -> List[SpreadsheetRow]:
    out: List[SpreadsheetRow] = []
    for row in rows[header_index + 1:]:
        out.append(
            SpreadsheetRow(
                id=cell_text(_cell(row, columns.id)),
                code=cell_text(_cell(row, columns.code)),
                description=cell_text(_cell(row, columns.description)),
                quantity=_cell(row, columns.quantity),
            )
        )
    return out


def build_inventory(rows: List[Sequence[Any]]) -> Tuple[List[InventoryItem], Optional[str]]:
    """Locate the header of ``rows`` and turn the data rows into items."""
    header_index, columns = locate_header(rows)
    logger.debug("Header at row %d: %s", header_index, columns)

    aggregator = ItemAggregator()
    inventory_id: Optional[str] = None
    skipped = 0
    for row in read_sheet_rows(rows, header_index, columns):
        if inventory_id is None and row.id and row.id.isascii() and row.id.isdigit():
            inventory_id = row.id
        if not row.code or not row.description:
            skipped += 1
            continue
        aggregator.add(
            InventoryItem(
                code=row.code,
                description=row.description,
                quantity=coerce_quantity(row.quantity),
            )
        )

    items = aggregator.items()
    logger.info("Read %d inventory items (%d rows skipped)", len(items), skipped)
    return items, inventory_id


def parse_inventory_sheet(data: bytes) -> InventorySheet:
    """Parse an inventory export buffer (xlsx or SpreadsheetML).

    Raises
    ------
    MalformedContainerError
        If the container cannot be read or, for SpreadsheetML, has no
        "Inventario" worksheet.
    """
    source = sniff_source(data)
    rows = source.read_rows()
    items, inventory_id = build_inventory(rows)
    return InventorySheet(items=items, inventory_id=inventory_id, sheet_name=source.sheet_name)


def peek_rows(data: bytes, limit: int = 10) -> Tuple[Optional[str], List[List[Any]]]:
    """Return the sheet name and first ``limit`` raw rows, for inspection."""
    source = sniff_source(data)
    rows = source.read_rows()
    return source.sheet_name, rows[:limit]
