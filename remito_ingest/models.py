from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple


@dataclass(frozen=True)
class PositionedRun:
    """A text run on a PDF page, in PDF space (``y`` grows upward)."""

    x: float
    y: float
    text: str
    width: float


@dataclass(frozen=True)
class PendingItem:
    """A code seen on one line whose quantity has not been found yet."""

    code: str
    description_parts: Tuple[str, ...] = ()
    quantity_str: Optional[str] = None


@dataclass
class ExtractedItem:
    code: str                    # digits only, keeps leading zeros
    description: str
    quantity: float


@dataclass
class InventoryItem(ExtractedItem):
    barcode: Optional[str] = None    # filled later from the product catalog


@dataclass
class SpreadsheetRow:
    """One data row of an inventory export before validation."""

    id: Optional[str] = None
    code: Optional[str] = None
    description: Optional[str] = None
    quantity: Any = None


@dataclass
class InventorySheet:
    items: List[InventoryItem] = field(default_factory=list)
    inventory_id: Optional[str] = None
    sheet_name: Optional[str] = None
