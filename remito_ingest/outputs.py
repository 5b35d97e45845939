from __future__ import annotations

import csv
import json
from dataclasses import asdict
from pathlib import Path
from typing import Dict, List, Optional

from .models import ExtractedItem


def item_record(item: ExtractedItem) -> Dict[str, object]:
    return asdict(item)


def write_csv(items: List[ExtractedItem], out_path: Path) -> None:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f, lineterminator="\n")
        w.writerow(["code", "description", "quantity", "barcode"])
        for item in items:
            w.writerow([
                item.code, item.description, f"{item.quantity:g}",
                getattr(item, "barcode", None) or "",
            ])


def write_json(
    items: List[ExtractedItem],
    out_path: Path,
    inventory_id: Optional[str] = None,
    with_inventory_id: bool = False,
) -> None:
    """Write items as JSON.

    Remito items are written as a bare list.  Inventory sheets pass
    ``with_inventory_id=True`` and get ``{"items": [...], "inventoryId": ...}``.
    """
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    records = [item_record(i) for i in items]
    payload: object = records
    if with_inventory_id:
        payload = {"items": records, "inventoryId": inventory_id}
    with out_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
