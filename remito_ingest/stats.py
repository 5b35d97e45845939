from __future__ import annotations

from typing import Dict, List

from .models import ExtractedItem


def summary(items: List[ExtractedItem]) -> Dict[str, object]:
    """Item count, summed quantity and number of distinct codes."""
    return {
        "count": len(items),
        "total_quantity": sum(i.quantity for i in items),
        "codes": len({i.code for i in items}),
    }
