from __future__ import annotations

import re
from dataclasses import replace
from typing import Dict, Iterable, List

from .models import ExtractedItem

_PLACEHOLDER = re.compile(r"/\s*/")
_LONG_NUMBER = re.compile(r"\d{6,}")      # secondary codes leaking into text
_SPACES = re.compile(r"\s+")


def clean_description(text: str) -> str:
    text = _PLACEHOLDER.sub("", text)
    text = _LONG_NUMBER.sub("", text)
    return _SPACES.sub(" ", text).strip()


class ItemAggregator:
    """Merge items by code, summing quantities.

    The first description seen for a code is kept and entries stay in
    first-seen order.  Adding the same item twice doubles its quantity: a
    repeated line is a physical re-count.
    """

    def __init__(self) -> None:
        self._items: List[ExtractedItem] = []
        self._by_code: Dict[str, ExtractedItem] = {}

    def add(self, item: ExtractedItem) -> None:
        existing = self._by_code.get(item.code)
        if existing is not None:
            existing.quantity += item.quantity
            return
        # keep a copy so callers never see their items change
        item = replace(item)
        self._by_code[item.code] = item
        self._items.append(item)

    def extend(self, items: Iterable[ExtractedItem]) -> None:
        for item in items:
            self.add(item)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, code: object) -> bool:
        return code in self._by_code

    def items(self) -> List[ExtractedItem]:
        return list(self._items)
