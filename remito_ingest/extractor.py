"""Per-line item extraction for remito text lines.

The remito template prints items two ways:

* on one line: ``0123  PRODUCTO X   5,00 UN``;
* split over lines, sometimes in two print columns: a code line ending
  with a ``/ /`` placeholder (``PRODUCTO Y 0456 / /``), optional wrapped
  description lines, then a line with the quantities (``1,00 UN  2,00 UN``).

:func:`step` consumes one line and returns the next :class:`ExtractorState`
plus the items completed by that line.
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import List, Optional, Pattern, Tuple

from .aggregator import clean_description
from .config import DEFAULT_PROFILE, LayoutProfile
from .models import ExtractedItem, PendingItem

logger = logging.getLogger(__name__)

# "<leading text> <code> / /", possibly several per line
_code_line = re.compile(r"(.*?)(\d{4,})\s+/\s+/")

# Quantity token such as "5,00", "5,00;" or "5,00UN"
_qty_token = re.compile(r"^(\d+,\d{2});?(.*)$")

_numeric_only = re.compile(r"^\d+$")

# Date stamps in the page header, e.g. "12/03/2025"
_DATE_ARTIFACT = "/202"
_PLACEHOLDER = "/ /"


class Phase(enum.Enum):
    SCANNING = "scanning"
    AWAITING_QUANTITY = "awaiting_quantity"


@dataclass(frozen=True)
class ExtractorState:
    pending: Tuple[PendingItem, ...] = ()

    @property
    def phase(self) -> Phase:
        return Phase.AWAITING_QUANTITY if self.pending else Phase.SCANNING


SCANNING = ExtractorState()


@lru_cache(maxsize=None)
def _item_pattern(units: Tuple[str, ...]) -> Pattern[str]:
    # longest first so "PZA" wins over "PZ"
    alternatives = "|".join(re.escape(u) for u in sorted(units, key=len, reverse=True))
    return re.compile(
        r"(?<!\d)(\d{4,})\s+(.+?)\s+(\d+,\d{2})\s+(?:%s)(?![A-Za-z0-9])" % alternatives,
        re.IGNORECASE,
    )


def parse_quantity(text: str) -> float:
    return float(text.replace(",", "."))


def clean_code(raw: str) -> Optional[str]:
    code = re.sub(r"\D", "", raw or "")
    return code if len(code) >= 4 else None


def _is_unit(token: str, profile: LayoutProfile) -> bool:
    return token.strip(".;:").upper() in profile.units


def quantity_tokens(line: str, profile: LayoutProfile = DEFAULT_PROFILE) -> List[str]:
    """Return the quantities of ``line`` that sit next to a unit of measure."""
    words = line.split()
    found: List[str] = []
    for i, word in enumerate(words):
        m = _qty_token.match(word)
        if not m:
            continue
        rest = m.group(2)
        following = words[i + 1] if i + 1 < len(words) else ""
        if (rest and _is_unit(rest, profile)) or (following and _is_unit(following, profile)):
            found.append(m.group(1))
    return found


def _emit(code: str, description: str, quantity_str: str) -> ExtractedItem:
    return ExtractedItem(
        code=code,
        description=clean_description(description),
        quantity=parse_quantity(quantity_str),
    )


def step(
    state: ExtractorState, line: str, profile: LayoutProfile = DEFAULT_PROFILE
) -> Tuple[ExtractorState, List[ExtractedItem]]:
    """Feed one reconstructed line to the extractor."""
    trimmed = line.strip()
    if len(trimmed) < 3 or _numeric_only.match(trimmed) or _DATE_ARTIFACT in trimmed:
        return state, []

    # single-line items supersede any unresolved multi-line state
    emitted = [
        _emit(m.group(1), m.group(2), m.group(3))
        for m in _item_pattern(profile.units).finditer(line)
    ]
    if emitted:
        return SCANNING, emitted

    pending: List[PendingItem] = []
    for m in _code_line.finditer(line):
        code = clean_code(m.group(2))
        if code:
            lead = m.group(1).strip()
            pending.append(PendingItem(code=code, description_parts=(lead,) if lead else ()))
    if pending:
        return ExtractorState(tuple(pending)), []

    if state.phase is Phase.AWAITING_QUANTITY and all(p.quantity_str is None for p in state.pending):
        quantities = quantity_tokens(line, profile)
        if quantities:
            unresolved = list(state.pending)
            for i, (item, qty) in enumerate(zip(state.pending, quantities)):
                emitted.append(_emit(item.code, " ".join(item.description_parts), qty))
                unresolved[i] = replace(item, quantity_str=qty)
            remaining = tuple(p for p in unresolved if p.quantity_str is None)
            return ExtractorState(remaining), emitted

    if state.pending and _PLACEHOLDER not in line:
        if len(trimmed) > 5 and not _numeric_only.match(trimmed):
            # Only the first pending item grows; wrapped descriptions of two
            # simultaneous items end up on the first one.
            first = state.pending[0]
            first = replace(first, description_parts=first.description_parts + (trimmed,))
            return ExtractorState((first,) + state.pending[1:]), []

    return state, []


def finish_page(state: ExtractorState) -> ExtractorState:
    """Drop items still waiting for a quantity when a page ends."""
    for item in state.pending:
        logger.debug("Dropping unresolved item %s at page end", item.code)
    return SCANNING


def extract_lines(
    lines: List[str], profile: LayoutProfile = DEFAULT_PROFILE
) -> List[ExtractedItem]:
    """Run the extractor over the lines of one page."""
    state = SCANNING
    items: List[ExtractedItem] = []
    for line in lines:
        state, emitted = step(state, line, profile)
        items.extend(emitted)
    finish_page(state)
    return items
