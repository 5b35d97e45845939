# -*- coding: utf-8 -*-
"""
Extraction of delivered items from vendor remito (delivery note) PDFs.
"""

from __future__ import annotations

import io
import logging
from typing import Iterable, List, Optional

import pdfplumber

from .aggregator import ItemAggregator
from .config import DEFAULT_PROFILE, LayoutProfile
from .errors import PdfParseError
from .extractor import extract_lines
from .lines import reconstruct_lines
from .models import ExtractedItem, PositionedRun

logger = logging.getLogger(__name__)


def page_runs(page) -> List[PositionedRun]:
    """Text runs of a pdfplumber page converted to PDF space."""
    words = page.extract_words(keep_blank_chars=True, use_text_flow=True)
    height = float(page.height)
    return [
        PositionedRun(
            x=float(w["x0"]),
            y=height - float(w["bottom"]),
            text=w["text"],
            width=float(w["x1"]) - float(w["x0"]),
        )
        for w in words
    ]


def read_glyph_pages(data: bytes) -> List[List[PositionedRun]]:
    """Return the positioned text runs of every page in ``data``.

    Raises
    ------
    PdfParseError
        If pdfplumber cannot open or read the document.
    """
    logging.getLogger("pdfminer").setLevel(logging.ERROR)
    try:
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            return [page_runs(page) for page in pdf.pages]
    except Exception as exc:
        raise PdfParseError("Failed to parse PDF") from exc


def extract_remito_items(
    pages: Iterable[List[PositionedRun]], profile: LayoutProfile = DEFAULT_PROFILE
) -> List[ExtractedItem]:
    """Turn per-page runs into aggregated items.

    A duplicate-copy marker ends processing for the whole document; items
    found above it are kept.
    """
    aggregator = ItemAggregator()
    line_count = 0
    for page_no, runs in enumerate(pages, start=1):
        page = reconstruct_lines(runs, profile)
        line_count += len(page.lines)
        aggregator.extend(extract_lines(page.lines, profile))
        if page.stopped:
            logger.info("Duplicate copy marker on page %d, ignoring the rest of the document", page_no)
            break

    items = aggregator.items()
    logger.info("Processed %d lines, extracted %d items", line_count, len(items))
    for item in items:
        logger.debug("Code: %s, Desc: %s, Qty: %s", item.code, item.description, item.quantity)
    return items


def parse_remito_pdf(data: bytes, profile: Optional[LayoutProfile] = None) -> List[ExtractedItem]:
    """Parse a remito PDF buffer into ``[ExtractedItem]`` with unique codes."""
    return extract_remito_items(read_glyph_pages(data), profile or DEFAULT_PROFILE)
