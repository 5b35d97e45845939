#!/usr/bin/env python3
"""CLI for extracting line items from remito PDFs and inventory exports."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from remito_ingest import (
    DEFAULT_PROFILE,
    IngestError,
    load_profile,
    parse_inventory_sheet,
    parse_remito_pdf,
    summary,
    write_csv,
    write_json,
)

PDF_SIGNATURE = b"%PDF"


def detect_kind(data: bytes) -> str:
    return "pdf" if data.lstrip()[:4] == PDF_SIGNATURE else "sheet"


def main() -> None:
    ap = argparse.ArgumentParser(
        description="Extract line items from a remito PDF or an inventory spreadsheet export."
    )
    ap.add_argument("document", type=Path, help="Remito PDF or inventory export (xlsx / SpreadsheetML)")
    ap.add_argument("--kind", choices=("auto", "pdf", "sheet"), default="auto", help="Document type (default: sniff)")
    ap.add_argument("--csv", type=Path, default=None, help="Output CSV path")
    ap.add_argument("--json", type=Path, default=None, help="Output JSON path")
    ap.add_argument("--profile", type=Path, default=None, help="JSON layout profile for remito PDFs")
    ap.add_argument("--line-tolerance", type=float, default=None, help="Override the profile line tolerance")
    ap.add_argument("--units-per-space", type=float, default=None, help="Override the profile units per space")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log parser decisions")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    data = args.document.read_bytes()
    kind = detect_kind(data) if args.kind == "auto" else args.kind

    try:
        profile = load_profile(args.profile) if args.profile else DEFAULT_PROFILE
        overrides = {}
        if args.line_tolerance is not None:
            overrides["line_tolerance"] = args.line_tolerance
        if args.units_per_space is not None:
            overrides["units_per_space"] = args.units_per_space
        if overrides:
            profile = dataclasses.replace(profile, **overrides)

        inventory_id = None
        if kind == "pdf":
            items = parse_remito_pdf(data, profile)
        else:
            sheet = parse_inventory_sheet(data)
            items, inventory_id = sheet.items, sheet.inventory_id
    except IngestError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.csv:
        write_csv(items, args.csv)
    if args.json:
        write_json(items, args.json, inventory_id=inventory_id, with_inventory_id=kind == "sheet")

    if not items and kind == "pdf":
        print("No items found (document may be a duplicate copy)")
        return

    stats = summary(items)
    print(f"Items: {stats['count']}  Total quantity: {stats['total_quantity']:g}")
    if inventory_id is not None:
        print(f"Inventory ID: {inventory_id}")
    if args.csv:
        print(f"CSV: {args.csv}")
    if args.json:
        print(f"JSON: {args.json}")


if __name__ == "__main__":
    main()
