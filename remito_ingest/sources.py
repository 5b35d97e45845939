"""Row readers for the two container formats of the inventory export.

The ERP exports the same inventory either as a real ``.xlsx`` workbook or as
an Excel 2003 SpreadsheetML document (XML, usually saved with an ``.xls``
extension).  Both readers expose :meth:`RowSource.read_rows`; use
:func:`sniff_source` to pick one from the raw bytes.
"""

from __future__ import annotations

import io
import logging
import xml.etree.ElementTree as ET
import zipfile
from typing import Any, List, Optional

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from .config import INVENTORY_SHEET_HINT
from .errors import MalformedContainerError

logger = logging.getLogger(__name__)

ZIP_SIGNATURE = b"PK"


def _local(name: str) -> str:
    """Strip an ElementTree ``{namespace}`` prefix."""
    return name.rsplit("}", 1)[-1]


def _attr(elem: ET.Element, name: str) -> Optional[str]:
    for key, value in elem.attrib.items():
        if _local(key) == name:
            return value
    return None


def _children(elem: ET.Element, name: str) -> List[ET.Element]:
    return [child for child in elem if _local(child.tag) == name]


class RowSource:
    """A worksheet that can be read as a list of raw row arrays."""

    def __init__(self, data: bytes):
        self.data = data
        self.sheet_name: Optional[str] = None

    def read_rows(self) -> List[List[Any]]:
        raise NotImplementedError


class NativeTableSource(RowSource):
    """Zipped Office Open XML workbook, read with openpyxl."""

    def read_rows(self) -> List[List[Any]]:
        try:
            wb = load_workbook(io.BytesIO(self.data), read_only=True, data_only=True)
        except (zipfile.BadZipFile, InvalidFileException, KeyError, OSError) as exc:
            raise MalformedContainerError(f"Unreadable workbook: {exc}") from exc
        try:
            ws = next(
                (s for s in wb.worksheets if INVENTORY_SHEET_HINT in s.title.lower()),
                None,
            )
            if ws is None:
                ws = wb.worksheets[0]
                logger.debug("No inventory sheet, falling back to %r", ws.title)
            self.sheet_name = ws.title
            return [list(row) for row in ws.iter_rows(values_only=True)]
        finally:
            wb.close()


class LegacyMarkupSource(RowSource):
    """Excel 2003 SpreadsheetML export.

    Cells may carry a 1-based ``ss:Index`` that skips empty columns, so the
    column of a cell is the running index unless the attribute resets it.
    """

    def read_rows(self) -> List[List[Any]]:
        try:
            root = ET.fromstring(self.data)
        except ET.ParseError as exc:
            raise MalformedContainerError(f"Invalid spreadsheet XML: {exc}") from exc

        sheet = None
        for ws in root.iter():
            if _local(ws.tag) != "Worksheet":
                continue
            name = _attr(ws, "Name") or ""
            if INVENTORY_SHEET_HINT in name.lower():
                sheet = ws
                break
        if sheet is None:
            raise MalformedContainerError('Sheet "Inventario" not found')
        self.sheet_name = _attr(sheet, "Name")

        tables = _children(sheet, "Table")
        if not tables:
            raise MalformedContainerError("Table not found in sheet")

        return [self._read_row(row) for row in _children(tables[0], "Row")]

    @staticmethod
    def _read_row(row: ET.Element) -> List[Any]:
        values: List[Any] = []
        current = 1
        for cell in _children(row, "Cell"):
            index = _attr(cell, "Index")
            if index:
                current = _cell_index(index)
            data = _children(cell, "Data")
            text = "".join(data[0].itertext()) if data else None
            while len(values) < current:
                values.append(None)
            values[current - 1] = text
            current += 1
        return values


def _cell_index(value: str) -> int:
    try:
        index = int(value)
    except ValueError:
        index = 0
    if index < 1:
        raise MalformedContainerError(f"Invalid ss:Index {value!r}")
    return index


def sniff_source(data: bytes) -> RowSource:
    """Choose the reader for ``data`` from its first two bytes."""
    if data[:2] == ZIP_SIGNATURE:
        return NativeTableSource(data)
    return LegacyMarkupSource(data)
