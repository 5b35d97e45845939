from __future__ import annotations


class IngestError(ValueError):
    """Base class for documents the engine cannot read at all."""


class PdfParseError(IngestError):
    """The buffer is not a PDF that pdfplumber can read."""


class MalformedContainerError(IngestError):
    """A spreadsheet container is broken or lacks the inventory worksheet."""
