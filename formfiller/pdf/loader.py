"""Resolve document references to bytes and open them."""

from __future__ import annotations

from io import BytesIO
import logging
import os
from pathlib import Path
import tempfile
from urllib.parse import unquote, urlparse

import fitz
from pypdf import PdfReader
import requests

from formfiller.model.document import PdfDocument

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class PdfLoadError(RuntimeError):
    """Raised when a document cannot be loaded."""


class PdfFetchError(PdfLoadError):
    """Raised when a document reference cannot be resolved to bytes."""


class PdfParseError(PdfLoadError):
    """Raised when fetched bytes are not a readable PDF."""


def fetch_document_bytes(document_ref: str | Path, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    ref = str(document_ref)
    parsed = urlparse(ref)

    if parsed.scheme in ("http", "https"):
        try:
            response = requests.get(ref, timeout=timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise PdfFetchError(f"Failed to fetch document: {ref}") from exc
        return response.content

    path = Path(unquote(parsed.path)) if parsed.scheme == "file" else Path(ref)
    if not path.exists():
        raise PdfFetchError(f"File not found: {path}")
    try:
        return path.read_bytes()
    except OSError as exc:
        raise PdfFetchError(f"Failed to read document: {path}") from exc


def parse_pdf_bytes(data: bytes, source_ref: str = "<memory>") -> PdfReader:
    try:
        reader = PdfReader(BytesIO(data))
        page_count = len(reader.pages)
    except Exception as exc:
        raise PdfParseError(f"Failed to parse PDF: {source_ref}") from exc
    if page_count == 0:
        raise PdfParseError(f"PDF has no pages: {source_ref}")
    return reader


def load_pdf(document_ref: str | Path, timeout: float = DEFAULT_TIMEOUT) -> PdfDocument:
    """Fetch fresh bytes for ``document_ref`` and open them from a temporary working copy."""
    ref = str(document_ref)
    data = fetch_document_bytes(ref, timeout=timeout)

    fd, temp_path = tempfile.mkstemp(prefix=".pdf_work_", suffix=".pdf")
    with os.fdopen(fd, "wb") as handle:
        handle.write(data)

    try:
        document = fitz.open(temp_path)
        if not document.is_pdf or document.page_count == 0:
            document.close()
            raise PdfParseError(f"Not a PDF document: {ref}")
    except PdfParseError:
        os.remove(temp_path)
        raise
    except Exception as exc:
        os.remove(temp_path)
        raise PdfParseError(f"Failed to open PDF: {ref}") from exc

    logger.debug("Opened %s (%d pages) at %s", ref, document.page_count, temp_path)
    return PdfDocument(source_ref=ref, working_path=Path(temp_path), handle=document)
