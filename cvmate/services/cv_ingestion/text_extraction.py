"""Text extraction and normalization for uploaded CV files.

Steps:
1. Dispatch on the file extension (PDF or Word) to a format decoder.
2. Sniff the file signature and warn when it disagrees with the extension.
3. Return raw text; ``normalize_text`` turns it into a canonical line stream.

Extraction is read-only and either returns non-empty text or raises a typed
error (``UnsupportedFormat`` / ``ExtractionFailure``).
"""

from __future__ import annotations

import io
import logging
import os
import re
import unicodedata
import zipfile
from pathlib import Path
from typing import Any, Iterable, List, Optional, Union

from .errors import ExtractionFailure, UnsupportedFormat

logger = logging.getLogger(__name__)

PDF_EXTENSIONS = {".pdf"}
WORD_EXTENSIONS = {".docx", ".doc"}
SUPPORTED_EXTENSIONS = PDF_EXTENSIONS | WORD_EXTENSIONS

OLE2_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"


class TextExtractor:
    """Turns a PDF or Word file on disk into raw text."""

    def extract(self, file_path: Union[str, Path]) -> str:
        path = Path(file_path)
        extension = detect_extension(path.name)
        if extension not in SUPPORTED_EXTENSIONS:
            raise UnsupportedFormat(f"Unsupported file type: {extension or '<none>'}")

        try:
            payload = path.read_bytes()
        except OSError as exc:
            raise ExtractionFailure(f"Failed to read uploaded file: {exc}") from exc

        logger.info(
            "Extracting CV content path=%s ext=%s size=%d",
            path,
            extension,
            len(payload),
        )
        if not payload:
            raise ExtractionFailure("Empty file.")

        detected = detect_file_type_from_content(payload)
        if detected and detected != extension:
            # .doc vs .docx aliasing is common; the decoder decides.
            logger.warning(
                "Filename/content type mismatch: name=%s ext=%s detected=%s",
                path.name,
                extension,
                detected,
            )

        if extension in PDF_EXTENSIONS:
            return self._extract_pdf(payload)
        return self._extract_word(payload)

    def _extract_pdf(self, payload: bytes) -> str:
        """Use pypdf to pull text page by page."""
        from pypdf import PdfReader

        try:
            reader = PdfReader(io.BytesIO(payload))
            if reader.is_encrypted:
                # Owner-password-only PDFs open with an empty user password
                if not reader.decrypt(""):
                    raise ExtractionFailure("PDF is encrypted and cannot be read.")
            pages = list(reader.pages)
        except ExtractionFailure:
            raise
        except Exception as exc:
            logger.error(f"PDF extraction failed: {exc}")
            raise ExtractionFailure(f"PDF file could not be read: {exc}") from exc

        logger.debug(f"PDF pages={len(pages)}")
        texts: List[str] = []
        for index, page in enumerate(pages):
            try:
                text = page.extract_text() or ""
            except Exception as exc:
                logger.warning(f"Failed to extract text from page {index + 1}: {exc}")
                text = ""
            logger.debug(f"Page {index + 1} raw_text_len={len(text)}")
            texts.append(text)

        combined = "\n\n".join(texts).strip()
        if not combined:
            raise ExtractionFailure("No text extracted from PDF.")
        return combined

    def _extract_word(self, payload: bytes) -> str:
        """Use python-docx to read paragraphs and table rows."""
        import docx

        if payload.startswith(OLE2_SIGNATURE):
            raise ExtractionFailure(
                "Legacy .doc files cannot be read. Please save the document as .docx or PDF."
            )

        try:
            with zipfile.ZipFile(io.BytesIO(payload)) as zip_file:
                required_files = ["[Content_Types].xml", "word/document.xml"]
                if not all(f in zip_file.namelist() for f in required_files):
                    raise ExtractionFailure(
                        "File appears to be corrupted or not a valid DOCX file"
                    )
        except zipfile.BadZipFile as exc:
            logger.error(f"DOCX ZIP corrupted: {exc}")
            logger.debug(f"Corrupted DOCX signature={payload[:20].hex()}")
            raise ExtractionFailure(
                "The uploaded file appears to be corrupted. Please try re-saving the document and uploading again."
            ) from exc

        try:
            document = docx.Document(io.BytesIO(payload))
        except Exception as exc:
            logger.error(f"DOCX extraction failed: {exc}")
            raise ExtractionFailure(f"Word file could not be read: {exc}") from exc

        blocks: List[str] = []
        for paragraph in document.paragraphs:
            text = paragraph.text.strip()
            if text:
                blocks.append(text)
        for table in getattr(document, "tables", []):
            blocks.extend(_flatten_table(table))

        text = "\n".join(blocks).strip()
        if not text:
            raise ExtractionFailure("No text extracted from DOCX.")
        return text


def detect_extension(filename: str) -> str:
    _, ext = os.path.splitext(filename.lower())
    return ext


def detect_file_type_from_content(payload: bytes) -> Optional[str]:
    """Best-effort file type from magic numbers."""
    if not payload:
        return None
    if payload.startswith(b"%PDF-"):
        return ".pdf"
    if payload.startswith(b"PK\x03\x04"):
        try:
            with zipfile.ZipFile(io.BytesIO(payload)) as zip_file:
                if "word/document.xml" in zip_file.namelist():
                    return ".docx"
        except zipfile.BadZipFile:
            pass
        return ".zip"
    if payload.startswith(OLE2_SIGNATURE):
        return ".doc"
    return None


def _flatten_table(table: Any) -> Iterable[str]:
    """Flatten table rows so skills laid out in grids are not lost."""
    for row in getattr(table, "rows", []):
        cells = [
            cell.text.strip() for cell in getattr(row, "cells", []) if cell.text.strip()
        ]
        if cells:
            yield " | ".join(cells)


def normalize_text(text: str) -> str:
    """Collapse line-ending and whitespace noise into a canonical line stream.

    Idempotent: ``normalize_text(normalize_text(x)) == normalize_text(x)``.
    """
    if not text:
        return ""
    text = unicodedata.normalize("NFKC", text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    lines = [re.sub(r"\s+", " ", line).strip() for line in text.split("\n")]
    text = "\n".join(lines)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()
