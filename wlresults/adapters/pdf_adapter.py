"""Adapter for reading the text layer of result-sheet PDFs."""

import os

import fitz

from ..core.models import ExtractionConfig


class PdfTextError(Exception):
    """The PDF could not be read, or carries no extractable text."""


class PdfAdapter:
    """Extract plain text from a PDF with PyMuPDF.

    Pages are read in order and joined with newlines. No coordinate
    information is kept; the extractor works on the text alone.
    """

    def __init__(self, config: ExtractionConfig | None = None):
        self.config = config or ExtractionConfig()

    @property
    def max_bytes(self) -> int:
        return self.config.max_file_size_mb * 1024 * 1024

    def parse(self, data_path: str) -> str:
        """Read a PDF file and return its text."""
        if not os.path.isfile(data_path):
            raise PdfTextError(f"PDF file not found: {data_path}")
        if not data_path.lower().endswith('.pdf'):
            raise PdfTextError(f"Not a PDF file: {data_path}")
        if os.path.getsize(data_path) > self.max_bytes:
            raise PdfTextError(
                f"File is larger than {self.config.max_file_size_mb}MB: {data_path}")

        with open(data_path, 'rb') as f:
            return self.parse_bytes(f.read())

    def parse_bytes(self, data: bytes) -> str:
        """Return the text of an in-memory PDF."""
        if len(data) > self.max_bytes:
            raise PdfTextError(f"File is larger than {self.config.max_file_size_mb}MB")

        try:
            doc = fitz.open(stream=data, filetype='pdf')
        except Exception as e:
            raise PdfTextError(f"Failed to extract text from PDF: {e}") from e

        try:
            pages = [doc[page_num].get_text("text") for page_num in range(doc.page_count)]
        except Exception as e:
            raise PdfTextError(f"Failed to extract text from PDF: {e}") from e
        finally:
            doc.close()

        text = '\n'.join(pages)
        if not text.strip():
            raise PdfTextError(
                "No text could be extracted from the PDF "
                "(image-based PDFs need OCR first)")
        return text
