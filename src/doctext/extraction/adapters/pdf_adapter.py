"""PDF adapter returning the embedded text layer of every page."""

from __future__ import annotations

from pathlib import Path

import pymupdf


class PDFAdapter:
    """Extract embedded page text in page order (no OCR)."""

    format_name = "pdf"
    extensions = (".pdf",)

    def extract(self, path: Path) -> str:
        with pymupdf.open(path) as doc:
            pages = [page.get_text("text") for page in doc]
        return "\n\n".join(pages)
