"""DOCX adapter returning raw paragraph text."""

from __future__ import annotations

from pathlib import Path

import docx


class DOCXAdapter:
    """Extract body paragraphs in document order, one blank line apart."""

    format_name = "docx"
    extensions = (".docx",)

    def extract(self, path: Path) -> str:
        document = docx.Document(str(path))
        return "\n\n".join(paragraph.text for paragraph in document.paragraphs)
