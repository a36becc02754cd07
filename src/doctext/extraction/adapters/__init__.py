"""Format adapter implementations and contracts."""

import logging

from .base import FormatAdapter

logger = logging.getLogger(__name__)

try:
    from .pdf_adapter import PDFAdapter
except ImportError:
    PDFAdapter = None
    logger.warning("PDF support unavailable: install 'pymupdf'")

try:
    from .docx_adapter import DOCXAdapter
except ImportError:
    DOCXAdapter = None
    logger.warning("DOCX support unavailable: install 'python-docx'")


def build_default_adapters() -> dict[str, FormatAdapter]:
    """Return the default adapter map keyed by lowercase file extension."""
    adapters: dict[str, FormatAdapter] = {}
    for adapter_cls in (PDFAdapter, DOCXAdapter):
        if adapter_cls is None:
            continue
        adapter = adapter_cls()
        for extension in adapter.extensions:
            adapters[extension] = adapter
    return adapters


__all__ = [
    "FormatAdapter",
    "PDFAdapter",
    "DOCXAdapter",
    "build_default_adapters",
]
