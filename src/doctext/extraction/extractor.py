"""Routing entrypoint turning any file path into UTF-8 text."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import logging
from pathlib import Path
from typing import Mapping

from doctext.extraction.adapters import FormatAdapter, build_default_adapters
from doctext.extraction.encoding import read_with_encoding
from doctext.extraction.errors import (
    FileTooLargeError,
    FormatExtractionError,
    SourceNotFoundError,
    SourceReadError,
    UnsupportedBinaryFormatError,
)
from doctext.extraction.notebook import extract_notebook_text
from doctext.extraction.sniffing import DEFAULT_SNIFF_BYTES, file_size_kb, is_binary_file

logger = logging.getLogger(__name__)

TEXT_SIZE_LIMIT_KB = 300
NOTEBOOK_EXTENSION = ".ipynb"

# Extensions that must go through an adapter even when none is registered.
_ADAPTER_FORMATS: dict[str, str] = {".pdf": "pdf", ".docx": "docx"}


@dataclass(frozen=True, slots=True)
class SourceFile:
    """A source path plus its lowercase extension (``""`` when absent)."""

    path: Path
    extension: str

    @classmethod
    def from_path(cls, path: str | Path) -> "SourceFile":
        source = Path(path)
        return cls(path=source, extension=source.suffix.lower())

    @property
    def size_kb(self) -> float:
        return file_size_kb(self.path)


class TextExtractor:
    """Resolve the right handling path for a file and return its text."""

    def __init__(
        self,
        adapters: Mapping[str, FormatAdapter] | None = None,
        *,
        sniff_bytes: int = DEFAULT_SNIFF_BYTES,
    ) -> None:
        self._sniff_bytes = sniff_bytes
        self._adapter_map: dict[str, FormatAdapter] = {}
        for extension, adapter in (adapters or {}).items():
            self.register_adapter(extension, adapter)

    @property
    def adapter_map(self) -> dict[str, FormatAdapter]:
        """Registered adapters keyed by lowercase extension."""

        return dict(self._adapter_map)

    def register_adapter(self, extension: str, adapter: FormatAdapter) -> None:
        """Register an adapter for a file extension such as ``".pdf"``."""

        if not extension.startswith(".") or len(extension) < 2:
            raise ValueError(f"Adapter extension must look like '.ext', got {extension!r}")
        if extension.lower() == NOTEBOOK_EXTENSION:
            raise ValueError("Notebooks are always handled by the built-in notebook extractor")
        self._adapter_map[extension.lower()] = adapter

    def extract(self, path: str | Path) -> str:
        """Return the UTF-8 text of *path*; raise an ``ExtractionError`` otherwise."""

        source = SourceFile.from_path(path)
        if not source.path.exists():
            raise SourceNotFoundError(message="File does not exist", path=source.path)

        if source.extension == NOTEBOOK_EXTENSION:
            return extract_notebook_text(read_with_encoding(source.path), source_path=source.path)

        adapter = self._adapter_map.get(source.extension)
        if adapter is not None:
            return self._extract_with_adapter(source, adapter)

        format_name = _ADAPTER_FORMATS.get(source.extension)
        if format_name is not None:
            raise FormatExtractionError(
                message=f"No {format_name.upper()} adapter available",
                path=source.path,
                format_name=format_name,
            )

        return self._extract_plain_text(source)

    def _extract_with_adapter(self, source: SourceFile, adapter: FormatAdapter) -> str:
        format_name = adapter.format_name
        try:
            return adapter.extract(source.path)
        except Exception as exc:
            logger.warning("Error extracting text from %s %s: %s", format_name.upper(), source.path, exc, exc_info=True)
            raise FormatExtractionError(
                message=f"Failed to extract text from {format_name.upper()} file",
                path=source.path,
                format_name=format_name,
            ) from exc

    def _extract_plain_text(self, source: SourceFile) -> str:
        if self._is_binary(source):
            raise UnsupportedBinaryFormatError(
                message=f"Cannot read text for file type: {source.extension or '(none)'}",
                path=source.path,
                extension=source.extension,
            )

        try:
            size_kb = source.size_kb
        except OSError as exc:
            raise SourceReadError(message=f"Failed to query file size: {exc}", path=source.path) from exc

        if size_kb > TEXT_SIZE_LIMIT_KB:
            raise FileTooLargeError(
                message=f"File is too large to read into context ({size_kb:.1f} KB > {TEXT_SIZE_LIMIT_KB} KB)",
                path=source.path,
                limit_kb=TEXT_SIZE_LIMIT_KB,
            )

        return read_with_encoding(source.path)

    def _is_binary(self, source: SourceFile) -> bool:
        try:
            return is_binary_file(source.path, self._sniff_bytes)
        except OSError as exc:
            # An unreadable head is inconclusive; the text read reports the real error.
            logger.debug("Binary check inconclusive for %s: %s", source.path, exc)
            return False


@lru_cache(maxsize=1)
def default_extractor() -> TextExtractor:
    """Shared extractor wired with ``build_default_adapters()``."""

    return TextExtractor(build_default_adapters())


def extract_text(path: str | Path) -> str:
    """Extract UTF-8 text from any supported file at *path*."""

    return default_extractor().extract(path)
