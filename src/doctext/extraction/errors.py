"""Domain errors raised by the text extraction pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar


@dataclass(slots=True)
class ExtractionError(Exception):
    """Base error for every terminal extraction failure."""

    kind: ClassVar[str] = "extraction-error"

    message: str
    path: Path | None = None

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message} (path={self.path})"


@dataclass(slots=True)
class SourceNotFoundError(ExtractionError):
    """The source path did not exist when it was checked."""

    kind: ClassVar[str] = "not-found"


@dataclass(slots=True)
class SourceReadError(ExtractionError):
    """Reading an existing source failed at the OS level."""

    kind: ClassVar[str] = "io-error"


@dataclass(slots=True)
class FileTooLargeError(ExtractionError):
    kind: ClassVar[str] = "file-too-large"

    limit_kb: int = 0


@dataclass(slots=True)
class UnsupportedBinaryFormatError(ExtractionError):
    kind: ClassVar[str] = "unsupported-binary-format"

    extension: str = ""


@dataclass(slots=True)
class FormatExtractionError(ExtractionError):
    """A format adapter (PDF, DOCX) raised; the cause is chained."""

    kind: ClassVar[str] = "format-extraction-failed"

    format_name: str = ""


@dataclass(slots=True)
class MalformedNotebookError(ExtractionError):
    kind: ClassVar[str] = "malformed-notebook"
