"""Shared adapter contract for binary document formats."""

from __future__ import annotations

from pathlib import Path
from typing import ClassVar, Protocol, runtime_checkable


@runtime_checkable
class FormatAdapter(Protocol):
    """Protocol that every format adapter must implement."""

    format_name: ClassVar[str]
    extensions: ClassVar[tuple[str, ...]]

    def extract(self, path: Path) -> str:
        """Return the plain text of the document at *path*; may raise anything."""
