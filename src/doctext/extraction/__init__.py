"""Text extraction package interfaces."""

from .batch import ExtractionOutcome, extract_many, extract_text_async
from .encoding import detect_encoding, read_with_encoding
from .errors import (
    ExtractionError,
    FileTooLargeError,
    FormatExtractionError,
    MalformedNotebookError,
    SourceNotFoundError,
    SourceReadError,
    UnsupportedBinaryFormatError,
)
from .extractor import TextExtractor, extract_text
from .notebook import extract_notebook_text

__all__ = [
    "ExtractionError",
    "ExtractionOutcome",
    "FileTooLargeError",
    "FormatExtractionError",
    "MalformedNotebookError",
    "SourceNotFoundError",
    "SourceReadError",
    "TextExtractor",
    "UnsupportedBinaryFormatError",
    "detect_encoding",
    "extract_many",
    "extract_notebook_text",
    "extract_text",
    "extract_text_async",
    "read_with_encoding",
]
