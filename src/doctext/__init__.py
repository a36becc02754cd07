"""doctext - normalize any document file to UTF-8 text."""

__version__ = "0.1.0"
