"""Runtime configuration for the extraction CLI."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from typing import Mapping


DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_MAX_CONCURRENCY = 4


def _parse_positive_int(*, name: str, raw_value: str, minimum: int = 1) -> int:
    value = int(raw_value)
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def parse_log_level(*, name: str, raw_value: str) -> str:
    level = raw_value.upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"{name} must be a logging level name, got {raw_value!r}")
    return level


@dataclass(frozen=True, slots=True)
class ExtractionSettings:
    """Validated settings for batch extraction runs."""

    log_level: str = DEFAULT_LOG_LEVEL
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ExtractionSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        log_level_raw = source.get("DOCTEXT_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip()
        concurrency_raw = source.get("DOCTEXT_MAX_CONCURRENCY", str(DEFAULT_MAX_CONCURRENCY)).strip()

        if not log_level_raw:
            raise ValueError("DOCTEXT_LOG_LEVEL cannot be empty")
        if not concurrency_raw:
            raise ValueError("DOCTEXT_MAX_CONCURRENCY cannot be empty")

        return cls(
            log_level=parse_log_level(name="DOCTEXT_LOG_LEVEL", raw_value=log_level_raw),
            max_concurrency=_parse_positive_int(name="DOCTEXT_MAX_CONCURRENCY", raw_value=concurrency_raw),
        )
