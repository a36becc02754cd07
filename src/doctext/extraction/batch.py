"""Async boundary for running independent extractions concurrently."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Iterable

from doctext.extraction.errors import ExtractionError
from doctext.extraction.extractor import TextExtractor, default_extractor

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 4


@dataclass(frozen=True, slots=True)
class ExtractionOutcome:
    """Per-path result of a batch run: either ``text`` or ``error`` is set."""

    path: Path
    text: str | None = None
    error: ExtractionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def extract_text_async(path: str | Path, *, extractor: TextExtractor | None = None) -> str:
    """Run one extraction on a worker thread."""

    active = extractor or default_extractor()
    return await asyncio.to_thread(active.extract, path)


async def extract_many(
    paths: Iterable[str | Path],
    *,
    concurrency: int = DEFAULT_CONCURRENCY,
    extractor: TextExtractor | None = None,
) -> list[ExtractionOutcome]:
    """Extract every path with at most *concurrency* calls in flight.

    Outcomes keep the input order. Extraction errors are captured per path;
    anything else propagates.
    """
    if concurrency < 1:
        raise ValueError("concurrency must be >= 1")

    active = extractor or default_extractor()
    semaphore = asyncio.Semaphore(concurrency)

    async def _run(path: Path) -> ExtractionOutcome:
        async with semaphore:
            try:
                text = await extract_text_async(path, extractor=active)
            except ExtractionError as exc:
                logger.info("Extraction failed for %s: %s", path, exc)
                return ExtractionOutcome(path=path, error=exc)
        return ExtractionOutcome(path=path, text=text)

    return list(await asyncio.gather(*(_run(Path(path)) for path in paths)))
