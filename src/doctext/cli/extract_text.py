"""CLI command extracting UTF-8 text from files and emitting JSON."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

from doctext.config import ExtractionSettings, parse_log_level
from doctext.extraction.batch import extract_many


def _collect_inputs(target: Path) -> list[Path]:
    if target.is_dir():
        return sorted(path for path in target.rglob("*") if path.is_file())
    # Files and missing paths both go through extraction so errors are reported.
    return [target]


def main(argv: list[str] | None = None) -> int:
    try:
        settings = ExtractionSettings.from_env()
    except ValueError as exc:
        print(json.dumps({"error": f"Configuration error: {exc}"}, ensure_ascii=True))
        return 2

    parser = argparse.ArgumentParser(description="Extract normalized UTF-8 text from files")
    parser.add_argument("--path", required=True, help="Source file or directory")
    parser.add_argument(
        "--concurrency",
        type=int,
        default=settings.max_concurrency,
        help="Maximum number of files extracted at the same time",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level for stderr diagnostics")
    parser.add_argument("--no-text", action="store_true", help="Only report character counts")
    args = parser.parse_args(argv)

    try:
        log_level = parse_log_level(name="--log-level", raw_value=args.log_level.strip())
    except ValueError as exc:
        print(json.dumps({"error": f"Configuration error: {exc}"}, ensure_ascii=True))
        return 2

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=log_level,
    )

    source_path = Path(args.path)
    files = _collect_inputs(source_path)
    outcomes = asyncio.run(extract_many(files, concurrency=max(1, args.concurrency)))

    results: list[dict[str, object]] = []
    errors: list[dict[str, str]] = []

    for outcome in outcomes:
        if outcome.error is not None:
            errors.append({"source_path": str(outcome.path), "error": str(outcome.error), "kind": outcome.error.kind})
            continue

        text = outcome.text or ""
        entry: dict[str, object] = {"source_path": str(outcome.path), "chars": len(text)}
        if not args.no_text:
            entry["text"] = text
        results.append(entry)

    payload = {
        "path": str(source_path),
        "processed": len(results),
        "results": results,
        "errors": errors,
    }
    print(json.dumps(payload, ensure_ascii=True, indent=2))
    return 0 if not errors else 1


if __name__ == "__main__":
    raise SystemExit(main())
