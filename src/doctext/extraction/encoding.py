"""Byte-encoding detection and conversion to UTF-8 text.

Detection samples the head of a buffer with ``charset_normalizer`` and only
trusts a candidate whose ``1 - chaos`` score is at or above
``CONFIDENCE_THRESHOLD``; everything else
resolves to ``utf8``. The outcome is always one of two values:

* ``DetectedEncoding`` - a normalized encoding name and its confidence;
* ``FallbackEncoding`` - the ``utf8`` default plus the reason it was chosen.

``detect_bytes`` never raises. Conversion never raises on encoding problems
either: unknown codecs and undecodable bytes degrade to replacement
characters. Only a missing file or an OS-level read failure is an error.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Iterable

from charset_normalizer import CharsetMatch, from_bytes
from charset_normalizer.constant import CHARDET_CORRESPONDENCE

from doctext.extraction.errors import SourceNotFoundError, SourceReadError

logger = logging.getLogger(__name__)

SAMPLE_SIZE = 4096
CONFIDENCE_THRESHOLD = 0.8
DEFAULT_ENCODING = "utf8"

# Codec preference when several candidates score the same chaos and
# coherence. Short mixed CJK/ASCII samples decode equally cleanly as Chinese
# and Korean double-byte text; Chinese wins such ties.
_TIE_BREAK_ORDER: tuple[str, ...] = (
    "utf_8",
    "ascii",
    "gb18030",
    "gbk",
    "gb2312",
    "big5",
    "cp949",
    "euc_kr",
    "cp932",
    "shift_jis",
    "euc_jp",
)

# Detector vocabulary -> converter vocabulary. Keys are lowercase.
_ENCODING_NAMES: dict[str, str] = {
    "ascii": "ascii",
    "utf-8": "utf8",
    "utf-16le": "utf16le",
    "utf-16be": "utf16be",
    **{f"iso-8859-{part}": f"latin{part}" for part in range(1, 11)},
    **{f"windows-{page}": f"win{page}" for page in range(1250, 1259)},
    "gbk": "gbk",
    "gb2312": "gb2312",
    "gb18030": "gb18030",
    "big5": "big5",
    "euc-jp": "eucjp",
    "shift_jis": "shiftjis",
    "euc-kr": "euckr",
}

# Converter vocabulary -> Python codec. ``latinN`` keeps the ISO-8859 part it
# was normalized from, which is not what Python's own ``latinN`` aliases mean.
_CODEC_NAMES: dict[str, str] = {
    "utf8": "utf-8",
    "utf16le": "utf-16-le",
    "utf16be": "utf-16-be",
    **{f"latin{part}": f"iso8859-{part}" for part in range(1, 11)},
    **{f"win{page}": f"cp{page}" for page in range(1250, 1259)},
    "eucjp": "euc_jp",
    "shiftjis": "shift_jis",
    "euckr": "euc_kr",
}


@dataclass(frozen=True, slots=True)
class DetectedEncoding:
    """A detector verdict that cleared the confidence threshold."""

    name: str
    confidence: float


@dataclass(frozen=True, slots=True)
class FallbackEncoding:
    """Detection resolved to the UTF-8 default instead of a verdict."""

    reason: str
    confidence: float | None = None

    @property
    def name(self) -> str:
        return DEFAULT_ENCODING


DetectionResult = DetectedEncoding | FallbackEncoding


def normalize_encoding_name(encoding: str) -> str:
    """Map a detector encoding name to the converter vocabulary."""

    lowered = encoding.lower()
    return _ENCODING_NAMES.get(lowered, lowered)


def _tie_rank(codec: str) -> int:
    try:
        return _TIE_BREAK_ORDER.index(codec)
    except ValueError:
        return len(_TIE_BREAK_ORDER)


def _pick_match(matches: Iterable[CharsetMatch]) -> CharsetMatch | None:
    """Return the best-ranked match, settling exact ties by ``_TIE_BREAK_ORDER``."""

    ranked = list(matches)
    if not ranked:
        return None

    leader = ranked[0]
    tied = [
        (position, match)
        for position, match in enumerate(ranked)
        if match.chaos == leader.chaos and match.coherence == leader.coherence
    ]
    _, chosen = min(tied, key=lambda item: (_tie_rank(item[1].encoding), item[0]))
    if chosen is not leader:
        logger.debug("Encoding tie with %s, preferring %s", leader.encoding, chosen.encoding)
    return chosen


def _detector_name(match: CharsetMatch) -> str:
    codec = match.encoding
    if codec == "utf_8" and match.bom:
        codec = "utf_8_sig"
    return CHARDET_CORRESPONDENCE.get(codec, codec)


def detect_bytes(data: bytes) -> DetectionResult:
    """Classify the encoding of *data* from its first ``SAMPLE_SIZE`` bytes."""

    if not data:
        return FallbackEncoding(reason="empty")

    try:
        match = _pick_match(from_bytes(bytes(data[:SAMPLE_SIZE])))
        if match is None or not match.encoding:
            return FallbackEncoding(reason="no-candidate")
        confidence = 1.0 - float(match.chaos)
        if confidence < CONFIDENCE_THRESHOLD:
            return FallbackEncoding(reason="low-confidence", confidence=confidence)
        name = normalize_encoding_name(_detector_name(match))
    except Exception:
        logger.exception("Encoding detection failed, assuming %s", DEFAULT_ENCODING)
        return FallbackEncoding(reason="detector-error")

    # An ASCII verdict only covers the sample; UTF-8 decodes it identically and
    # still accepts whatever follows it.
    if name == "ascii":
        name = DEFAULT_ENCODING
    return DetectedEncoding(name=name, confidence=confidence)


def decode_bytes(data: bytes, encoding: str) -> str:
    """Decode *data* with a converter-vocabulary encoding, best effort."""

    if encoding == DEFAULT_ENCODING:
        return data.decode("utf-8", errors="replace")

    codec = _CODEC_NAMES.get(encoding, encoding)
    try:
        return data.decode(codec, errors="replace")
    except LookupError:
        logger.warning("Unknown encoding: %s, falling back to %s", encoding, DEFAULT_ENCODING)
        return data.decode("utf-8", errors="replace")


def detect_encoding(path: str | Path) -> str:
    """Return the converter-vocabulary encoding name for the file at *path*."""

    source = _require_existing(Path(path))
    try:
        with source.open("rb") as handle:
            sample = handle.read(SAMPLE_SIZE)
    except OSError as exc:
        logger.error("Error detecting encoding for %s: %s", source, exc)
        return DEFAULT_ENCODING
    return detect_bytes(sample).name


def read_with_encoding(path: str | Path) -> str:
    """Read the file at *path* and return its content converted to UTF-8."""

    source = _require_existing(Path(path))
    raw = _read_bytes(source)
    detection = detect_bytes(raw)
    if isinstance(detection, FallbackEncoding) and detection.reason != "empty":
        logger.debug("Using %s for %s (%s)", DEFAULT_ENCODING, source, detection.reason)
    return decode_bytes(raw, detection.name)


def _require_existing(path: Path) -> Path:
    if not path.exists():
        raise SourceNotFoundError(message="File does not exist", path=path)
    return path


def _read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except FileNotFoundError as exc:
        raise SourceNotFoundError(message="File does not exist", path=path) from exc
    except OSError as exc:
        raise SourceReadError(message=f"Failed to read source file: {exc}", path=path) from exc
