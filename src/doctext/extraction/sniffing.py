"""Binary-content classification and size probes for generic files."""

from __future__ import annotations

from pathlib import Path

DEFAULT_SNIFF_BYTES = 4096

_TEXT_BOMS = (
    b"\xef\xbb\xbf",
    b"\xff\xfe",
    b"\xfe\xff",
    b"\x00\x00\xfe\xff",
)
_BINARY_SIGNATURES = (
    b"%PDF-",
    b"PK\x03\x04",
    b"\x89PNG\r\n\x1a\n",
    b"GIF87a",
    b"GIF89a",
    b"\xff\xd8\xff",
    b"\x1f\x8b",
    b"\x7fELF",
    b"7z\xbc\xaf\x27\x1c",
    b"Rar!\x1a\x07",
)
# Control bytes that routinely show up in plain text.
_TEXT_CONTROL_BYTES = frozenset(b"\t\n\r\f\b\v\x1b")
_MAX_CONTROL_RATIO = 0.1


def looks_binary(sniffed: bytes) -> bool:
    """Return True when a leading byte sample does not look like text."""

    if not sniffed:
        return False
    if sniffed.startswith(_TEXT_BOMS):
        return False
    if sniffed.startswith(_BINARY_SIGNATURES):
        return True
    if b"\x00" in sniffed:
        return True

    control = sum(
        1 for byte in sniffed if (byte < 0x20 and byte not in _TEXT_CONTROL_BYTES) or byte == 0x7F
    )
    return control / len(sniffed) > _MAX_CONTROL_RATIO


def is_binary_file(path: str | Path, sniff_bytes: int = DEFAULT_SNIFF_BYTES) -> bool:
    """Sniff the head of *path*; raises ``OSError`` when it cannot be read."""

    with Path(path).open("rb") as handle:
        return looks_binary(handle.read(sniff_bytes))


def file_size_kb(path: str | Path) -> float:
    return Path(path).stat().st_size / 1024
