from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from doctext.extraction import extractor as extractor_module
from doctext.extraction.errors import (
    FileTooLargeError,
    FormatExtractionError,
    MalformedNotebookError,
    SourceNotFoundError,
    UnsupportedBinaryFormatError,
)
from doctext.extraction.extractor import (
    TEXT_SIZE_LIMIT_KB,
    SourceFile,
    TextExtractor,
    default_extractor,
    extract_text,
)


class _StaticAdapter:
    format_name = "pdf"
    extensions = (".pdf",)

    def __init__(self, text: str = "adapter text") -> None:
        self.text = text
        self.calls: list[Path] = []

    def extract(self, path: Path) -> str:
        self.calls.append(path)
        return self.text


class _FailingAdapter:
    format_name = "docx"
    extensions = (".docx",)

    def extract(self, path: Path) -> str:
        raise KeyError("word/document.xml")


def _write_notebook(path: Path) -> None:
    path.write_text(
        json.dumps(
            {
                "cells": [
                    {"cell_type": "markdown", "source": "# Title"},
                    {
                        "cell_type": "code",
                        "source": "print('hi')",
                        "outputs": [{"output_type": "stream", "text": "Hello"}],
                    },
                ]
            }
        ),
        encoding="utf-8",
    )


def test_source_file_lowercases_extension(tmp_path: Path) -> None:
    assert SourceFile.from_path(tmp_path / "Report.PDF").extension == ".pdf"
    assert SourceFile.from_path(tmp_path / "Makefile").extension == ""
    assert SourceFile.from_path(tmp_path / ".bashrc").extension == ""


def test_missing_path_fails_fast(tmp_path: Path) -> None:
    with pytest.raises(SourceNotFoundError, match="File does not exist") as excinfo:
        TextExtractor().extract(tmp_path / "absent.txt")

    assert excinfo.value.kind == "not-found"


def test_plain_text_file_is_read_with_encoding_detection(tmp_path: Path) -> None:
    sample = tmp_path / "notes.md"
    sample.write_bytes("# Notes\n\nCafé au lait.\n".encode("utf-8"))

    assert TextExtractor().extract(sample) == "# Notes\n\nCafé au lait.\n"


def test_file_without_extension_is_treated_as_generic_text(tmp_path: Path) -> None:
    sample = tmp_path / "Dockerfile"
    sample.write_text("FROM python:3.12\n", encoding="utf-8")

    assert TextExtractor().extract(sample) == "FROM python:3.12\n"


def test_binary_file_is_rejected_with_its_extension(tmp_path: Path) -> None:
    sample = tmp_path / "image.PNG"
    sample.write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR")

    with pytest.raises(UnsupportedBinaryFormatError, match="Cannot read text for file type: .png") as excinfo:
        TextExtractor().extract(sample)

    assert excinfo.value.extension == ".png"


def test_oversized_text_fails_before_reading(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    sample = tmp_path / "big.log"
    sample.write_bytes(b"a" * (TEXT_SIZE_LIMIT_KB * 1024 + 1))

    def _unexpected_read(path: Path) -> str:
        raise AssertionError("content must not be read for oversized files")

    monkeypatch.setattr(extractor_module, "read_with_encoding", _unexpected_read)

    with pytest.raises(FileTooLargeError) as excinfo:
        TextExtractor().extract(sample)

    assert excinfo.value.limit_kb == 300


def test_text_at_the_size_ceiling_is_read(tmp_path: Path) -> None:
    sample = tmp_path / "edge.txt"
    sample.write_bytes(b"a" * (TEXT_SIZE_LIMIT_KB * 1024))

    assert len(TextExtractor().extract(sample)) == TEXT_SIZE_LIMIT_KB * 1024


def test_inconclusive_binary_check_fails_open(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    sample = tmp_path / "locked.txt"
    sample.write_text("still readable", encoding="utf-8")

    def _denied(path: Path, sniff_bytes: int) -> bool:
        raise PermissionError("sniff denied")

    monkeypatch.setattr(extractor_module, "is_binary_file", _denied)

    with caplog.at_level(logging.DEBUG, logger="doctext.extraction.extractor"):
        assert TextExtractor().extract(sample) == "still readable"

    assert "Binary check inconclusive" in caplog.text


def test_notebook_is_flattened(tmp_path: Path) -> None:
    notebook = tmp_path / "analysis.ipynb"
    _write_notebook(notebook)

    assert TextExtractor().extract(notebook) == (
        "--- MARKDOWN CELL ---\n# Title\n\n--- CODE CELL ---\nprint('hi')\n\nOUTPUT:\nHello"
    )


def test_large_notebook_bypasses_the_text_ceiling(tmp_path: Path) -> None:
    notebook = tmp_path / "large.ipynb"
    source = "x" * (TEXT_SIZE_LIMIT_KB * 1024 + 10)
    notebook.write_text(json.dumps({"cells": [{"cell_type": "markdown", "source": source}]}), encoding="utf-8")

    assert TextExtractor().extract(notebook) == f"--- MARKDOWN CELL ---\n{source}"


def test_malformed_notebook_reports_its_path(tmp_path: Path) -> None:
    notebook = tmp_path / "broken.ipynb"
    notebook.write_text("{\"cells\": [", encoding="utf-8")

    with pytest.raises(MalformedNotebookError) as excinfo:
        TextExtractor().extract(notebook)

    assert excinfo.value.path == notebook


def test_registered_adapter_output_is_returned_verbatim(tmp_path: Path) -> None:
    document = tmp_path / "paper.Pdf"
    document.write_bytes(b"%PDF-1.7 placeholder")
    adapter = _StaticAdapter(text="  raw adapter text \n")

    result = TextExtractor({".pdf": adapter}).extract(document)

    assert result == "  raw adapter text \n"
    assert adapter.calls == [document]


def test_adapter_failure_is_wrapped_with_format_name(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    document = tmp_path / "letter.docx"
    document.write_bytes(b"PK\x03\x04 not really a docx")

    with caplog.at_level(logging.WARNING):
        with pytest.raises(FormatExtractionError, match="Failed to extract text from DOCX file") as excinfo:
            TextExtractor({".docx": _FailingAdapter()}).extract(document)

    assert excinfo.value.format_name == "docx"
    assert isinstance(excinfo.value.__cause__, KeyError)
    assert "Error extracting text from DOCX" in caplog.text


def test_pdf_without_registered_adapter_is_a_format_failure(tmp_path: Path) -> None:
    document = tmp_path / "scan.pdf"
    document.write_bytes(b"%PDF-1.4")

    with pytest.raises(FormatExtractionError) as excinfo:
        TextExtractor().extract(document)

    assert excinfo.value.format_name == "pdf"


def test_register_adapter_validates_extension() -> None:
    extractor = TextExtractor()

    with pytest.raises(ValueError):
        extractor.register_adapter("pdf", _StaticAdapter())
    with pytest.raises(ValueError):
        extractor.register_adapter(".ipynb", _StaticAdapter())

    extractor.register_adapter(".PDF", _StaticAdapter())
    assert set(extractor.adapter_map) == {".pdf"}


def test_default_extractor_registers_pdf_and_docx() -> None:
    assert set(default_extractor().adapter_map) == {".pdf", ".docx"}


def test_repeated_extraction_is_identical(tmp_path: Path) -> None:
    sample = tmp_path / "stable.csv"
    sample.write_bytes("id;name\n1;Zoë\n2;Łukasz\n".encode("utf-8"))

    assert extract_text(sample) == extract_text(sample)
