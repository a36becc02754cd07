"""Flatten Jupyter notebook JSON into annotated plain text.

Cells and outputs are parsed once into a closed set of dataclasses, with an
explicit ignored variant for anything that is not rendered. Fields that may
be a string or a list of string fragments are joined at that boundary, so
rendering never has to care about the JSON shape.

Rendered layout, in source order::

    --- MARKDOWN CELL ---
    <source>

    --- CODE CELL ---
    <source>

    OUTPUT:
    <stream text>
    RESULT:
    <text/plain>

Blank sources and blank output texts produce no section. The accumulated
text is stripped once at the end.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path
from typing import Any, ClassVar

from doctext.extraction.errors import MalformedNotebookError


@dataclass(frozen=True, slots=True)
class StreamOutput:
    label: ClassVar[str] = "OUTPUT"

    text: str


@dataclass(frozen=True, slots=True)
class ExecuteResultOutput:
    label: ClassVar[str] = "RESULT"

    text: str


@dataclass(frozen=True, slots=True)
class IgnoredOutput:
    output_type: str | None


NotebookOutput = StreamOutput | ExecuteResultOutput | IgnoredOutput


@dataclass(frozen=True, slots=True)
class MarkdownCell:
    header: ClassVar[str] = "--- MARKDOWN CELL ---"

    source: str


@dataclass(frozen=True, slots=True)
class CodeCell:
    header: ClassVar[str] = "--- CODE CELL ---"

    source: str
    outputs: tuple[NotebookOutput, ...] = ()


@dataclass(frozen=True, slots=True)
class IgnoredCell:
    cell_type: str | None


NotebookCell = MarkdownCell | CodeCell | IgnoredCell


def _join_fragments(value: Any) -> str:
    """Normalize a notebook multiline string (str or list of str) to one str."""

    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return "".join(fragment for fragment in value if isinstance(fragment, str))
    return ""


def _parse_output(raw: Any) -> NotebookOutput:
    if not isinstance(raw, dict):
        return IgnoredOutput(output_type=None)

    output_type = raw.get("output_type")
    if output_type == "stream":
        return StreamOutput(text=_join_fragments(raw.get("text")))
    if output_type == "execute_result":
        data = raw.get("data")
        plain = data.get("text/plain") if isinstance(data, dict) else None
        return ExecuteResultOutput(text=_join_fragments(plain))
    return IgnoredOutput(output_type=output_type if isinstance(output_type, str) else None)


def _parse_cell(raw: Any) -> NotebookCell:
    if not isinstance(raw, dict):
        return IgnoredCell(cell_type=None)

    cell_type = raw.get("cell_type")
    if cell_type == "markdown":
        return MarkdownCell(source=_join_fragments(raw.get("source")))
    if cell_type == "code":
        raw_outputs = raw.get("outputs")
        outputs = tuple(_parse_output(item) for item in raw_outputs) if isinstance(raw_outputs, list) else ()
        return CodeCell(source=_join_fragments(raw.get("source")), outputs=outputs)
    return IgnoredCell(cell_type=cell_type if isinstance(cell_type, str) else None)


def parse_notebook(payload: Any) -> list[NotebookCell]:
    """Convert decoded notebook JSON into typed cells; malformed ``cells`` means none."""

    if not isinstance(payload, dict):
        return []
    cells = payload.get("cells")
    if not isinstance(cells, list):
        return []
    return [_parse_cell(cell) for cell in cells]


def render_cells(cells: list[NotebookCell]) -> str:
    parts: list[str] = []

    for cell in cells:
        if isinstance(cell, IgnoredCell):
            continue

        if cell.source.strip():
            parts.append(f"{cell.header}\n{cell.source}\n\n")

        if isinstance(cell, CodeCell):
            for output in cell.outputs:
                if isinstance(output, IgnoredOutput):
                    continue
                if output.text.strip():
                    parts.append(f"{output.label}:\n{output.text}\n")

    return "".join(parts).strip()


def extract_notebook_text(json_text: str, *, source_path: Path | None = None) -> str:
    """Parse notebook JSON text and return its flattened text form.

    Args:
        json_text: Notebook document, already decoded to ``str``.
        source_path: Optional path used only in error diagnostics.

    Returns:
        str: Annotated text of markdown and code cells with their outputs.

    Raises:
        MalformedNotebookError: If ``json_text`` is not valid JSON.
    """
    try:
        payload = json.loads(json_text)
    except ValueError as exc:
        raise MalformedNotebookError(
            message=f"Failed to parse notebook JSON: {exc}",
            path=source_path,
        ) from exc

    return render_cells(parse_notebook(payload))
