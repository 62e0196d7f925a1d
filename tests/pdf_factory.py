"""Build small text PDFs on the fly for extraction tests.

Pages given as an empty list become blank (text-free) pages.
"""

from __future__ import annotations

from pathlib import Path

from pypdf import PdfWriter
from pypdf.generic import DecodedStreamObject, DictionaryObject, NameObject

PAGE_WIDTH = 595
PAGE_HEIGHT = 842
FONT_SIZE = 12
LEFT_MARGIN = 72
TOP_Y = 780
LINE_HEIGHT = 16


def _escape_pdf_text(value: str) -> str:
    return value.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def _add_text_page(writer: PdfWriter, lines: list[str]) -> None:
    """Append a single page containing extractable Helvetica text lines."""

    page = writer.add_blank_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
    if not lines:
        return
    font_ref = writer._add_object(
        DictionaryObject(
            {
                NameObject("/Type"): NameObject("/Font"),
                NameObject("/Subtype"): NameObject("/Type1"),
                NameObject("/BaseFont"): NameObject("/Helvetica"),
            }
        )
    )
    page[NameObject("/Resources")] = DictionaryObject(
        {NameObject("/Font"): DictionaryObject({NameObject("/F1"): font_ref})}
    )

    content_lines = ["BT", f"/F1 {FONT_SIZE} Tf", f"{LEFT_MARGIN} {TOP_Y} Td", f"{LINE_HEIGHT} TL"]
    for index, line in enumerate(lines):
        content_lines.append(f"({_escape_pdf_text(line)}) Tj")
        if index < len(lines) - 1:
            content_lines.append("T*")
    content_lines.append("ET")

    stream = DecodedStreamObject()
    stream.set_data("\n".join(content_lines).encode("latin-1"))
    page[NameObject("/Contents")] = writer._add_object(stream)


def write_text_pdf(output_path: Path, pages: list[list[str]]) -> Path:
    """Write one PDF page per entry of `pages` and return the path."""

    writer = PdfWriter()
    for lines in pages:
        _add_text_page(writer, lines)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("wb") as handle:
        writer.write(handle)
    return output_path
