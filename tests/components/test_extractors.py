"""
Tests for image combination and document text extraction.
"""

import io
from unittest.mock import patch

import fitz
import pytest
from docx import Document as DocxDocument
from PIL import Image

from docingest.components.extractors import combine_images, extract_document_text
from docingest.core.errors import ExtractionError


def _save_image(path, size, color, mode="RGB"):
    Image.new(mode, size, color).save(path)
    return path


def test_combined_canvas_dimensions(tmp_path):
    paths = [
        _save_image(tmp_path / "p1.png", (100, 50), "red"),
        _save_image(tmp_path / "p2.png", (80, 70), "green"),
        _save_image(tmp_path / "p3.png", (120, 30), "blue"),
    ]

    data = combine_images(paths)

    with Image.open(io.BytesIO(data)) as combined:
        assert combined.format == "PNG"
        assert combined.size == (120, 150)
        # pages stacked top-to-bottom in the given order
        assert combined.getpixel((0, 0)) == (255, 0, 0)
        assert combined.getpixel((0, 50)) == (0, 128, 0)
        assert combined.getpixel((0, 120)) == (0, 0, 255)
        # area right of a narrower page stays background
        assert combined.getpixel((110, 60)) == (255, 255, 255)


def test_combine_handles_mixed_modes(tmp_path):
    paths = [
        _save_image(tmp_path / "a1.png", (10, 10), 0, mode="L"),
        _save_image(tmp_path / "a2.png", (10, 10), (0, 0, 255, 255), mode="RGBA"),
    ]

    with Image.open(io.BytesIO(combine_images(paths))) as combined:
        assert combined.size == (10, 20)
        assert combined.getpixel((0, 15)) == (0, 0, 255)


def test_corrupt_image_raises_extraction_error(tmp_path):
    good = _save_image(tmp_path / "p1.png", (10, 10), "red")
    bad = tmp_path / "p2.png"
    bad.write_bytes(b"not an image")

    with pytest.raises(ExtractionError):
        combine_images([good, bad])


def test_extract_pdf_text(tmp_path):
    path = tmp_path / "letter.pdf"
    with fitz.open() as pdf:
        pdf.new_page().insert_text((72, 72), "Hello from page one")
        pdf.new_page().insert_text((72, 72), "And page two")
        pdf.save(str(path))

    text = extract_document_text(path)

    assert "Hello from page one" in text
    assert "And page two" in text


def test_extract_docx_text(tmp_path):
    path = tmp_path / "letter.docx"
    document = DocxDocument()
    document.add_paragraph("First paragraph")
    document.add_paragraph("Second paragraph")
    document.save(str(path))

    assert extract_document_text(path) == "First paragraph\nSecond paragraph"


@pytest.mark.parametrize("name", ["broken.docx", "legacy.doc"])
def test_unreadable_word_documents_raise_extraction_error(tmp_path, name):
    path = tmp_path / name
    path.write_bytes(b"garbage")

    with pytest.raises(ExtractionError):
        extract_document_text(path)


@patch("docingest.components.extractors.fitz.open", side_effect=RuntimeError("cannot open"))
def test_unreadable_pdf_raises_extraction_error(mock_open, tmp_path):
    path = tmp_path / "broken.pdf"
    path.write_bytes(b"garbage")

    with pytest.raises(ExtractionError):
        extract_document_text(path)
