"""
Content readers used by the document processing stage.

- `combine_images` stacks the pages of an image group into one PNG buffer.
- `extract_document_text` reads the text layer of PDF and Word files.

Both raise `ExtractionError` when an input file cannot be read, so the caller
can skip the affected group.
"""

import io
import logging
import zipfile
from contextlib import ExitStack
from pathlib import Path
from typing import Sequence

import fitz
from docx import Document as DocxDocument
from docx.opc.exceptions import PackageNotFoundError
from PIL import Image

from ..core.errors import ExtractionError

logger = logging.getLogger(__name__)

CANVAS_BACKGROUND = (255, 255, 255)


def combine_images(paths: Sequence[Path]) -> bytes:
    """
    Stacks images top-to-bottom into a single PNG.

    The canvas is as wide as the widest image and as tall as all images
    together; each image is placed at x=0 directly below the previous one.
    All images and the canvas are closed before returning.

    Args:
        paths (Sequence[Path]): Image files in page order.

    Returns:
        bytes: The combined image, PNG-encoded.

    Raises:
        ExtractionError: If an image cannot be decoded.
    """
    if not paths:
        raise ValueError("At least one image is required.")

    with ExitStack() as stack:
        images = []
        for path in paths:
            try:
                image = stack.enter_context(Image.open(path))
                image.load()
            except (OSError, ValueError, Image.DecompressionBombError) as e:
                raise ExtractionError(f"Cannot read image '{path}': {e}") from e
            images.append(image)

        width = max(image.width for image in images)
        height = sum(image.height for image in images)
        logger.debug(f"Combining {len(images)} images into a {width}x{height} canvas")

        canvas = stack.enter_context(Image.new("RGB", (width, height), CANVAS_BACKGROUND))
        offset = 0
        for image in images:
            if image.mode == "RGB":
                canvas.paste(image, (0, offset))
            else:
                page = stack.enter_context(image.convert("RGBA"))
                canvas.paste(page, (0, offset), page)
            offset += image.height

        buffer = io.BytesIO()
        canvas.save(buffer, format="PNG")
        return buffer.getvalue()


def _extract_pdf_text(path: Path) -> str:
    try:
        with fitz.open(path) as pdf:
            return "".join(page.get_text() for page in pdf)
    except RuntimeError as e:
        # PyMuPDF's FileDataError and friends derive from RuntimeError
        raise ExtractionError(f"Cannot read PDF '{path}': {e}") from e


def _extract_docx_text(path: Path) -> str:
    try:
        document = DocxDocument(str(path))
    except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as e:
        raise ExtractionError(f"Cannot read Word document '{path}': {e}") from e
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def extract_document_text(path: Path) -> str:
    """
    Extracts the text of a PDF or Word document.

    Legacy `.doc` files are attempted with the `.docx` reader and fail with
    `ExtractionError` when they are not OOXML packages.

    Raises:
        ExtractionError: If the file cannot be read.
    """
    suffix = Path(path).suffix.lower()
    if suffix == ".pdf":
        return _extract_pdf_text(path)
    if suffix in (".docx", ".doc"):
        return _extract_docx_text(path)
    logger.warning(f"No text extractor for '{path}'.")
    return ""
