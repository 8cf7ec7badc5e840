"""
Document generation components for the DocIngest pipeline.

A generator turns extracted text into a finished file in the requested
output format.
"""

import logging
import textwrap
from abc import ABC, abstractmethod
from pathlib import Path

import fitz
from docx import Document as DocxDocument

from ..core.errors import UnsupportedFormatError

logger = logging.getLogger(__name__)

PAGE_MARGIN = 50
FONT_SIZE = 10
LINES_PER_PAGE = 55
CHARS_PER_LINE = 90


class BaseDocumentGenerator(ABC):
    """Abstract base class for all document generators."""

    @abstractmethod
    def generate(
        self, text: str, document_name: str, output_format: str, output_dir: Path
    ) -> Path:
        """
        Generates a document from text and saves it in `output_dir`.

        Args:
            text (str): The content of the document.
            document_name (str): Base name of the output file.
            output_format (str): The output format, e.g. "Word" or "PDF".
            output_dir (Path): Directory the file is written to.

        Returns:
            Path: The path of the generated file. Its extension may differ
                from the requested format if the generator fell back to
                another one.

        Raises:
            UnsupportedFormatError: If the format is not supported.
        """
        pass

    def supports(self, output_format: str) -> bool:
        """Returns whether `output_format` can be generated. Accepts everything by default."""
        return True


class DefaultDocumentGenerator(BaseDocumentGenerator):
    """
    Generates Word (python-docx), PDF (PyMuPDF) and plain-text files.

    PDF rendering falls back to a `.txt` file when PyMuPDF fails; the
    fallback is still a successful generation.
    """

    SUPPORTED_FORMATS = ("word", "pdf", "text")

    def supports(self, output_format: str) -> bool:
        return (output_format or "").strip().lower() in self.SUPPORTED_FORMATS

    def generate(
        self, text: str, document_name: str, output_format: str, output_dir: Path
    ) -> Path:
        if not self.supports(output_format):
            raise UnsupportedFormatError(f"Output format '{output_format}' not supported")
        fmt = output_format.strip().lower()

        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        if fmt == "word":
            return self._write_docx(text, output_dir / f"{document_name}.docx")
        if fmt == "pdf":
            output_path = output_dir / f"{document_name}.pdf"
            try:
                return self._write_pdf(text, output_path)
            except RuntimeError as e:
                logger.warning(
                    f"PDF rendering failed for '{document_name}': {e}. Falling back to text.",
                    exc_info=True,
                )
                output_path.unlink(missing_ok=True)
                return self._write_text(text, output_path.with_suffix(".txt"))
        return self._write_text(text, output_dir / f"{document_name}.txt")

    def _write_docx(self, text: str, output_path: Path) -> Path:
        document = DocxDocument()
        for paragraph in text.split("\n"):
            document.add_paragraph(paragraph)
        document.save(str(output_path))
        logger.debug(f"Wrote Word document '{output_path}'")
        return output_path

    def _write_pdf(self, text: str, output_path: Path) -> Path:
        lines = []
        for paragraph in text.split("\n"):
            lines.extend(textwrap.wrap(paragraph, CHARS_PER_LINE) or [""])
        with fitz.open() as pdf:
            for start in range(0, max(len(lines), 1), LINES_PER_PAGE):
                page = pdf.new_page()
                chunk = "\n".join(lines[start : start + LINES_PER_PAGE])
                page.insert_text(
                    (PAGE_MARGIN, PAGE_MARGIN + FONT_SIZE),
                    chunk,
                    fontsize=FONT_SIZE,
                    fontname="helv",
                )
            pdf.save(str(output_path))
        logger.debug(f"Wrote PDF document '{output_path}'")
        return output_path

    def _write_text(self, text: str, output_path: Path) -> Path:
        output_path.write_text(text, encoding="utf-8")
        logger.debug(f"Wrote text document '{output_path}'")
        return output_path
