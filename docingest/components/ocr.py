"""
OCR components for the DocIngest pipeline.

This module contains classes responsible for turning an encoded image
into plain text.
"""

import io
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import pytesseract
import requests
from PIL import Image

logger = logging.getLogger(__name__)

TESSDATA_URL = "https://github.com/tesseract-ocr/tessdata/raw/main/{lang}.traineddata"


class BaseOcrService(ABC):
    """Abstract base class for all OCR components."""

    @abstractmethod
    def extract_text(self, image_bytes: bytes) -> str:
        """
        Extracts text from an encoded image.

        Args:
            image_bytes (bytes): The image, encoded in any format Pillow reads.

        Returns:
            str: The recognized text.
        """
        pass


class TesseractOcrService(BaseOcrService):
    """
    An OCR service backed by the Tesseract engine through pytesseract.
    """

    def __init__(
        self,
        lang: str = "eng",
        tessdata_dir: Optional[str] = None,
        auto_download: bool = False,
    ):
        """
        Initializes the service.

        Args:
            lang (str): Tesseract language code.
            tessdata_dir (Optional[str]): Directory holding `<lang>.traineddata`.
                Uses Tesseract's default location when not set.
            auto_download (bool): Download the language model into
                `tessdata_dir` when it is missing.
        """
        self.lang = lang
        self.tessdata_dir = Path(tessdata_dir) if tessdata_dir else None
        if self.tessdata_dir and auto_download:
            self._ensure_tessdata()
        logger.debug(f"Initialized TesseractOcrService with lang='{lang}'")

    def _ensure_tessdata(self):
        model_path = self.tessdata_dir / f"{self.lang}.traineddata"
        if model_path.exists():
            return
        self.tessdata_dir.mkdir(parents=True, exist_ok=True)
        url = TESSDATA_URL.format(lang=self.lang)
        logger.info(f"Downloading Tesseract model from '{url}'")
        response = requests.get(url, timeout=60)
        response.raise_for_status()
        model_path.write_bytes(response.content)
        logger.info(f"Saved Tesseract model to '{model_path}'")

    def _tesseract_config(self) -> str:
        if self.tessdata_dir is None:
            return ""
        return f'--tessdata-dir "{self.tessdata_dir}"'

    def extract_text(self, image_bytes: bytes) -> str:
        logger.debug(f"Running OCR on {len(image_bytes)} bytes")
        with Image.open(io.BytesIO(image_bytes)) as image:
            text = pytesseract.image_to_string(
                image, lang=self.lang, config=self._tesseract_config()
            )
        logger.debug(f"OCR produced {len(text)} characters")
        return text
