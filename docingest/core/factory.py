"""
Component Factory for the DocIngest pipeline.

This module implements the factory pattern for creating the pipeline's
external capabilities. It uses registries to map configuration strings
(e.g., 'tesseract') to the actual component classes, so OCR engines,
generators, categorizers and delivery targets can be swapped via
configuration.
"""

import logging

from .errors import ConfigurationError
from ..components.ocr import TesseractOcrService
from ..components.generators import DefaultDocumentGenerator
from ..components.categorizers import OpenAICategorizer
from ..components.delivery import FolderDeliveryService

logger = logging.getLogger(__name__)

# A registry mapping 'type' strings to their corresponding OCR classes.
OCR_REGISTRY = {"tesseract": TesseractOcrService}

# A registry mapping 'type' strings to their corresponding generator classes.
GENERATOR_REGISTRY = {"default": DefaultDocumentGenerator}

# A registry mapping 'type' strings to their corresponding categorizer classes.
CATEGORIZER_REGISTRY = {"openai": OpenAICategorizer}

# A registry mapping 'type' strings to their corresponding delivery classes.
DELIVERY_REGISTRY = {"folder": FolderDeliveryService}


def build_component(component_config: dict, registry: dict):
    """
    Instantiates the capability named by `component_config["type"]`.

    `component_config["config"]` is passed to the class as keyword arguments,
    so `{"type": "tesseract", "config": {"lang": "deu"}}` looked up in
    `OCR_REGISTRY` yields `TesseractOcrService(lang="deu")`.

    Raises:
        ConfigurationError: If the type is missing, unknown to `registry`, or
            the class rejects the given options.
    """
    component_type = component_config.get("type", "")
    options = component_config.get("config") or {}

    if not component_type:
        raise ConfigurationError("Component 'type' not specified in configuration.")

    component_class = registry.get(component_type)
    if component_class is None:
        available = ", ".join(sorted(registry)) or "none"
        raise ConfigurationError(
            f"'{component_type}' is not a valid component type (available: {available})."
        )

    logger.debug(f"Building {component_class.__name__} with options: {options}")
    try:
        return component_class(**options)
    except TypeError as e:
        raise ConfigurationError(
            f"Invalid options for '{component_type}': {e}"
        ) from e
