"""
Configuration loading utility for DocIngest.

Reads `pipeline.yaml` and validates it against `PipelineConfig`. A broken
configuration is a startup failure: the problem is logged and the process
exits with status 1 before any folder is touched.
"""

import yaml
from pathlib import Path
import logging
from pydantic import ValidationError
import sys

from .config_models import PipelineConfig

logger = logging.getLogger(__name__)


def _describe(error: ValidationError) -> str:
    lines = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "<root>"
        lines.append(f"  {location}: {item['msg']}")
    return "\n".join(lines)


def load_config(config_path: str) -> PipelineConfig:
    """
    Loads `config_path` and returns it as a validated `PipelineConfig`.

    Exits the program with status 1 if the file is missing, is not a YAML
    mapping, or has invalid fields (each listed by its dotted location, e.g.
    `delivery.type`).
    """
    path = Path(config_path)
    if not path.is_file():
        logger.error(f"Configuration file not found: '{path}'")
        sys.exit(1)

    logger.debug(f"Loading pipeline configuration from '{path}'")
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except (yaml.YAMLError, OSError) as e:
        logger.error(f"Could not read YAML file '{path}': {e}", exc_info=True)
        sys.exit(1)

    if not isinstance(raw, dict):
        logger.error(f"Configuration file '{path}' must contain a YAML mapping")
        sys.exit(1)

    try:
        config = PipelineConfig.model_validate(raw)
    except ValidationError as e:
        logger.error(f"Invalid configuration in '{path}':\n{_describe(e)}")
        sys.exit(1)

    logger.info(f"Loaded configuration from '{path}'")
    return config
