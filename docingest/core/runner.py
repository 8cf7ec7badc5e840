"""
Pipeline orchestration module.

This module wires the default stage chain from a validated configuration
(traversal, document processing, optional categorization, date parsing,
delivery) and runs it against a fresh context.
"""

import logging
from pathlib import Path

from ..components.categorizers import CategorizationStage
from ..components.date_parsing import DateParsingStage
from ..components.delivery import DeliveryStage
from ..components.processing import DocumentProcessingStage
from ..components.traversal import TraversalStage
from ..utils.config import load_config
from ..utils.config_models import PipelineConfig
from .context import PipelineContext, RunConfig
from .errors import UnsupportedFormatError
from .factory import (
    build_component,
    OCR_REGISTRY,
    GENERATOR_REGISTRY,
    CATEGORIZER_REGISTRY,
    DELIVERY_REGISTRY,
)
from .pipeline import LoggingStage, Pipeline, PipelineBuilder

logger = logging.getLogger(__name__)


def build_run_config(config: PipelineConfig) -> RunConfig:
    """Translates the file configuration into the run's typed configuration."""
    return RunConfig(
        input_path=Path(config.input_path).expanduser().resolve(),
        output_dir=Path(config.output_dir).expanduser().resolve(),
        output_format=config.output_format,
        organization_criteria=config.organization.criteria,
    )


def build_pipeline(config: PipelineConfig) -> Pipeline:
    """
    Builds all components and composes the default stage chain.

    Raises:
        UnsupportedFormatError: If the generator cannot produce the configured
            output format, before any stage runs.
    """
    logger.info("Building pipeline components...")
    try:
        ocr_service = build_component(config.ocr.model_dump(), OCR_REGISTRY)
        generator = build_component(config.generator.model_dump(), GENERATOR_REGISTRY)
        delivery_service = build_component(config.delivery.model_dump(), DELIVERY_REGISTRY)
        categorizer = None
        if config.categorizer is not None:
            categorizer = build_component(config.categorizer.model_dump(), CATEGORIZER_REGISTRY)
    except (ValueError, TypeError) as e:
        logger.error(f"Error building components: {e}", exc_info=True)
        raise
    logger.info("All components built successfully.")

    if not generator.supports(config.output_format):
        logger.error(f"Output format '{config.output_format}' is not supported by the generator.")
        raise UnsupportedFormatError(f"Output format '{config.output_format}' not supported")

    builder = PipelineBuilder()
    builder.use(LoggingStage())
    builder.use(TraversalStage())
    builder.use(DocumentProcessingStage(ocr_service, generator))
    if categorizer is not None:
        builder.use(CategorizationStage(categorizer))
    builder.use(DateParsingStage())
    builder.use(DeliveryStage(delivery_service))
    return builder.build()


def run_pipeline(config_path: str) -> PipelineContext:
    """
    Runs the entire ingestion pipeline based on a configuration file.

    Errors raised by stages are logged and re-raised; the run is aborted.

    Returns:
        PipelineContext: The context of the finished run.
    """
    logger.info(f"DocIngest pipeline starting with config: {config_path}")
    config = load_config(config_path)

    pipeline = build_pipeline(config)
    context = PipelineContext(config=build_run_config(config))
    try:
        pipeline.run(context)
    except Exception as e:
        logger.error(f"Pipeline failed: {e}", exc_info=True)
        raise

    logger.info("DocIngest pipeline completed successfully.")
    return context
