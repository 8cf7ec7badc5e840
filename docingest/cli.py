"""
Command-Line Interface for DocIngest.
"""

import typer
import logging
from pathlib import Path
from typing_extensions import Annotated

from .core.runner import run_pipeline
from .core.factory import (
    OCR_REGISTRY,
    GENERATOR_REGISTRY,
    CATEGORIZER_REGISTRY,
    DELIVERY_REGISTRY,
)
from .core.organization import CRITERIA_REGISTRY, resolve_organization_path
from .core.errors import DocIngestError
from .components.traversal import load_document


logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

app = typer.Typer(help="Turns folders of scans and documents into organized files.")

DEFAULT_YAML_CONTENT = """# Default DocIngest Pipeline Configuration
input_path: ./input
output_dir: ./temp
output_format: Word

organization:
  criteria: month

ocr:
  type: tesseract
  config:
    lang: eng

generator:
  type: default

# categorizer:
#   type: openai
#   config:
#     model: gpt-4o-mini

delivery:
  type: folder
  config:
    root: ./output
"""


@app.command()
def run(
    config_path: str = typer.Option(
        "pipeline.yaml",
        "-c",
        help="Path to the pipeline's YAML configuration file.",
    )
):
    """Runs the DocIngest pipeline."""
    try:
        context = run_pipeline(config_path=config_path)
    except DocIngestError as e:
        logger.error(f"Run aborted: {e}")
        raise typer.Exit(code=1)

    documents = context.results.documents
    print(f"\nFound {len(documents)} documents")
    for doc in documents:
        print(
            f"  - {doc.name}: files={len(doc.files)}, processed={len(doc.processed_files)}"
        )
    print(f"Delivered {len(context.results.delivered_paths)} files.")


@app.command()
def init():
    """Initializes a new DocIngest project."""
    logger.info("Initializing new DocIngest project...")
    Path("input").mkdir(exist_ok=True)
    logger.info("Created 'input' directory.")

    config_file = Path("pipeline.yaml")
    if config_file.exists():
        logger.warning("'pipeline.yaml' already exists.")
    else:
        config_file.write_text(DEFAULT_YAML_CONTENT.strip() + "\n")
        logger.info("Created default 'pipeline.yaml'.")

    logger.info("Project initialized.")


@app.command(name="list-components")
def list_components():
    """Lists all available components."""
    logger.info("Listing available components...")

    def print_registry(title, registry):
        print(f"\n--- {title} ---")
        for name in sorted(registry.keys()):
            print(f"  - {name}")

    print_registry("OCR", OCR_REGISTRY)
    print_registry("Generators", GENERATOR_REGISTRY)
    print_registry("Categorizers", CATEGORIZER_REGISTRY)
    print_registry("Delivery", DELIVERY_REGISTRY)
    print_registry("Organization criteria", CRITERIA_REGISTRY)


@app.command()
def resolve(
    document_dir: Annotated[
        str, typer.Argument(help="Path to a document folder.")
    ],
    criteria: str = typer.Option("date", "--criteria", help="Organization criteria."),
):
    """Shows where a document folder would be delivered."""
    path = Path(document_dir)
    if not path.is_dir():
        logger.error(f"'{path}' is not a directory.")
        raise typer.Exit(code=1)
    try:
        document = load_document(path)
    except OSError as e:
        logger.error(f"Could not read '{path}': {e}", exc_info=True)
        raise typer.Exit(code=1)
    if document is None:
        logger.error(f"'{path}' contains no files.")
        raise typer.Exit(code=1)
    print(f"{resolve_organization_path(document, criteria)}/{document.name}")


if __name__ == "__main__":
    app()
