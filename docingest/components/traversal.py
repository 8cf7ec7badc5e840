"""
Traversal stage for the DocIngest pipeline.

Reads the input root and turns each immediate subdirectory into a Document.
Discovery is single-level: only regular files directly inside a document
folder belong to it, nested folders are ignored.
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from ..core.context import PipelineContext
from ..core.errors import ConfigurationError
from ..core.pipeline import BaseStage, NextStage
from ..utils.data_models import Document, File

logger = logging.getLogger(__name__)


def _creation_time(stat: os.stat_result) -> datetime:
    # st_birthtime is missing on most Linux filesystems; mtime is the closest stable value.
    timestamp = getattr(stat, "st_birthtime", None)
    if timestamp is None:
        timestamp = stat.st_mtime
    return datetime.fromtimestamp(timestamp)


def list_document_files(directory: Path) -> List[File]:
    """
    Lists the regular files directly under a directory.

    Files are ordered by last-modified time, oldest first, ties broken by name.

    Raises:
        OSError: If the directory or one of its files cannot be read.
    """
    files = []
    for entry in directory.iterdir():
        if not entry.is_file():
            continue
        stat = entry.stat()
        files.append(
            File(
                name=entry.name,
                path=entry.resolve(),
                last_modified=datetime.fromtimestamp(stat.st_mtime),
            )
        )
    files.sort(key=lambda f: (f.last_modified, f.name))
    return files


def load_document(directory: Path) -> Optional[Document]:
    """Builds a Document from a directory, or None if it holds no files."""
    files = list_document_files(directory)
    if not files:
        logger.warning(f"Directory '{directory}' contains no files. Skipping.")
        return None
    return Document(
        name=directory.name,
        path=directory.resolve(),
        created_at=_creation_time(directory.stat()),
        files=files,
    )


def discover_documents(input_path: Path) -> List[Document]:
    """
    Discovers one Document per immediate subdirectory of `input_path`.

    Args:
        input_path (Path): The input root.

    Returns:
        List[Document]: Documents in directory-name order.

    Raises:
        ConfigurationError: If the input root is not a directory.
    """
    root = Path(input_path)
    if not root.is_dir():
        raise ConfigurationError(f"Input path '{root}' is not a valid directory.")

    documents = []
    for entry in sorted(root.iterdir(), key=lambda p: p.name):
        if not entry.is_dir():
            logger.debug(f"Ignoring non-directory entry '{entry.name}'.")
            continue
        try:
            document = load_document(entry)
        except OSError as e:
            logger.error(f"Could not read directory '{entry}': {e}", exc_info=True)
            continue
        if document is not None:
            logger.debug(f"Found document '{document.name}' with {len(document.files)} files.")
            documents.append(document)
    return documents


class TraversalStage(BaseStage):
    """Populates `context.results.documents` from the input root."""

    def process(self, context: PipelineContext, next_stage: NextStage) -> None:
        input_path = context.config.input_path
        logger.info(f"Scanning for documents in '{input_path}'.")
        documents = discover_documents(input_path)
        context.results.documents.extend(documents)
        logger.info(f"Found {len(documents)} documents.")
        next_stage(context)
