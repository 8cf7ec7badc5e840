"""
Document processing stage for the DocIngest pipeline.

For every document, files are split into images, pre-rendered documents
(PDF/Word) and everything else. Images and documents are grouped by file name
(see `docingest.core.grouping`); each group becomes one generated artifact:

- image groups are stacked into one bitmap and sent to OCR once;
- document groups have their text extracted and joined with page breaks;
- other files are passed through unchanged.
"""

import logging
from pathlib import Path
from typing import List

from ..core.context import PipelineContext
from ..core.errors import ExtractionError
from ..core.grouping import DOCUMENT, IMAGE, OTHER, FileGroup, group_files, partition_files
from ..core.pipeline import BaseStage, NextStage
from ..utils.data_models import Document, ProcessedFile
from .extractors import combine_images, extract_document_text
from .generators import BaseDocumentGenerator
from .ocr import BaseOcrService

logger = logging.getLogger(__name__)

PAGE_BREAK = "\n\n----- page break -----\n\n"


def artifact_name(document: Document, index: int, group_count: int) -> str:
    """Names the artifact of the `index`-th (1-based) group of a document."""
    if group_count == 1:
        return document.name
    return f"{document.name}_{index}"


class DocumentProcessingStage(BaseStage):
    """
    Turns each document's file groups into generated artifacts.
    """

    def __init__(self, ocr_service: BaseOcrService, generator: BaseDocumentGenerator):
        self.ocr_service = ocr_service
        self.generator = generator

    def process(self, context: PipelineContext, next_stage: NextStage) -> None:
        logger.info("Starting document processing")
        documents = context.results.documents
        if not documents:
            logger.warning("No documents found in context")
            next_stage(context)
            return

        output_dir = Path(context.config.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        for document in documents:
            produced = self.process_document(
                document, context.config.output_format, output_dir
            )
            context.results.processed_paths.extend(produced)

        logger.info("Document processing completed")
        next_stage(context)

    def process_document(
        self, document: Document, output_format: str, output_dir: Path
    ) -> List[Path]:
        """
        Processes one document and appends its artifacts to `processed_files`.

        Generated artifacts are written to `output_dir/<document name>/`, so
        artifacts of different documents never share a directory.

        Returns:
            List[Path]: Paths of the artifacts added for this document.
        """
        partitions = partition_files(document.files)
        image_groups = group_files(partitions[IMAGE])
        document_groups = group_files(partitions[DOCUMENT])
        group_count = len(image_groups) + len(document_groups)

        if group_count == 0 and not partitions[OTHER]:
            logger.info(f"No processable files in document {document.name}")
            return []

        logger.info(
            f"Processing document {document.name}: {len(image_groups)} image groups, "
            f"{len(document_groups)} document groups, {len(partitions[OTHER])} other files"
        )

        document_dir = output_dir / document.name
        produced = []
        texts = []
        groups = [(IMAGE, g) for g in image_groups] + [(DOCUMENT, g) for g in document_groups]
        for index, (kind, group) in enumerate(groups, start=1):
            try:
                if kind == IMAGE:
                    text = self._read_image_group(group)
                else:
                    text = self._read_document_group(group)
            except ExtractionError as e:
                logger.error(
                    f"Skipping group '{group.key}' of document {document.name}: {e}",
                    exc_info=True,
                )
                continue

            name = artifact_name(document, index, group_count)
            output_path = self.generator.generate(text, name, output_format, document_dir)
            document.processed_files.append(ProcessedFile(path=output_path, content=text))
            produced.append(output_path)
            texts.append(text)

        for other in partitions[OTHER]:
            logger.debug(f"Passing through '{other.name}' unchanged")
            document.processed_files.append(ProcessedFile(path=other.path))
            produced.append(other.path)

        if texts:
            document.content = PAGE_BREAK.join(texts)
        return produced

    def _read_image_group(self, group: FileGroup) -> str:
        logger.debug(f"Combining {len(group.files)} images for group '{group.key}'")
        image_bytes = combine_images(group.paths)
        return self.ocr_service.extract_text(image_bytes)

    def _read_document_group(self, group: FileGroup) -> str:
        logger.debug(f"Extracting text from {len(group.files)} files for group '{group.key}'")
        return PAGE_BREAK.join(extract_document_text(path) for path in group.paths)
