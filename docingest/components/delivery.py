"""
Delivery components for the DocIngest pipeline.

The delivery stage resolves each document's organization fragment and hands
its artifacts to a delivery service, which commits them under
`<root>/<fragment>/<document name>/`.
"""

import logging
import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, List, Sequence, Set

from ..core.context import PipelineContext
from ..core.organization import resolve_fragment
from ..core.pipeline import BaseStage, NextStage
from ..utils.data_models import DeliveryItem, Document

logger = logging.getLogger(__name__)


class BaseDeliveryService(ABC):
    """Abstract base class for all delivery components."""

    @abstractmethod
    def deliver(self, source_paths: Sequence[Path], destination_key: str) -> List[Path]:
        """
        Commits files under a destination key.

        Args:
            source_paths (Sequence[Path]): Files to deliver.
            destination_key (str): Relative destination, e.g. '2023-01/Invoice'.

        Returns:
            List[Path]: The committed file locations.
        """
        pass


def _claim_name(name: str, taken: Set[str]) -> str:
    """Returns `name`, or `stem_2.ext`, `stem_3.ext`... if it is already taken."""
    candidate = name
    counter = 2
    while candidate in taken:
        path = Path(name)
        candidate = f"{path.stem}_{counter}{path.suffix}"
        counter += 1
    taken.add(candidate)
    return candidate


class FolderDeliveryService(BaseDeliveryService):
    """
    Copies files into a folder tree on the local filesystem.

    Files of one delivery that share a base name (e.g. a generated
    `Receipt.txt` and a passed-through `Receipt.txt`) are all kept; later
    ones get a numeric suffix.
    """

    def __init__(self, root: str):
        self.root = Path(root)
        logger.debug(f"Initialized FolderDeliveryService with root='{self.root}'")

    def deliver(self, source_paths: Sequence[Path], destination_key: str) -> List[Path]:
        destination = self.root.joinpath(*[p for p in destination_key.split("/") if p])
        destination.mkdir(parents=True, exist_ok=True)

        delivered = []
        taken = set()
        for source in source_paths:
            name = Path(source).name
            target = destination / _claim_name(name, taken)
            if target.name != name:
                logger.warning(f"'{name}' already delivered to '{destination}', saving as '{target.name}'")
            shutil.copy2(source, target)
            logger.debug(f"Copied '{source}' to '{target}'")
            delivered.append(target)
        logger.info(f"Delivered {len(delivered)} files to '{destination}'")
        return delivered


def _unique_paths(paths: Sequence[Path]) -> List[Path]:
    seen = set()
    unique = []
    for path in paths:
        if path in seen:
            continue
        seen.add(path)
        unique.append(path)
    return unique


def plan_deliveries(
    documents: Sequence[Document], resolver: Callable[[Document], str]
) -> List[DeliveryItem]:
    """
    Builds the delivery plan for a run.

    Returns one item per document with at least one artifact, in document
    order. Artifact paths keep their order with duplicates removed.
    """
    plan = []
    for document in documents:
        paths = _unique_paths([p.path for p in document.processed_files])
        if not paths:
            logger.debug(f"Nothing to deliver for document {document.name}")
            continue
        plan.append(DeliveryItem(document=document, fragment=resolver(document), artifact_paths=paths))
    return plan


class DeliveryStage(BaseStage):
    """Resolves fragments and delivers every document's artifacts."""

    def __init__(self, delivery_service: BaseDeliveryService):
        self.delivery_service = delivery_service

    def process(self, context: PipelineContext, next_stage: NextStage) -> None:
        logger.info("Starting delivery")
        plan = plan_deliveries(
            context.results.documents,
            lambda document: resolve_fragment(document, context.config),
        )
        context.results.deliveries.extend(plan)
        for item in plan:
            logger.info(
                f"Delivering {len(item.artifact_paths)} files of {item.document.name} to '{item.destination_key}'"
            )
            delivered = self.delivery_service.deliver(item.artifact_paths, item.destination_key)
            context.results.delivered_paths.extend(delivered)
        logger.info("Delivery completed")
        next_stage(context)
