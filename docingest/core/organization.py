"""
Organization resolver: maps a processed document to a destination path fragment.
"""

import logging
import re
from typing import Callable, Dict, Optional

from .context import RunConfig
from ..utils.data_models import Document

logger = logging.getLogger(__name__)

DEFAULT_CRITERIA = "date"
UNCATEGORIZED = "uncategorized"

YEAR_MONTH_TAG = re.compile(r"^\d{4}/\d{2}$")


def _by_date(document: Document) -> str:
    return document.created_at.strftime("%Y-%m-%d")


def _by_year(document: Document) -> str:
    return document.created_at.strftime("%Y")


def _by_month(document: Document) -> str:
    # A `yyyy/MM` date tag is returned as-is, so it nests as `yyyy/MM/` under the
    # delivery root, while the folder-timestamp fallback is a single `yyyy-MM` level.
    tag = find_year_month_tag(document)
    if tag:
        return tag
    return document.created_at.strftime("%Y-%m")


def _by_name(document: Document) -> str:
    return document.name


def _by_type(document: Document) -> str:
    category = document.category
    if not category and document.processed_files:
        category = document.processed_files[0].category
    return category or UNCATEGORIZED


CRITERIA_REGISTRY: Dict[str, Callable[[Document], str]] = {
    "date": _by_date,
    "year": _by_year,
    "month": _by_month,
    "name": _by_name,
    "type": _by_type,
}


def find_year_month_tag(document: Document) -> Optional[str]:
    """Returns the first `yyyy/MM` tag found on the document's artifacts, if any."""
    for processed in document.processed_files:
        for tag in processed.tags:
            if YEAR_MONTH_TAG.match(tag):
                return tag
    return None


def resolve_organization_path(document: Document, criteria: str) -> str:
    """
    Computes the destination path fragment for a document.

    Args:
        document (Document): The processed document.
        criteria (str): One of 'date', 'year', 'month', 'name' or 'type'
            (case-insensitive). Anything else falls back to 'date'.

    Returns:
        str: The path fragment, e.g. '2023-01-15', '2023', '2023-01'. A
            'month' fragment taken from a date tag keeps its slash ('2022/11')
            and is delivered into nested year and month folders.
    """
    resolver = CRITERIA_REGISTRY.get((criteria or "").strip().lower())
    if resolver is None:
        logger.warning(
            f"Unknown organization criteria '{criteria}'. Falling back to '{DEFAULT_CRITERIA}'."
        )
        resolver = CRITERIA_REGISTRY[DEFAULT_CRITERIA]
    return resolver(document)


def resolve_fragment(document: Document, config: RunConfig) -> str:
    """Resolves a document's fragment, preferring a custom organization function."""
    if config.organization_function is not None:
        return config.organization_function(document)
    return resolve_organization_path(document, config.organization_criteria)
