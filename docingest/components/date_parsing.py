"""
Date parsing stage for the DocIngest pipeline.

Finds the first date mentioned in each generated artifact's text and tags the
artifact with it as `yyyy/MM`. The `month` organization criteria prefers this
tag over the folder's creation date.

Recognized forms, first match in the text wins:
- ISO dates: 2023-01-15, 2023/01/15
- day-first numeric dates: 15/01/2023, 15.01.2023, 15-01-2023
- month names: "15 January 2023", "January 15, 2023", "Jan 2023"
"""

import logging
import re
from datetime import date
from typing import Optional

from ..core.context import PipelineContext
from ..core.pipeline import BaseStage, NextStage

logger = logging.getLogger(__name__)

MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

_MONTH_NAME = r"(?P<month_name>jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|jun(?:e)?|jul(?:y)?|aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)"

DATE_PATTERNS = [
    re.compile(r"\b(?P<year>\d{4})[-/](?P<month>\d{1,2})[-/](?P<day>\d{1,2})\b"),
    re.compile(r"\b(?P<day>\d{1,2})[./-](?P<month>\d{1,2})[./-](?P<year>\d{4})\b"),
    re.compile(r"\b(?:(?P<day>\d{1,2})\s+)?" + _MONTH_NAME + r"\.?,?\s+(?:(?P<day2>\d{1,2}),?\s+)?(?P<year>\d{4})\b", re.IGNORECASE),
]


def _to_date(match: re.Match) -> Optional[date]:
    groups = match.groupdict()
    year = int(groups["year"])
    if groups.get("month_name"):
        month = MONTHS[groups["month_name"][:3].lower()]
    else:
        month = int(groups["month"])
    day = groups.get("day") or groups.get("day2") or "1"
    try:
        return date(year, month, int(day))
    except ValueError:
        return None


def find_first_date(text: str) -> Optional[date]:
    """
    Returns the earliest-positioned valid date in `text`, or None.
    """
    best = None
    for pattern in DATE_PATTERNS:
        for match in pattern.finditer(text):
            if best is not None and match.start() >= best[0]:
                break
            parsed = _to_date(match)
            if parsed is not None:
                best = (match.start(), parsed)
                break
    return best[1] if best else None


def year_month_tag(value: date) -> str:
    return f"{value.year:04d}/{value.month:02d}"


class DateParsingStage(BaseStage):
    """Tags artifacts with the year and month of the first date in their text."""

    def process(self, context: PipelineContext, next_stage: NextStage) -> None:
        logger.info("Starting date parsing")
        for document in context.results.documents:
            for processed in document.processed_files:
                if not processed.content:
                    continue
                found = find_first_date(processed.content)
                if found is None:
                    continue
                tag = year_month_tag(found)
                if tag not in processed.tags:
                    processed.tags.append(tag)
                logger.debug(f"Tagged '{processed.path.name}' with '{tag}'")
        next_stage(context)
