"""
Tests for the date parsing stage.
"""

from datetime import date
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from docingest.components.date_parsing import DateParsingStage, find_first_date
from docingest.core.organization import resolve_organization_path
from docingest.utils.data_models import ProcessedFile


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Invoice date: 2023-02-17", date(2023, 2, 17)),
        ("Issued 17/02/2023 in Paris", date(2023, 2, 17)),
        ("Issued 17.02.2023", date(2023, 2, 17)),
        ("Statement for March 2022", date(2022, 3, 1)),
        ("Signed on 5 January 2021", date(2021, 1, 5)),
        ("Signed on January 5, 2021", date(2021, 1, 5)),
        ("No dates here, just 12345", None),
        ("Bad 2023-13-45 then 2022-06-01", date(2022, 6, 1)),
    ],
)
def test_find_first_date(text, expected):
    assert find_first_date(text) == expected


def test_earliest_position_wins():
    assert find_first_date("March 2020 ... 2021-04-01") == date(2020, 3, 1)


def test_stage_tags_artifacts_and_feeds_month_criteria(make_document, make_context):
    document = make_document("Bill", [("a.txt", lambda p: p.write_text("x"))])
    document.processed_files.append(ProcessedFile(path=Path("/work/Bill.docx"), content="Due 2022-11-30"))
    document.processed_files.append(ProcessedFile(path=Path("/in/Bill/a.txt")))
    context = make_context()
    context.results.documents.append(document)
    next_stage = MagicMock()

    DateParsingStage().process(context, next_stage)
    DateParsingStage().process(context, next_stage)

    assert document.processed_files[0].tags == ["2022/11"]
    assert document.processed_files[1].tags == []
    assert resolve_organization_path(document, "month") == "2022/11"
    assert next_stage.call_count == 2
