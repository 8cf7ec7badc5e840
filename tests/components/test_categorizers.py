"""
Tests for categorization.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from docingest.components.categorizers import (
    CategorizationStage,
    OpenAICategorizer,
    parse_categorization,
)
from docingest.utils.data_models import Categorization, ProcessedFile


def test_parse_valid_response():
    result = parse_categorization(
        '{"category": "invoice", "tags": ["acme", "2023"], "insights": ["Due in 30 days"]}'
    )

    assert result == Categorization("invoice", ["acme", "2023"], ["Due in 30 days"])


def test_parse_fenced_response():
    result = parse_categorization('```json\n{"category": "receipt", "tags": []}\n```')

    assert result.category == "receipt"
    assert result.insights == []


@pytest.mark.parametrize(
    "response",
    ["", "not json at all", "[1, 2, 3]", '{"category": 42, "tags": "oops"}', None],
)
def test_parse_invalid_response_is_empty(response):
    result = parse_categorization(response)

    assert result.category == ""
    assert result.tags == []
    assert result.insights == []


def test_invalid_response_leaves_empty_category(make_document, make_context):
    """Tests that a garbage categorizer response completes with an empty category."""
    document = make_document("Doc", [("notes.txt", lambda p: p.write_text("x"))])
    document.processed_files.append(ProcessedFile(path=Path("/work/Doc.docx"), content="some text"))
    document.processed_files.append(ProcessedFile(path=Path("/in/Doc/notes.txt")))
    categorizer = MagicMock()
    categorizer.categorize.side_effect = lambda text: parse_categorization("<html>error</html>")
    context = make_context()
    context.results.documents.append(document)
    next_stage = MagicMock()

    CategorizationStage(categorizer).process(context, next_stage)

    generated, passed_through = document.processed_files
    assert generated.category == ""
    assert passed_through.category is None
    assert document.category == ""
    categorizer.categorize.assert_called_once_with("some text")
    next_stage.assert_called_once_with(context)


def test_document_takes_first_artifact_verdict(make_document, make_context):
    document = make_document("Doc", [("a.txt", lambda p: p.write_text("x"))])
    document.processed_files.extend(
        [
            ProcessedFile(path=Path("/work/Doc_1.docx"), content="first"),
            ProcessedFile(path=Path("/work/Doc_2.docx"), content="second"),
        ]
    )
    categorizer = MagicMock()
    categorizer.categorize.side_effect = [
        Categorization("invoice", ["acme"], ["paid"]),
        Categorization("receipt", [], []),
    ]
    context = make_context()
    context.results.documents.append(document)

    CategorizationStage(categorizer).process(context, MagicMock())

    assert [p.category for p in document.processed_files] == ["invoice", "receipt"]
    assert document.category == "invoice"
    assert document.tags == ["acme"]
    assert document.insights == ["paid"]


@patch("docingest.components.categorizers.OpenAI")
def test_openai_categorizer_parses_reply(mock_openai):
    client = MagicMock()
    mock_openai.return_value = client
    client.chat.completions.create.return_value.choices = [
        MagicMock(message=MagicMock(content='{"category": "letter", "tags": ["bank"], "insights": []}'))
    ]

    result = OpenAICategorizer(model="test-model", api_key="sk-test").categorize("Dear customer")

    assert result == Categorization("letter", ["bank"], [])
    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "test-model"
    assert "Dear customer" in kwargs["messages"][0]["content"]


def test_openai_categorizer_requires_api_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    with pytest.raises(ValueError):
        OpenAICategorizer()
