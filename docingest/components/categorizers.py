"""
Categorization components for the DocIngest pipeline.

A categorizer reads the text of an artifact and returns a category, tags and
short insights. Responses that cannot be parsed never fail the run; they
degrade to empty metadata.
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Any, List

from dotenv import load_dotenv
from openai import OpenAI

from ..core.context import PipelineContext
from ..core.pipeline import BaseStage, NextStage
from ..utils.data_models import Categorization

load_dotenv()

logger = logging.getLogger(__name__)

CATEGORIZATION_PROMPT = """You categorize scanned business documents.
Read the document below and answer with a JSON object with exactly these keys:
  "category": a short lowercase category such as "invoice", "receipt", "contract" or "letter",
  "tags": a list of short keywords,
  "insights": a list of one-sentence observations about the document.

Document:
{text}"""

MAX_PROMPT_CHARS = 12000


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


def parse_categorization(response_text: str) -> Categorization:
    """
    Parses a categorization response.

    Accepts a JSON object, optionally wrapped in a Markdown code fence.
    Anything unparsable yields an empty `Categorization`.
    """
    if not response_text:
        return Categorization()

    payload = response_text.strip()
    if payload.startswith("```"):
        payload = payload.strip("`")
        if payload.lower().startswith("json"):
            payload = payload[4:]

    try:
        data = json.loads(payload)
    except json.JSONDecodeError:
        logger.warning("Could not parse categorization response as JSON.")
        return Categorization()
    if not isinstance(data, dict):
        logger.warning("Categorization response is not a JSON object.")
        return Categorization()

    category = data.get("category")
    return Categorization(
        category=category.strip() if isinstance(category, str) else "",
        tags=_string_list(data.get("tags")),
        insights=_string_list(data.get("insights")),
    )


class BaseCategorizer(ABC):
    """Abstract base class for all categorizer components."""

    @abstractmethod
    def categorize(self, text: str) -> Categorization:
        """Categorizes a piece of text."""
        pass


class OpenAICategorizer(BaseCategorizer):
    """
    A categorizer that asks an OpenAI chat model for a JSON verdict.
    """

    def __init__(self, model: str = "gpt-4o-mini", api_key: str = None):
        """
        Initializes the OpenAICategorizer.

        Args:
            model (str): The chat model to use.
            api_key (str): The OpenAI API key. Defaults to `OPENAI_API_KEY`.
        """
        self.model = model
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self.api_key:
            raise ValueError(
                "You need an OpenAI API key. Pass it as the 'api_key' argument or set the 'OPENAI_API_KEY' environment variable."
            )
        self.client = OpenAI(api_key=self.api_key)
        logger.info(f"Initialized OpenAICategorizer with model '{self.model}'.")

    def categorize(self, text: str) -> Categorization:
        prompt = CATEGORIZATION_PROMPT.format(text=text[:MAX_PROMPT_CHARS])
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            response_format={"type": "json_object"},
        )
        return parse_categorization(response.choices[0].message.content)


class CategorizationStage(BaseStage):
    """
    Categorizes every generated artifact, then copies the first artifact's
    verdict onto its document.
    """

    def __init__(self, categorizer: BaseCategorizer):
        self.categorizer = categorizer

    def process(self, context: PipelineContext, next_stage: NextStage) -> None:
        logger.info("Starting categorization")
        for document in context.results.documents:
            for processed in document.processed_files:
                if processed.content is None:
                    continue
                result = self.categorizer.categorize(processed.content)
                processed.category = result.category
                processed.tags.extend(result.tags)
                processed.insights.extend(result.insights)
                logger.debug(
                    f"Categorized '{processed.path.name}' as '{result.category}'"
                )

            categorized = [p for p in document.processed_files if p.category is not None]
            if categorized:
                first = categorized[0]
                document.category = first.category
                document.tags = list(first.tags)
                document.insights = list(first.insights)
        logger.info("Categorization completed")
        next_stage(context)
