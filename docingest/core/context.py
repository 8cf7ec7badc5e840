"""
Run state shared by every stage of one pipeline run.

A `PipelineContext` is made of three parts:

- `RunConfig`: the immutable configuration of the run (input root, where
  generated artifacts go, output format, how documents are organized).
- `RunResults`: the intermediate and final results stages hand to each other.
- `extras`: a free-form map reserved for custom stages that need to pass
  data the typed fields do not cover.

A context belongs to exactly one run. Each instance owns its own results and
extras, so two runs never share mutable state.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from ..utils.data_models import DeliveryItem, Document

OrganizationFunction = Callable[[Document], str]


@dataclass(frozen=True)
class RunConfig:
    """Configuration of a single pipeline run."""

    input_path: Path
    output_dir: Path
    output_format: str = "Word"
    organization_criteria: str = "date"
    organization_function: Optional[OrganizationFunction] = None


@dataclass
class RunResults:
    """Results accumulated by the stages of a run."""

    documents: List[Document] = field(default_factory=list)
    processed_paths: List[Path] = field(default_factory=list)
    deliveries: List[DeliveryItem] = field(default_factory=list)
    delivered_paths: List[Path] = field(default_factory=list)


@dataclass
class PipelineContext:
    """The state object passed by reference through the stage chain."""

    config: RunConfig
    results: RunResults = field(default_factory=RunResults)
    extras: Dict[str, Any] = field(default_factory=dict)
