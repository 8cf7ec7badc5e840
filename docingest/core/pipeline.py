"""
Stage chain engine.

A pipeline is an ordered list of stages. Each stage receives the shared
`PipelineContext` and a `next_stage` continuation; calling the continuation
runs the rest of the chain, not calling it short-circuits everything after
the stage. The chain is composed once, at build time, by folding the stages
right-to-left so that the first-registered stage runs first. The terminal
continuation does nothing.

Exceptions raised by a stage are not caught here: they propagate to whoever
called the pipeline and the remaining stages never run.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Tuple, Union

from .context import PipelineContext

logger = logging.getLogger(__name__)

NextStage = Callable[[PipelineContext], None]
StageFunction = Callable[[PipelineContext, NextStage], None]


class BaseStage(ABC):
    """Abstract base class for all pipeline stages."""

    @abstractmethod
    def process(self, context: PipelineContext, next_stage: NextStage) -> None:
        """
        Runs this stage against the context.

        Args:
            context (PipelineContext): The shared run state.
            next_stage (NextStage): Continuation running the rest of the chain.
                Implementations call it exactly once to continue, or not at
                all to stop the run after this stage.
        """
        pass

    @property
    def name(self) -> str:
        return self.__class__.__name__


class FunctionStage(BaseStage):
    """Adapts a plain `(context, next_stage)` function to the stage interface."""

    def __init__(self, func: StageFunction):
        self.func = func

    def process(self, context: PipelineContext, next_stage: NextStage) -> None:
        self.func(context, next_stage)

    @property
    def name(self) -> str:
        return getattr(self.func, "__name__", self.__class__.__name__)


class LoggingStage(BaseStage):
    """Logs before and after the remainder of the chain runs."""

    def process(self, context: PipelineContext, next_stage: NextStage) -> None:
        logger.info(f"Before processing (input: '{context.config.input_path}')")
        next_stage(context)
        logger.info(
            f"After processing ({len(context.results.documents)} documents)"
        )


def _terminal(context: PipelineContext) -> None:
    """The continuation after the last stage."""
    return None


def _bind(stage: BaseStage, next_stage: NextStage) -> NextStage:
    def invoke(context: PipelineContext) -> None:
        logger.debug(f"Entering stage '{stage.name}'")
        stage.process(context, next_stage)

    return invoke


class Pipeline:
    """
    An immutable, composed chain of stages.

    The same pipeline can be run any number of times, each time against its
    own context.
    """

    def __init__(self, stages: Tuple[BaseStage, ...]):
        self._stages = stages
        entry: NextStage = _terminal
        for stage in reversed(stages):
            entry = _bind(stage, entry)
        self._entry = entry

    @property
    def stages(self) -> Tuple[BaseStage, ...]:
        return self._stages

    def run(self, context: PipelineContext) -> PipelineContext:
        """Executes the chain against the given context and returns it."""
        self._entry(context)
        return context

    def __call__(self, context: PipelineContext) -> PipelineContext:
        return self.run(context)

    def __len__(self) -> int:
        return len(self._stages)


class PipelineBuilder:
    """Collects stages in call order and composes them into a `Pipeline`."""

    def __init__(self):
        self._stages: List[BaseStage] = []

    def use(self, stage: Union[BaseStage, StageFunction]) -> "PipelineBuilder":
        """
        Appends a stage to the chain.

        Args:
            stage: A `BaseStage` instance, or a function taking
                `(context, next_stage)`.

        Returns:
            PipelineBuilder: The builder, for chaining.

        Raises:
            TypeError: If `stage` is neither a stage nor a callable.
        """
        if isinstance(stage, BaseStage):
            self._stages.append(stage)
        elif callable(stage):
            self._stages.append(FunctionStage(stage))
        else:
            raise TypeError(f"Cannot use {stage!r} as a pipeline stage.")
        return self

    def build(self) -> Pipeline:
        """Builds a pipeline from the stages registered so far."""
        logger.debug(
            f"Building pipeline with stages: {[s.name for s in self._stages]}"
        )
        return Pipeline(tuple(self._stages))
