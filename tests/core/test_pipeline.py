"""
Tests for the stage chain engine.
"""

import pytest
from unittest.mock import MagicMock

from docingest.core.pipeline import BaseStage, LoggingStage, PipelineBuilder


class RecordingStage(BaseStage):
    def __init__(self, label, calls, proceed=True):
        self.label = label
        self.calls = calls
        self.proceed = proceed

    def process(self, context, next_stage):
        self.calls.append(f"{self.label}:before")
        if self.proceed:
            next_stage(context)
        self.calls.append(f"{self.label}:after")


def test_stages_run_in_registration_order(make_context):
    """Tests that the first-registered stage runs first and wraps the rest."""
    calls = []
    pipeline = (
        PipelineBuilder()
        .use(RecordingStage("a", calls))
        .use(RecordingStage("b", calls))
        .use(RecordingStage("c", calls))
        .build()
    )

    pipeline.run(make_context())

    assert calls == ["a:before", "b:before", "c:before", "c:after", "b:after", "a:after"]


def test_stage_can_short_circuit(make_context):
    """Tests that a stage not calling next_stage stops the chain."""
    calls = []
    pipeline = (
        PipelineBuilder()
        .use(RecordingStage("a", calls))
        .use(RecordingStage("b", calls, proceed=False))
        .use(RecordingStage("c", calls))
        .build()
    )

    pipeline.run(make_context())

    assert "c:before" not in calls
    assert calls == ["a:before", "b:before", "b:after", "a:after"]


def test_function_stages_share_context(make_context):
    """Tests that plain functions can be used as stages and communicate via the context."""

    def first(context, next_stage):
        context.extras["step1"] = "value from step1"
        next_stage(context)

    def second(context, next_stage):
        context.extras["step2"] = context.extras["step1"].upper()
        next_stage(context)

    context = PipelineBuilder().use(first).use(second).build()(make_context())

    assert context.extras == {"step1": "value from step1", "step2": "VALUE FROM STEP1"}


def test_exception_aborts_remaining_stages(make_context):
    """Tests that an exception propagates to the caller and later stages never run."""
    calls = []

    def failing(context, next_stage):
        raise RuntimeError("boom")

    pipeline = (
        PipelineBuilder()
        .use(RecordingStage("a", calls))
        .use(failing)
        .use(RecordingStage("c", calls))
        .build()
    )

    with pytest.raises(RuntimeError, match="boom"):
        pipeline.run(make_context())

    assert calls == ["a:before"]


def test_built_pipeline_is_immutable_and_reusable(make_context):
    """Tests that later builder calls don't change a built pipeline and that it runs many times."""
    stage = MagicMock(spec=BaseStage)
    stage.name = "mock"
    stage.process.side_effect = lambda context, next_stage: next_stage(context)

    builder = PipelineBuilder().use(stage)
    pipeline = builder.build()
    builder.use(RecordingStage("late", []))

    first, second = make_context(), make_context()
    pipeline.run(first)
    pipeline.run(second)

    assert len(pipeline) == 1
    assert stage.process.call_count == 2
    assert stage.process.call_args_list[0].args[0] is first
    assert stage.process.call_args_list[1].args[0] is second
    assert first.results is not second.results


def test_empty_pipeline_is_a_no_op(make_context):
    context = make_context()
    assert PipelineBuilder().build().run(context) is context


def test_use_rejects_non_callables():
    with pytest.raises(TypeError):
        PipelineBuilder().use("not a stage")


def test_logging_stage_continues_chain(make_context):
    calls = []
    pipeline = PipelineBuilder().use(LoggingStage()).use(RecordingStage("a", calls)).build()

    pipeline.run(make_context())

    assert calls == ["a:before", "a:after"]
