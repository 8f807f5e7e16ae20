import json

import pytest

from stepchat.core.errors import ValidationFailure
from stepchat.core.models import Step, StepKind
from stepchat.core.pipeline import Pipeline


def _kinds(pipeline: Pipeline) -> list[StepKind]:
    return [step.kind for step in pipeline]


def test_append_keeps_order_and_assigns_unique_ids() -> None:
    pipeline = Pipeline()
    first = pipeline.append(StepKind.REWRITE, "formal")
    second = pipeline.append("translate", "French")
    third = pipeline.append(StepKind.SUMMARIZE)

    assert _kinds(pipeline) == [StepKind.REWRITE, StepKind.TRANSLATE, StepKind.SUMMARIZE]
    assert len({first.id, second.id, third.id}) == 3
    assert pipeline[1].parameter == "French"


def test_append_unknown_kind_is_rejected() -> None:
    pipeline = Pipeline()
    with pytest.raises(ValidationFailure):
        pipeline.append("dance")
    assert len(pipeline) == 0


def test_remove_by_id() -> None:
    pipeline = Pipeline()
    keep = pipeline.append(StepKind.SUMMARIZE)
    drop = pipeline.append(StepKind.EXTRACT)

    pipeline.remove(drop.id)
    assert pipeline.steps == (keep,)

    pipeline.remove("missing")
    assert pipeline.steps == (keep,)


def test_move_up_and_down_swap_neighbours() -> None:
    pipeline = Pipeline()
    a = pipeline.append(StepKind.SUMMARIZE)
    b = pipeline.append(StepKind.TRANSLATE)
    c = pipeline.append(StepKind.EXTRACT)

    pipeline.move_up(2)
    assert pipeline.steps == (a, c, b)

    pipeline.move_down(0)
    assert pipeline.steps == (c, a, b)


def test_moves_at_the_boundaries_are_no_ops() -> None:
    pipeline = Pipeline()
    a = pipeline.append(StepKind.SUMMARIZE)
    b = pipeline.append(StepKind.TRANSLATE)

    pipeline.move_up(0)
    pipeline.move_down(1)
    pipeline.move_up(5)
    pipeline.move_down(-1)
    assert pipeline.steps == (a, b)


def test_clear() -> None:
    pipeline = Pipeline()
    pipeline.append(StepKind.SUMMARIZE)
    pipeline.clear()
    assert len(pipeline) == 0
    assert not pipeline


def test_transport_form_round_trip() -> None:
    pipeline = Pipeline()
    pipeline.append(StepKind.REWRITE, "formal")
    pipeline.append(StepKind.TRANSLATE, "French")
    pipeline.append(StepKind.SUMMARIZE)

    restored = Pipeline.from_transport_form(pipeline.to_transport_form())
    assert restored == pipeline
    assert Pipeline.from_transport_form(pipeline.to_payload()) == pipeline


def test_transport_form_omits_missing_parameter() -> None:
    pipeline = Pipeline([Step(id="a", kind=StepKind.SUMMARIZE)])
    assert json.loads(pipeline.to_transport_form()) == [{"id": "a", "kind": "summarize"}]


def test_transport_form_accepts_type_and_param_names() -> None:
    pipeline = Pipeline.from_transport_form('[{"id": "s1", "type": "translate", "param": "French"}]')
    assert pipeline[0] == Step(id="s1", kind=StepKind.TRANSLATE, parameter="French")


def test_transport_form_generates_missing_ids() -> None:
    pipeline = Pipeline.from_transport_form([{"kind": "summarize"}, {"kind": "extract"}])
    assert all(step.id for step in pipeline)
    assert pipeline[0].id != pipeline[1].id


@pytest.mark.parametrize(
    "payload",
    [
        "not json",
        '{"kind": "summarize"}',
        '[{"kind": "dance"}]',
        '[{"id": "x", "kind": "summarize"}, {"id": "x", "kind": "extract"}]',
    ],
)
def test_invalid_transport_form_is_rejected(payload: str) -> None:
    with pytest.raises(ValidationFailure):
        Pipeline.from_transport_form(payload)
