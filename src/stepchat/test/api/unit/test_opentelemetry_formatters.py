from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.trace import Status, StatusCode

from stepchat.api.infrastructure.util.opentelemetry import format_span_line


def _span(attributes: dict) -> ReadableSpan:
    return ReadableSpan(
        name="execute_step",
        start_time=1_000_000_000,
        end_time=1_250_000_000,
        attributes=attributes,
        status=Status(StatusCode.OK),
    )


def test_span_line_carries_step_attributes() -> None:
    line = format_span_line(_span({"step.position": 1, "step.kind": "translate", "other": "ignored"}))

    assert line.startswith("::SPN:: [")
    assert "(execute_step) OK 250ms step.position=1 step.kind=translate\n" in line
    assert "ignored" not in line


def test_span_line_without_known_attributes() -> None:
    assert format_span_line(_span({})).endswith("(execute_step) OK 250ms\n")
