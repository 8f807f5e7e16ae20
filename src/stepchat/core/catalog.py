"""Natural-language rendering of pipeline steps."""

from typing import Iterable

from stepchat.core.models import Step, StepKind

INSTRUCTION_TEMPLATES: dict[StepKind, str] = {
    StepKind.SUMMARIZE: "Summarize the following:\n\n{input_text}",
    StepKind.TRANSLATE: "Translate this to {parameter}:\n\n{input_text}",
    StepKind.REWRITE: "Rewrite this to sound more {parameter}:\n\n{input_text}",
    StepKind.EXTRACT: "Extract key entities:\n\n{input_text}",
}

# Applied at render time only, never written back into the step.
DEFAULT_PARAMETERS: dict[StepKind, str] = {
    StepKind.TRANSLATE: "English",
    StepKind.REWRITE: "casual",
}

PIPELINE_LABEL_SEPARATOR = " → "


def render_instruction(step: Step, input_text: str) -> str:
    template = INSTRUCTION_TEMPLATES.get(step.kind)
    if template is None:
        return input_text
    parameter = step.parameter or DEFAULT_PARAMETERS.get(step.kind, "")
    return template.format(parameter=parameter, input_text=input_text)


def format_label(step: Step) -> str:
    label = step.kind.value.capitalize()
    if step.parameter:
        return f"{label} ({step.parameter})"
    return label


def format_pipeline_label(steps: Iterable[Step] | None) -> str:
    if not steps:
        return ""
    return PIPELINE_LABEL_SEPARATOR.join(format_label(step) for step in steps)
