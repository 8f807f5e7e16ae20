"""Ordered, user-editable sequence of transformation steps."""

from typing import Any, Iterable, Iterator, Sequence

from pydantic import TypeAdapter, ValidationError

from stepchat.core.errors import ValidationFailure
from stepchat.core.models import Step, StepKind

_STEPS = TypeAdapter(list[Step])


class Pipeline:
    """Mutable step list with identity-stable edits.

    Indices passed to `move_up` / `move_down` are positions in the current
    order; `remove` works on step ids.
    """

    def __init__(self, steps: Iterable[Step] = ()) -> None:
        self._steps: list[Step] = []
        seen: set[str] = set()
        for step in steps:
            if step.id in seen:
                raise ValidationFailure(f"Duplicate step id: {step.id}")
            seen.add(step.id)
            self._steps.append(step)

    @classmethod
    def from_steps(cls, steps: Iterable[Step]) -> "Pipeline":
        return cls(steps)

    @classmethod
    def from_transport_form(cls, payload: str | bytes | Sequence[Any]) -> "Pipeline":
        try:
            if isinstance(payload, (str, bytes, bytearray)):
                steps = _STEPS.validate_json(payload)
            else:
                steps = _STEPS.validate_python(payload)
        except ValidationError as exc:
            raise ValidationFailure(f"Invalid pipeline payload ({exc.error_count()} errors)") from exc
        return cls(steps)

    def to_transport_form(self) -> str:
        return _STEPS.dump_json(self._steps, exclude_none=True).decode()

    def to_payload(self) -> list[dict[str, Any]]:
        return _STEPS.dump_python(self._steps, mode="json", exclude_none=True)

    @property
    def steps(self) -> tuple[Step, ...]:
        return tuple(self._steps)

    def append(self, kind: StepKind | str, parameter: str | None = None) -> Step:
        try:
            step = Step(kind=kind, parameter=parameter)  # type: ignore[arg-type]
        except ValidationError as exc:
            raise ValidationFailure(f"Unknown step kind: {kind!r}") from exc
        self._steps.append(step)
        return step

    def remove(self, step_id: str) -> None:
        self._steps = [step for step in self._steps if step.id != step_id]

    def move_up(self, index: int) -> None:
        if 0 < index < len(self._steps):
            self._swap(index - 1, index)

    def move_down(self, index: int) -> None:
        if 0 <= index < len(self._steps) - 1:
            self._swap(index, index + 1)

    def clear(self) -> None:
        self._steps.clear()

    def _swap(self, first: int, second: int) -> None:
        self._steps[first], self._steps[second] = self._steps[second], self._steps[first]

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[Step]:
        return iter(self._steps)

    def __getitem__(self, index: int) -> Step:
        return self._steps[index]

    def __bool__(self) -> bool:
        return bool(self._steps)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pipeline):
            return NotImplemented
        return self._steps == other._steps

    def __repr__(self) -> str:
        return f"Pipeline({self._steps!r})"
