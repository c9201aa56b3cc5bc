"""Outcomes of running processors.

A processor reports through a ``ProcessResult`` (or by raising protean's
``ValidationError``). The flow folds those into a ``ResultAccumulator`` and
hands the caller an immutable view of it, a ``ProcessingResult``.
"""

from dataclasses import dataclass, field
from enum import Enum

from protean.exceptions import ValidationError

REJECTED = "rejected"


class Level(Enum):
    WARNING = "Warning"
    ERROR = "Error"


@dataclass(frozen=True)
class ProcessResult:
    level: Level
    messages: tuple[str, ...]

    @classmethod
    def warn(cls, *messages: str) -> "ProcessResult":
        return cls(level=Level.WARNING, messages=messages)

    @classmethod
    def error(cls, *messages: str) -> "ProcessResult":
        return cls(level=Level.ERROR, messages=messages)

    @property
    def is_error(self) -> bool:
        return self.level is Level.ERROR


@dataclass(frozen=True)
class ProcessingMessage:
    processor: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class ProcessingResult:
    phase: str
    errors: tuple[ProcessingMessage, ...] = ()
    warnings: tuple[ProcessingMessage, ...] = ()
    executed: tuple[str, ...] = ()

    @property
    def success(self) -> bool:
        return not self.errors

    def error_messages(self) -> dict[str, list[str]]:
        """Errors keyed the way protean's ``ValidationError`` expects them."""
        messages: dict[str, list[str]] = {}
        for error in self.errors:
            messages.setdefault(error.field or error.processor, []).append(error.message)
        return messages


class ResultAccumulator:
    """Collects warnings and errors for a single phase run."""

    def __init__(self, phase: str) -> None:
        self.phase = phase
        self._errors: list[ProcessingMessage] = []
        self._warnings: list[ProcessingMessage] = []
        self._executed: list[str] = []

    @property
    def has_errors(self) -> bool:
        return bool(self._errors)

    def mark_executed(self, processor: str) -> None:
        self._executed.append(processor)

    def add_error(self, processor: str, message: str, field: str | None = None) -> None:
        self._errors.append(ProcessingMessage(processor=processor, message=message, field=field))

    def add_warning(self, processor: str, message: str, field: str | None = None) -> None:
        self._warnings.append(ProcessingMessage(processor=processor, message=message, field=field))

    def record(self, processor: str, outcome: ProcessResult | None) -> None:
        if outcome is None:
            return
        add = self.add_error if outcome.is_error else self.add_warning
        for message in outcome.messages:
            add(processor, message)
        if outcome.is_error and not outcome.messages:
            self.add_error(processor, REJECTED)

    def record_validation_error(self, processor: str, exc: ValidationError) -> None:
        """Record every message of ``exc``; a rejection without messages still counts as one error."""
        recorded = len(self._errors)
        messages = exc.messages
        if isinstance(messages, dict):
            for key, values in messages.items():
                for value in values if isinstance(values, (list, tuple)) else [values]:
                    self.add_error(processor, str(value), field=key)
        elif isinstance(messages, (list, tuple)):
            for value in messages:
                self.add_error(processor, str(value))
        elif messages:
            self.add_error(processor, str(messages))

        if len(self._errors) == recorded:
            self.add_error(processor, REJECTED)

    def result(self) -> ProcessingResult:
        return ProcessingResult(
            phase=self.phase,
            errors=tuple(self._errors),
            warnings=tuple(self._warnings),
            executed=tuple(self._executed),
        )
