"""Failures that are not ordinary validation errors."""

from protean.exceptions import ProteanException


class FlowFault(ProteanException):
    """A processor could not proceed; the remaining processors of the phase were skipped.

    ``result`` holds whatever the phase had accumulated before the fault.
    """

    def __init__(self, message, phase=None, processor=None, result=None, **kwargs):
        super().__init__(message, **kwargs)
        self.phase = phase
        self.processor = processor
        self.result = result


class ConcurrencyConflict(ProteanException):
    """The aggregate was changed by someone else since it was loaded."""

    def __init__(self, message, aggregate_id=None, expected_revision=None, actual_revision=None, **kwargs):
        super().__init__(message, **kwargs)
        self.aggregate_id = aggregate_id
        self.expected_revision = expected_revision
        self.actual_revision = actual_revision
