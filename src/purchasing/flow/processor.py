"""The processor contract shared by every business rule in a purchase flow."""

from typing import Protocol, runtime_checkable

from purchasing.flow.context import PurchaseContext
from purchasing.flow.result import ProcessResult


@runtime_checkable
class Processor(Protocol):
    """One business rule applied to an item holder during a phase.

    A processor may mutate ``holder``; it must never touch ``context.origin``.
    It reports a warning or an error by returning a ``ProcessResult`` or, for
    errors, by raising protean's ``ValidationError``. Raising ``FlowFault``
    aborts the rest of the phase.

    Running a processor again on a holder that has not changed since the last
    run must leave the holder as it was.
    """

    def process(self, holder, context: PurchaseContext) -> ProcessResult | None: ...


def processor_name(processor) -> str:
    return getattr(processor, "name", None) or type(processor).__name__
