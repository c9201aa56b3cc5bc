"""Purchase flow: runs ordered processors against an item holder, phase by phase.

Phases run in the order validate, prepare, commit. Inside a phase every
processor runs in its declared order, even after an earlier one reported an
error, so the caller sees every problem at once. A ``FlowFault`` is the only
thing that stops a phase early.

The flow never persists anything; committing the holder is the caller's job
once it has looked at the result.
"""

from collections.abc import Mapping, Sequence

import structlog
from protean.exceptions import ValidationError

from purchasing.flow.context import PurchaseContext
from purchasing.flow.exceptions import FlowFault
from purchasing.flow.processor import Processor, processor_name
from purchasing.flow.result import ProcessingResult, ResultAccumulator

logger = structlog.get_logger(__name__)

VALIDATE = "validate"
PREPARE = "prepare"
COMMIT = "commit"
PHASES = (VALIDATE, PREPARE, COMMIT)


class PurchaseFlow:
    def __init__(self, name: str, phases: Mapping[str, Sequence[Processor]]) -> None:
        unknown = set(phases) - set(PHASES)
        if unknown:
            raise ValueError(f"Unknown phases for flow {name}: {sorted(unknown)}")

        self.name = name
        self._phases = {phase: tuple(phases.get(phase, ())) for phase in PHASES}

    def processors(self, phase: str) -> tuple[Processor, ...]:
        return self._phases[phase]

    def run(self, phase: str, holder, context: PurchaseContext) -> ProcessingResult:
        """Run every processor registered for ``phase`` and collect what they report."""
        if phase not in self._phases:
            raise ValueError(f"Unknown phase: {phase}")

        processors = self.processors(phase)
        log = logger.bind(
            flow=self.name,
            phase=phase,
            holder_id=str(holder.id),
            flow_type=context.flow_type.value,
            channel=context.channel.value,
            customer_id=context.customer_id,
        )
        log.debug("Purchase flow phase started", processors=len(processors))

        accumulator = ResultAccumulator(phase)
        for processor in processors:
            name = processor_name(processor)
            accumulator.mark_executed(name)
            try:
                outcome = processor.process(holder, context)
            except ValidationError as exc:
                log.info("Processor rejected holder", processor=name, messages=exc.messages)
                accumulator.record_validation_error(name, exc)
                continue
            except FlowFault as fault:
                fault.phase = fault.phase or phase
                fault.processor = fault.processor or name
                fault.result = accumulator.result()
                log.exception("Purchase flow aborted", processor=name)
                raise
            except Exception as exc:
                log.exception("Processor failed unexpectedly", processor=name)
                raise FlowFault(
                    f"{name} failed during {phase}: {exc}",
                    phase=phase,
                    processor=name,
                    result=accumulator.result(),
                ) from exc

            if outcome is not None:
                log.info(
                    "Processor reported",
                    processor=name,
                    level=outcome.level.value,
                    messages=list(outcome.messages),
                )
            accumulator.record(name, outcome)

        result = accumulator.result()
        log.debug(
            "Purchase flow phase finished",
            success=result.success,
            errors=len(result.errors),
            warnings=len(result.warnings),
        )
        return result

    def validate(self, holder, context: PurchaseContext) -> ProcessingResult:
        return self.run(VALIDATE, holder, context)

    def prepare(self, holder, context: PurchaseContext) -> ProcessingResult:
        return self.run(PREPARE, holder, context)

    def commit(self, holder, context: PurchaseContext) -> ProcessingResult:
        return self.run(COMMIT, holder, context)

    def execute(self, holder, context: PurchaseContext, phases: Sequence[str] = PHASES) -> ProcessingResult:
        """Run ``phases`` one after another, stopping after the first phase that reports errors.

        The returned result is named after the last phase that ran and carries
        the warnings of every phase that ran.
        """
        results = []
        for phase in phases:
            result = self.run(phase, holder, context)
            results.append(result)
            if not result.success:
                break

        return ProcessingResult(
            phase=results[-1].phase if results else "",
            errors=tuple(error for result in results for error in result.errors),
            warnings=tuple(warning for result in results for warning in result.warnings),
            executed=tuple(name for result in results for name in result.executed),
        )
