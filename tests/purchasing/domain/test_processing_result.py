"""Tests for ProcessResult and the phase accumulator."""

from protean.exceptions import ValidationError
from purchasing.flow.result import Level, ProcessResult, ResultAccumulator


class TestProcessResult:
    def test_warn(self):
        outcome = ProcessResult.warn("Price changed")

        assert outcome.level == Level.WARNING
        assert outcome.is_error is False
        assert outcome.messages == ("Price changed",)

    def test_error(self):
        outcome = ProcessResult.error("Sold out", "Hidden")

        assert outcome.is_error is True
        assert outcome.messages == ("Sold out", "Hidden")


class TestResultAccumulator:
    def test_starts_clean(self):
        result = ResultAccumulator("validate").result()

        assert result.success is True
        assert result.errors == ()
        assert result.warnings == ()

    def test_none_outcome_records_nothing(self):
        accumulator = ResultAccumulator("validate")
        accumulator.record("stock", None)

        assert accumulator.has_errors is False

    def test_dict_messages_keep_their_field(self):
        accumulator = ResultAccumulator("validate")
        accumulator.record_validation_error("stock", ValidationError({"stock": ["Only 1 left", "Only 2 left"]}))

        result = accumulator.result()
        assert [(e.field, e.message) for e in result.errors] == [("stock", "Only 1 left"), ("stock", "Only 2 left")]
        assert result.error_messages() == {"stock": ["Only 1 left", "Only 2 left"]}

    def test_plain_messages_are_keyed_by_processor(self):
        accumulator = ResultAccumulator("validate")
        accumulator.record_validation_error("limit", ValidationError(["Too many"]))
        accumulator.record("empty", ProcessResult.error("Nothing to buy"))

        assert accumulator.result().error_messages() == {"limit": ["Too many"], "empty": ["Nothing to buy"]}

    def test_warnings_do_not_fail_the_phase(self):
        accumulator = ResultAccumulator("validate")
        accumulator.record("pricing", ProcessResult.warn("Price changed"))

        result = accumulator.result()
        assert result.success is True
        assert result.warnings[0].processor == "pricing"

    def test_empty_error_outcome_counts_as_one_error(self):
        accumulator = ResultAccumulator("validate")
        accumulator.record("limit", ProcessResult.error())

        assert accumulator.result().error_messages() == {"limit": ["rejected"]}

    def test_empty_validation_error_counts_as_one_error(self):
        accumulator = ResultAccumulator("validate")
        accumulator.record_validation_error("stock", ValidationError({"stock": []}))

        assert accumulator.has_errors is True
        assert accumulator.result().error_messages() == {"stock": ["rejected"]}
