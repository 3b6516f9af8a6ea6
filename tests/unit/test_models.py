"""Unit tests for outcome models, enums and exceptions."""
from asyncrun.core.enums import OutcomeStatus, RunMode
from asyncrun.core.exceptions import AsyncrunException, OperationTimeoutError
from asyncrun.models import BatchOutcome, Outcome, classify


class TestOperationTimeoutError:
    """Tests for the synthesized timeout error."""

    def test_message(self):
        """Test the timeout error message."""
        assert str(OperationTimeoutError()) == "operation timed out"
        assert str(OperationTimeoutError(1.5)) == "operation timed out"

    def test_hierarchy(self):
        """Test the error can be caught as library or builtin timeout."""
        error = OperationTimeoutError(2.0)

        assert isinstance(error, AsyncrunException)
        assert isinstance(error, TimeoutError)
        assert error.timeout == 2.0


class TestOutcome:
    """Tests for single-unit outcomes."""

    def test_unpacks_as_pair(self):
        """Test an outcome unpacks as value, error."""
        value, error = Outcome("ok", None)

        assert value == "ok"
        assert error is None

    def test_success(self):
        outcome = Outcome("ok")

        assert outcome.ok is True
        assert outcome.timed_out is False
        assert outcome.status == OutcomeStatus.SUCCESS

    def test_failure(self):
        outcome = Outcome(None, ValueError("bad"))

        assert outcome.ok is False
        assert outcome.timed_out is False
        assert outcome.status == OutcomeStatus.FAILED

    def test_timeout(self):
        outcome = Outcome(None, OperationTimeoutError())

        assert outcome.timed_out is True
        assert outcome.status == OutcomeStatus.TIMED_OUT


class TestBatchOutcome:
    """Tests for multi-unit outcomes."""

    def test_unpacks_as_sequences(self):
        """Test a batch outcome unpacks as values, errors."""
        error = ValueError("bad")
        values, errors = BatchOutcome(["a", None], [None, error])

        assert values == ["a", None]
        assert errors == [None, error]

    def test_outcomes_and_statuses(self):
        """Test per-slot views keep input order."""
        batch = BatchOutcome(
            ["a", None, None],
            [None, ValueError("bad"), OperationTimeoutError()],
        )

        assert [o.value for o in batch.outcomes()] == ["a", None, None]
        assert batch.statuses() == [
            OutcomeStatus.SUCCESS,
            OutcomeStatus.FAILED,
            OutcomeStatus.TIMED_OUT,
        ]
        assert batch.all_ok is False

    def test_all_ok(self):
        assert BatchOutcome([1, 2], [None, None]).all_ok is True
        assert BatchOutcome([], []).all_ok is True


class TestEnums:
    """Tests for enum string values."""

    def test_outcome_status_str(self):
        assert str(OutcomeStatus.TIMED_OUT) == "timed_out"
        assert classify(None) == OutcomeStatus.SUCCESS

    def test_run_mode_str(self):
        assert str(RunMode.SINGLE) == "single"
        assert str(RunMode.BATCH) == "batch"
