# Area: Shared Tests
"""Tests for the ledger error hierarchy and its log blocks."""

from quiz_sync.errors import (
    LedgerError,
    LedgerRejectedError,
    LedgerTimeoutError,
    MalformedDataError,
    NetworkError,
    NotFoundError,
    QuizSyncError,
)


class TestHierarchy:

    def test_all_are_ledger_errors(self):
        for cls in (NetworkError, LedgerTimeoutError, NotFoundError,
                    MalformedDataError, LedgerRejectedError):
            assert issubclass(cls, LedgerError)
        assert issubclass(LedgerError, QuizSyncError)

    def test_timeout_is_network_error(self):
        assert issubclass(LedgerTimeoutError, NetworkError)

    def test_message_names_operation(self):
        error = LedgerRejectedError("finalize", "0x01", "only the host can finalize")
        assert str(error) == "Ledger finalize failed: only the host can finalize"
        assert error.error_type == "LEDGER_REJECTED"


class TestFormatErrorLog:
    """Tests for format_error_log()."""

    def test_block_contains_context(self):
        error = NetworkError("submit_score", "0x01", "reset", {"score": 640})
        block = error.format_error_log()
        assert "NETWORK_ERROR" in block
        assert "submit_score" in block
        assert "0x01" in block
        assert '"score": 640' in block

    def test_missing_session_shows_dash(self):
        block = NotFoundError("read_score_entry", None, "no entry").format_error_log()
        assert "Session:      -" in block

    def test_timeout_mentions_seconds(self):
        error = LedgerTimeoutError("read_session", "0x01", 10.0)
        assert "10.0 seconds" in error.format_error_log()

    def test_malformed_lists_validation_errors(self):
        error = MalformedDataError("read_session", "0x01", ["host: Field required"], {"x": 1})
        block = error.format_error_log()
        assert "VALIDATION ERRORS" in block
        assert "host: Field required" in block
        assert "raw_payload" in block
