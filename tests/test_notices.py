# Area: Shared Tests
"""Tests for NoticeBoard."""

from unittest.mock import Mock

from quiz_sync._shared.notices import NoticeBoard
from quiz_sync.errors import NetworkError
from quiz_sync.types import Notice


class TestNoticeBoard:

    def test_handler_receives_notices(self):
        handler = Mock()
        board = NoticeBoard(handler)
        board.success("Game started", "start_session")
        handler.assert_called_once_with(Notice("success", "Game started", "start_session"))

    def test_failure_carries_error_context(self):
        board = NoticeBoard()
        board.failure("Score submission failed", NetworkError("submit_score", "0x01", "down"))
        notice = board.recent[0]
        assert notice.level == "error"
        assert notice.operation == "submit_score"
        assert notice.details == {"error_type": "NETWORK_ERROR", "session_id": "0x01"}

    def test_capacity_bounded(self):
        board = NoticeBoard(capacity=3)
        for i in range(5):
            board.info(f"n{i}")
        assert [n.message for n in board.recent] == ["n2", "n3", "n4"]

    def test_handler_errors_do_not_propagate(self):
        board = NoticeBoard(Mock(side_effect=RuntimeError("ui gone")))
        board.info("still recorded")
        assert board.recent[0].message == "still recorded"
