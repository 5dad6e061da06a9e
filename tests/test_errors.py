# Area: Shared Tests
"""Tests for the exception hierarchy."""

from server_warden.errors import (
    MessageNotFoundError,
    NotificationError,
    SupervisorError,
    WardenError,
)


class TestErrors:
    """Tests for error messages and hierarchy."""

    def test_hierarchy(self):
        assert issubclass(SupervisorError, WardenError)
        assert issubclass(NotificationError, WardenError)
        assert issubclass(MessageNotFoundError, NotificationError)

    def test_supervisor_error_with_returncode(self):
        err = SupervisorError("stop", "./sdtdserver", returncode=2)
        assert str(err) == "'./sdtdserver stop' exited with status 2"

    def test_supervisor_error_with_reason(self):
        err = SupervisorError("start", "./sdtdserver", reason="timed out after 180s")
        assert str(err) == "'./sdtdserver start' failed: timed out after 180s"
        assert "Reason:" in err.format_error_log()

    def test_notification_error_message(self):
        err = NotificationError("create_message", "Missing Access", status_code=403)
        assert str(err) == "create_message failed with HTTP 403: Missing Access"

    def test_message_not_found(self):
        err = MessageNotFoundError("123")
        assert err.status_code == 404
        assert err.operation == "edit_message"
        assert "123" in str(err)
