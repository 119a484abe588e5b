"""Tests for the terminal studio app."""

from unittest.mock import MagicMock

from j2j_studio.core.types import BufferStatus, StatusLevel
from j2j_studio.session.editor import Editor


class TestTextAreaEditor:
    """Tests for TextAreaEditor."""

    def test_reads_and_writes_widget(self):
        """Test value access goes through the wrapped widget."""
        from j2j_studio.tui.app import TextAreaEditor

        text_area = MagicMock()
        text_area.text = '{"a": 1}'
        editor = TextAreaEditor(text_area)

        assert editor.get_value() == '{"a": 1}'
        editor.set_value("[]")
        text_area.load_text.assert_called_once_with("[]")
        assert editor.widget is text_area

    def test_read_only_passthrough(self):
        from j2j_studio.tui.app import TextAreaEditor

        text_area = MagicMock()
        text_area.read_only = False
        editor = TextAreaEditor(text_area)

        editor.read_only = True

        assert text_area.read_only is True
        assert editor.read_only is True

    def test_changed_notifies_callbacks(self):
        """Test change callbacks receive the widget text."""
        from j2j_studio.tui.app import TextAreaEditor

        text_area = MagicMock()
        text_area.text = "{}"
        editor = TextAreaEditor(text_area)
        seen: list[str] = []
        editor.on_change(seen.append)

        editor.changed()

        assert seen == ["{}"]

    def test_satisfies_editor_protocol(self):
        from j2j_studio.tui.app import TextAreaEditor

        assert isinstance(TextAreaEditor(MagicMock()), Editor)


class TestFormatStatus:
    """Tests for status line formatting."""

    def test_valid_hides_detail(self):
        """Test that a valid status shows only its label."""
        from j2j_studio.tui.app import format_status

        line = format_status(BufferStatus(label="Success", level=StatusLevel.VALID, detail="done"))

        assert "Success" in line.plain
        assert "done" not in line.plain

    def test_error_shows_detail(self):
        """Test that an error status includes its detail."""
        from j2j_studio.tui.app import format_status

        line = format_status(BufferStatus.error("Validation Error", "Error validating JSON: timeout"))

        assert "Validation Error" in line.plain
        assert "Error validating JSON: timeout" in line.plain

    def test_pending(self):
        from j2j_studio.tui.app import format_status

        assert "Validating..." in format_status(BufferStatus.validating()).plain


class TestStudioApp:
    """Tests for StudioApp."""

    def test_app_creation(self):
        """Test app creation around a session."""
        from j2j_studio.tui.app import StudioApp

        session = MagicMock()
        app = StudioApp(session)

        assert app.session is session
        assert app.TITLE == "J2J Transform Studio"

    def test_bindings(self):
        """Test keyboard bindings."""
        from j2j_studio.tui.app import StudioApp

        actions = {binding.action for binding in StudioApp.BINDINGS}
        assert {"transform", "toggle_view", "format", "quit"} <= actions


class TestFormatNotice:
    """Tests for the inline notice line."""

    def test_warning_notice(self):
        """Test a precondition warning renders with its message."""
        from j2j_studio.session.events import NoticeLevel, StudioEvent
        from j2j_studio.tui.app import format_notice

        line = format_notice(StudioEvent.notice("Please provide input JSON data", NoticeLevel.WARNING))

        assert line.plain == "Please provide input JSON data"
        assert str(line.style) == "yellow"
