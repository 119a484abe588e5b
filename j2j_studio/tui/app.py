"""Terminal studio: three editors, status lines and a tree view."""

from __future__ import annotations

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import Button, Footer, Header, Label, Static, Switch, TextArea

from j2j_studio.core.types import BufferKind, BufferStatus, StatusLevel
from j2j_studio.session.editor import ChangeCallback
from j2j_studio.session.events import NoticeLevel, StudioEvent, StudioEventType
from j2j_studio.session.studio import StudioSession

_LEVEL_STYLES = {
    StatusLevel.VALID: "green",
    StatusLevel.WARNING: "yellow",
    StatusLevel.ERROR: "red",
    StatusLevel.PENDING: "dim",
}

_LEVEL_ICONS = {
    StatusLevel.VALID: "✔",
    StatusLevel.WARNING: "⚠",
    StatusLevel.ERROR: "✖",
    StatusLevel.PENDING: "…",
}

_NOTICE_STYLES = {
    NoticeLevel.INFO: "dim",
    NoticeLevel.SUCCESS: "green",
    NoticeLevel.WARNING: "yellow",
    NoticeLevel.ERROR: "red",
}


class TextAreaEditor:
    """Adapts a Textual TextArea to the session's editor contract.

    TextArea reports edits as messages on the app, so the app forwards
    them through :meth:`changed`.
    """

    def __init__(self, text_area: TextArea) -> None:
        self._text_area = text_area
        self._callbacks: list[ChangeCallback] = []

    @property
    def widget(self) -> TextArea:
        return self._text_area

    @property
    def read_only(self) -> bool:
        return self._text_area.read_only

    @read_only.setter
    def read_only(self, value: bool) -> None:
        self._text_area.read_only = value

    def get_value(self) -> str:
        return self._text_area.text

    def set_value(self, text: str) -> None:
        self._text_area.load_text(text)

    def on_change(self, callback: ChangeCallback) -> None:
        self._callbacks.append(callback)

    def changed(self) -> None:
        text = self._text_area.text
        for callback in list(self._callbacks):
            callback(text)


def format_status(status: BufferStatus) -> Text:
    """Status line text for a buffer."""
    style = _LEVEL_STYLES[status.level]
    line = Text(f"{_LEVEL_ICONS[status.level]} {status.label}", style=style)
    if status.detail and status.level is not StatusLevel.VALID:
        line.append(f"  {status.detail}", style="dim")
    return line


def format_notice(event: StudioEvent) -> Text:
    """Inline text for the most recent session notice."""
    level = event.level or NoticeLevel.INFO
    return Text(event.message or "", style=_NOTICE_STYLES[level])


class StudioApp(App):
    """Terminal front end for a studio session."""

    TITLE = "J2J Transform Studio"
    BINDINGS = [
        Binding("ctrl+t", "transform", "Transform", show=True),
        Binding("ctrl+v", "toggle_view", "Tree/Raw", show=True),
        Binding("ctrl+f", "format", "Format", show=True),
        Binding("ctrl+q", "quit", "Quit", show=True),
    ]

    CSS = """
    #editors {
        height: 1fr;
    }

    .pane {
        width: 1fr;
        padding: 0 1;
    }

    .pane-title {
        text-style: bold;
    }

    .pane TextArea {
        height: 1fr;
    }

    .status {
        height: auto;
    }

    .pane-actions {
        height: auto;
    }

    .pane-actions Button {
        min-width: 10;
        margin-right: 1;
    }

    #toolbar {
        height: auto;
        padding: 0 1;
    }

    #toolbar Button {
        margin-right: 1;
    }

    #auto-label {
        padding: 1 1 0 2;
    }

    #metrics {
        padding: 1 2 0 2;
        color: $text-muted;
    }

    #notice {
        padding: 1 2 0 0;
        width: 1fr;
    }

    #tree-view {
        height: 1fr;
    }

    .hidden {
        display: none;
    }
    """

    def __init__(self, session: StudioSession) -> None:
        """Initialize the application.

        Args:
            session: Session the app drives. The app closes it on exit.
        """
        super().__init__()
        self._session = session
        self._editors: dict[BufferKind, TextAreaEditor] = {}
        self._tree_visible = False

    @property
    def session(self) -> StudioSession:
        return self._session

    def compose(self) -> ComposeResult:
        """Create child widgets."""
        yield Header()
        with Horizontal(id="toolbar"):
            yield Button("Transform", id="btn-transform", variant="primary")
            yield Button("Tree view", id="btn-view", variant="default")
            yield Label("Auto-transform", id="auto-label")
            yield Switch(value=self._session.store.auto_transform_armed, id="auto-transform")
            yield Static("", id="metrics")
            yield Static("", id="notice")
        with Horizontal(id="editors"):
            with Vertical(classes="pane"):
                yield Label("Input JSON", classes="pane-title")
                yield TextArea(id="input-editor")
                with Horizontal(classes="pane-actions"):
                    yield Button("Format", id="btn-format-input")
                    yield Button("Clear", id="btn-clear-input")
                yield Static("", id="input-status", classes="status")
            with Vertical(classes="pane"):
                yield Label("Specification", classes="pane-title")
                yield TextArea(id="spec-editor")
                with Horizontal(classes="pane-actions"):
                    yield Button("Format", id="btn-format-spec")
                    yield Button("Clear", id="btn-clear-spec")
                yield Static("", id="spec-status", classes="status")
            with Vertical(classes="pane"):
                yield Label("Output", classes="pane-title")
                yield TextArea(id="output-editor", read_only=True)
                with VerticalScroll(id="tree-view", classes="hidden"):
                    yield Static("", id="tree-content")
                yield Static("", id="output-status", classes="status")
        yield Footer()

    def on_mount(self) -> None:
        """Bind editors and view handlers to the session."""
        bus = self._session.bus
        bus.register(StudioEventType.STATE_CHANGED, self._on_state_changed)
        bus.register(StudioEventType.NOTICE, self._on_notice)

        for kind, widget_id in (
            (BufferKind.INPUT, "#input-editor"),
            (BufferKind.SPEC, "#spec-editor"),
            (BufferKind.OUTPUT, "#output-editor"),
        ):
            editor = TextAreaEditor(self.query_one(widget_id, TextArea))
            self._editors[kind] = editor
            self._session.attach_editor(kind, editor)

        self._refresh_status()
        self.query_one("#input-editor", TextArea).focus()

    async def on_unmount(self) -> None:
        await self._session.close()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        """Forward editor edits to the session."""
        for kind, editor in self._editors.items():
            if kind is not BufferKind.OUTPUT and editor.widget is event.text_area:
                editor.changed()

    def on_switch_changed(self, event: Switch.Changed) -> None:
        if event.switch.id == "auto-transform":
            self.run_worker(self._session.set_auto_transform(event.value))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        button_id = event.button.id
        if button_id == "btn-transform":
            self.action_transform()
        elif button_id == "btn-format-input":
            self.run_worker(self._session.format_input())
        elif button_id == "btn-format-spec":
            self.run_worker(self._session.format_spec())
        elif button_id == "btn-clear-input":
            self.run_worker(self._session.clear_input())
        elif button_id == "btn-clear-spec":
            self.run_worker(self._session.clear_spec())
        elif button_id == "btn-view":
            self.action_toggle_view()

    def action_transform(self) -> None:
        """Run a transform with the current buffers."""
        self.run_worker(self._session.request_transform())

    def action_format(self) -> None:
        """Pretty-print the focused buffer."""
        kind = self._focused_buffer()
        if kind is not None:
            self.run_worker(self._session.format_buffer(kind))

    def action_toggle_view(self) -> None:
        """Switch the output pane between raw text and tree view."""
        self._tree_visible = not self._tree_visible
        self.query_one("#output-editor", TextArea).set_class(self._tree_visible, "hidden")
        self.query_one("#tree-view").set_class(not self._tree_visible, "hidden")
        self.query_one("#btn-view", Button).label = "Raw view" if self._tree_visible else "Tree view"
        if self._tree_visible:
            self._render_tree()

    def _focused_buffer(self) -> BufferKind | None:
        focused = self.focused
        if focused is not None and focused.id == "input-editor":
            return BufferKind.INPUT
        if focused is not None and focused.id == "spec-editor":
            return BufferKind.SPEC
        return None

    def _on_state_changed(self, event: StudioEvent) -> None:
        self._refresh_status()
        if event.buffer is BufferKind.OUTPUT and self._tree_visible:
            self._render_tree()

    def _on_notice(self, event: StudioEvent) -> None:
        self.query_one("#notice", Static).update(format_notice(event))

    def _refresh_status(self) -> None:
        store = self._session.store
        self.query_one("#input-status", Static).update(format_status(store.input_status))
        self.query_one("#spec-status", Static).update(format_status(store.spec_status))
        self.query_one("#output-status", Static).update(format_status(store.output_status))

        complexity = store.complexity.value if store.complexity else "Unknown"
        elapsed = f"{store.execution_time_ms}ms" if store.execution_time_ms is not None else "-"
        self.query_one("#metrics", Static).update(f"Time: {elapsed}  Complexity: {complexity}")

    def _render_tree(self) -> None:
        self.query_one("#tree-content", Static).update(self._session.tree_view())
