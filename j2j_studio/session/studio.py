"""Studio session: the object a view layer talks to.

A session owns one document store and wires it to the validation
coordinator, the transform orchestrator and the event bus. Views push user
actions in through the public coroutines (or through attached editors) and
receive state changes by registering handlers for ``STATE_CHANGED`` and
``NOTICE`` on :attr:`StudioSession.bus`.
"""

import asyncio
import json
from collections.abc import Awaitable
from typing import Any

import structlog
from rich.text import Text

from j2j_studio.client.client import StudioClient
from j2j_studio.config.settings import Settings, get_settings
from j2j_studio.core.exceptions import PreconditionError
from j2j_studio.core.store import DocumentStore
from j2j_studio.core.types import BufferKind
from j2j_studio.render.tree import render_output
from j2j_studio.session.editor import Editor
from j2j_studio.session.events import (
    EventBus,
    NoticeLevel,
    StudioEvent,
    StudioEventType,
)
from j2j_studio.session.scheduler import CoalescingScheduler
from j2j_studio.session.transform import TransformOrchestrator
from j2j_studio.session.validation import ValidationCoordinator

logger = structlog.get_logger()

_BUFFER_LABELS = {
    BufferKind.INPUT: "Input JSON",
    BufferKind.SPEC: "Specification",
}


class StudioSession:
    """One editing session against a transform service.

    Args:
        client: Service client. If None, one is created from settings and
            closed with the session.
        settings: Settings to use. If None, uses the cached settings.
        auto_transform: Initial auto-transform flag. If None, uses
            ``settings.auto_transform_default``.
        debounce_s: Coalescing window override in seconds.
    """

    def __init__(
        self,
        client: StudioClient | None = None,
        settings: Settings | None = None,
        *,
        auto_transform: bool | None = None,
        debounce_s: float | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._owns_client = client is None
        self._client = client or StudioClient(self._settings.service)

        armed = self._settings.auto_transform_default if auto_transform is None else auto_transform
        self.store = DocumentStore(auto_transform_armed=armed)
        self.bus = EventBus()
        self.scheduler = CoalescingScheduler(
            self._settings.debounce_s if debounce_s is None else debounce_s
        )
        self.validation = ValidationCoordinator(self.store, self._client, self.scheduler, self.bus)
        self.orchestrator = TransformOrchestrator(self.store, self._client, self.bus)

        self.last_warning: str | None = None
        self._editors: dict[BufferKind, Editor] = {}
        self._syncing = False
        # Latest editor text per buffer, including edits not yet applied.
        self._queued: dict[BufferKind, str] = {}
        self._tasks: set[asyncio.Task[Any]] = set()

        self.bus.register(StudioEventType.BUFFER_EDITED, self._handle_buffer_edited)
        self.bus.register(StudioEventType.TRANSFORM_REQUESTED, self._handle_transform_requested)
        self.bus.register(StudioEventType.AUTO_TRANSFORM_TOGGLED, self._handle_auto_transform_toggled)

    @property
    def client(self) -> StudioClient:
        return self._client

    async def __aenter__(self) -> "StudioSession":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    async def edit(self, kind: BufferKind, text: str) -> None:
        """Replace the text of the input or spec buffer."""
        await self.bus.dispatch(StudioEvent.edited(kind, text))

    async def set_input(self, text: str) -> None:
        await self.edit(BufferKind.INPUT, text)

    async def set_spec(self, text: str) -> None:
        await self.edit(BufferKind.SPEC, text)

    async def request_transform(self) -> None:
        """Explicit transform trigger (the Transform button)."""
        await self.bus.dispatch(StudioEvent.transform_requested())

    async def set_auto_transform(self, armed: bool) -> None:
        await self.bus.dispatch(StudioEvent.auto_transform_toggled(armed))

    async def format_input(self) -> bool:
        return await self.format_buffer(BufferKind.INPUT)

    async def format_spec(self) -> bool:
        return await self.format_buffer(BufferKind.SPEC)

    async def format_buffer(self, kind: BufferKind) -> bool:
        """Pretty-print a buffer with two-space indentation, keeping key order.

        Returns:
            True if the buffer holds valid JSON and was formatted.
        """
        text = self.store.text(kind)
        if not text.strip():
            return False

        try:
            decoded = json.loads(text)
        except (ValueError, RecursionError) as e:
            await self._notify(f"Invalid JSON: {e}", NoticeLevel.ERROR)
            return False

        formatted = json.dumps(decoded, indent=2, ensure_ascii=False)
        if formatted != text:
            await self.edit(kind, formatted)
        await self._notify(f"{_BUFFER_LABELS[kind]} formatted successfully", NoticeLevel.SUCCESS)
        return True

    async def clear_input(self) -> None:
        await self.edit(BufferKind.INPUT, "")
        await self._notify("Input cleared", NoticeLevel.INFO)

    async def clear_spec(self) -> None:
        await self.edit(BufferKind.SPEC, "")
        await self._notify("Specification cleared", NoticeLevel.INFO)

    def tree_view(self) -> Text:
        """Render the output buffer for the tree view."""
        return render_output(
            self.store.output_text,
            indent=self._settings.render_indent,
            max_depth=self._settings.render_max_depth,
        )

    async def list_operations(self) -> list[str]:
        return await self._client.list_operations()

    # ------------------------------------------------------------------
    # Editors
    # ------------------------------------------------------------------

    def attach_editor(self, kind: BufferKind, editor: Editor) -> None:
        """Bind an editor widget to a buffer.

        Input and spec editors feed their changes into the session. The
        output editor is read-only and only receives text.
        """
        self._editors[kind] = editor
        if kind is BufferKind.OUTPUT:
            editor.read_only = True
            self._sync_editor(kind, self.store.output_text)
            return

        editor.on_change(lambda text: self._on_editor_change(kind, text))
        self._queued[kind] = self.store.text(kind)
        self._on_editor_change(kind, editor.get_value())

    def _on_editor_change(self, kind: BufferKind, text: str) -> None:
        if self._syncing or text == self._queued.get(kind, self.store.text(kind)):
            return
        self._queued[kind] = text
        self._spawn(self.bus.dispatch(StudioEvent.edited(kind, text, from_editor=True)))

    def _sync_editor(self, kind: BufferKind, text: str) -> None:
        editor = self._editors.get(kind)
        if editor is None or editor.get_value() == text:
            return
        self._syncing = True
        try:
            editor.set_value(text)
        finally:
            self._syncing = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def settle(self) -> None:
        """Wait for pending edits, validations and triggered transforms."""
        while self._tasks or not self.scheduler.idle:
            if self._tasks:
                await asyncio.wait(set(self._tasks))
            await self.scheduler.drain()

    async def close(self) -> None:
        self.scheduler.cancel_all()
        if self._owns_client:
            await self._client.close()

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    async def _handle_buffer_edited(self, event: StudioEvent) -> None:
        kind = event.buffer
        if kind is None or kind is BufferKind.OUTPUT:
            logger.debug("Ignored edit to read-only buffer")
            return

        text = event.text or ""
        self.store.set_text(kind, text)
        if not event.from_editor:
            self._queued[kind] = text
            self._sync_editor(kind, text)
        if kind is BufferKind.INPUT:
            self.validation.on_input_changed(text)
        else:
            self.validation.on_spec_changed(text)
        await self.bus.dispatch(StudioEvent.state_changed(kind))

    async def _handle_transform_requested(self, event: StudioEvent) -> None:
        try:
            await self.orchestrator.transform()
        except PreconditionError as e:
            self.last_warning = str(e)
            logger.warning("Transform precondition not met", reason=str(e))
            await self._notify(str(e), NoticeLevel.WARNING)
            return
        self._sync_editor(BufferKind.OUTPUT, self.store.output_text)

    async def _handle_auto_transform_toggled(self, event: StudioEvent) -> None:
        armed = bool(event.armed)
        was_armed = self.store.auto_transform_armed
        self.store.auto_transform_armed = armed
        logger.debug("Auto-transform toggled", armed=armed)
        if armed and not was_armed and self.store.both_valid:
            await self.bus.dispatch(StudioEvent.transform_requested())

    async def _notify(self, message: str, level: NoticeLevel) -> None:
        await self.bus.dispatch(StudioEvent.notice(message, level))

    def _spawn(self, work: Awaitable[None]) -> None:
        task = asyncio.ensure_future(work)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Editor change handling failed", error=str(error))
