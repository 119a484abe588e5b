"""Typed event dispatch for a studio session.

Every user action and every state change is expressed as a
:class:`StudioEvent`. Each event type is consumed by exactly one handler:
buffer edits by the validation path, transform requests by the
orchestrator, state changes and notices by the view layer. Events without a
registered handler are dropped.
"""

import inspect
import time
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

import structlog
from pydantic import BaseModel, Field

from j2j_studio.core.types import BufferKind

logger = structlog.get_logger()

EventHandler = Callable[["StudioEvent"], Awaitable[None] | None]


class StudioEventType(str, Enum):
    """Event types flowing through a studio session."""

    # User actions
    BUFFER_EDITED = "buffer_edited"
    TRANSFORM_REQUESTED = "transform_requested"
    AUTO_TRANSFORM_TOGGLED = "auto_transform_toggled"

    # View notifications
    STATE_CHANGED = "state_changed"
    NOTICE = "notice"


class NoticeLevel(str, Enum):
    """Severity of a user-facing notice."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class StudioEvent(BaseModel):
    """A single event dispatched through the session's bus."""

    event_type: StudioEventType = Field(..., description="Type of event")
    buffer: BufferKind | None = Field(default=None, description="Buffer the event concerns")
    text: str | None = Field(default=None, description="Buffer text for edit events")
    from_editor: bool = Field(default=False, description="Edit originated in the attached editor")
    armed: bool | None = Field(default=None, description="Auto-transform flag for toggle events")
    message: str | None = Field(default=None, description="Notice text")
    level: NoticeLevel | None = Field(default=None, description="Notice severity")
    timestamp: float = Field(
        default_factory=time.time,
        description="Unix timestamp of event emission",
    )

    @classmethod
    def edited(cls, buffer: BufferKind, text: str, from_editor: bool = False) -> "StudioEvent":
        return cls(
            event_type=StudioEventType.BUFFER_EDITED,
            buffer=buffer,
            text=text,
            from_editor=from_editor,
        )

    @classmethod
    def transform_requested(cls) -> "StudioEvent":
        return cls(event_type=StudioEventType.TRANSFORM_REQUESTED)

    @classmethod
    def auto_transform_toggled(cls, armed: bool) -> "StudioEvent":
        return cls(event_type=StudioEventType.AUTO_TRANSFORM_TOGGLED, armed=armed)

    @classmethod
    def state_changed(cls, buffer: BufferKind) -> "StudioEvent":
        return cls(event_type=StudioEventType.STATE_CHANGED, buffer=buffer)

    @classmethod
    def notice(cls, message: str, level: NoticeLevel = NoticeLevel.INFO) -> "StudioEvent":
        return cls(event_type=StudioEventType.NOTICE, message=message, level=level)


class EventBus:
    """Single-handler event dispatcher.

    Handlers may be plain callables or coroutine functions; ``dispatch``
    awaits the latter so the caller resumes only after the event has been
    fully handled.
    """

    def __init__(self) -> None:
        self._handlers: dict[StudioEventType, EventHandler] = {}

    def register(self, event_type: StudioEventType, handler: EventHandler) -> None:
        """Register the handler for an event type.

        Raises:
            ValueError: If the event type already has a handler.
        """
        if event_type in self._handlers:
            raise ValueError(f"Handler already registered for {event_type.value}")
        self._handlers[event_type] = handler

    def unregister(self, event_type: StudioEventType) -> None:
        self._handlers.pop(event_type, None)

    def has_handler(self, event_type: StudioEventType) -> bool:
        return event_type in self._handlers

    async def dispatch(self, event: StudioEvent) -> None:
        """Hand an event to its handler and wait for it to finish."""
        handler = self._handlers.get(event.event_type)
        if handler is None:
            logger.debug("Event dropped, no handler", event_type=event.event_type.value)
            return

        logger.debug(
            "Event dispatched",
            event_type=event.event_type.value,
            buffer=event.buffer.value if event.buffer else None,
        )
        maybe_awaitable = handler(event)
        if inspect.isawaitable(maybe_awaitable):
            await maybe_awaitable

    def handlers(self) -> dict[str, Any]:
        """Registered handlers keyed by event type value."""
        return {event_type.value: handler for event_type, handler in self._handlers.items()}
