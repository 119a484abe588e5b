"""Studio session orchestration: validation, transform and event dispatch."""

from j2j_studio.session.editor import Editor, TextBuffer
from j2j_studio.session.events import EventBus, NoticeLevel, StudioEvent, StudioEventType
from j2j_studio.session.scheduler import CoalescingScheduler
from j2j_studio.session.studio import StudioSession
from j2j_studio.session.transform import TransformOrchestrator, build_request
from j2j_studio.session.validation import ValidationCoordinator

__all__ = [
    "CoalescingScheduler",
    "Editor",
    "EventBus",
    "NoticeLevel",
    "StudioEvent",
    "StudioEventType",
    "StudioSession",
    "TextBuffer",
    "TransformOrchestrator",
    "ValidationCoordinator",
    "build_request",
]
