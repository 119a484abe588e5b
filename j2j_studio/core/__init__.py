"""Core types and state for J2J Studio."""

from j2j_studio.core.exceptions import (
    DepthExceededError,
    PreconditionError,
    StudioError,
    TransportError,
)
from j2j_studio.core.store import DocumentStore
from j2j_studio.core.types import (
    BufferKind,
    BufferStatus,
    Complexity,
    StatusLevel,
    TransformOutcome,
    TransformRequest,
    ValidationResult,
)

__all__ = [
    "BufferKind",
    "BufferStatus",
    "Complexity",
    "DepthExceededError",
    "DocumentStore",
    "PreconditionError",
    "StatusLevel",
    "StudioError",
    "TransformOutcome",
    "TransformRequest",
    "TransportError",
    "ValidationResult",
]
