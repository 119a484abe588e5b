"""Document store: the three buffers of a studio session.

The store is plain state. It is mutated only from the session's event loop,
by the validation coordinator and the transform orchestrator.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from j2j_studio.core.types import BufferKind, BufferStatus, Complexity


class DocumentStore(BaseModel):
    """Input, spec and output buffers plus last-known-valid snapshots.

    ``last_valid_input`` and ``last_valid_spec`` are only ever set to text
    that was in the buffer when its validation response arrived.
    """

    input_text: str = ""
    spec_text: str = ""
    output_text: str = ""

    last_valid_input: str | None = None
    last_valid_spec: str | None = None

    auto_transform_armed: bool = False

    input_status: BufferStatus = Field(default_factory=BufferStatus.ready)
    spec_status: BufferStatus = Field(default_factory=BufferStatus.required)
    output_status: BufferStatus = Field(default_factory=BufferStatus.ready)

    execution_time_ms: int | None = None
    complexity: Complexity | None = None

    def text(self, kind: BufferKind) -> str:
        """Current text of a buffer."""
        if kind is BufferKind.INPUT:
            return self.input_text
        if kind is BufferKind.SPEC:
            return self.spec_text
        return self.output_text

    def set_text(self, kind: BufferKind, text: str) -> None:
        """Replace a buffer's text, invalidating its snapshot."""
        if kind is BufferKind.INPUT:
            self.input_text = text
            self.last_valid_input = None
        elif kind is BufferKind.SPEC:
            self.spec_text = text
            self.last_valid_spec = None
        else:
            self.output_text = text

    def snapshot(self, kind: BufferKind) -> str | None:
        if kind is BufferKind.INPUT:
            return self.last_valid_input
        if kind is BufferKind.SPEC:
            return self.last_valid_spec
        return None

    def set_snapshot(self, kind: BufferKind, text: str | None) -> None:
        if kind is BufferKind.INPUT:
            self.last_valid_input = text
        elif kind is BufferKind.SPEC:
            self.last_valid_spec = text
        else:
            raise ValueError("output buffer has no validation snapshot")

    def status(self, kind: BufferKind) -> BufferStatus:
        if kind is BufferKind.INPUT:
            return self.input_status
        if kind is BufferKind.SPEC:
            return self.spec_status
        return self.output_status

    def set_status(self, kind: BufferKind, status: BufferStatus) -> None:
        if kind is BufferKind.INPUT:
            self.input_status = status
        elif kind is BufferKind.SPEC:
            self.spec_status = status
        else:
            self.output_status = status

    @property
    def both_valid(self) -> bool:
        """Whether input and spec both hold a non-empty valid snapshot."""
        return bool(self.last_valid_input) and bool(self.last_valid_spec)
