"""Validation coordinator: debounced, stale-safe validation of input and spec.

Input and spec are validated independently against two different service
endpoints. A response is applied only if the buffer still holds exactly the
text that was sent; otherwise it is dropped. This keeps an old "Valid" from
being painted over a buffer the user has since broken.
"""

import structlog

from j2j_studio.client.client import StudioClient
from j2j_studio.core.exceptions import TransportError
from j2j_studio.core.store import DocumentStore
from j2j_studio.core.types import BufferKind, BufferStatus, StatusLevel, ValidationResult
from j2j_studio.session.events import EventBus, StudioEvent
from j2j_studio.session.scheduler import CoalescingScheduler

logger = structlog.get_logger()

_TRANSPORT_DETAIL = {
    BufferKind.INPUT: "Error validating JSON",
    BufferKind.SPEC: "Error validating specification",
}


class ValidationCoordinator:
    """Keeps the store's valid snapshots in step with the live buffers.

    Args:
        store: Session document store.
        client: Service client used for the validation calls.
        scheduler: Coalescing scheduler; one key per buffer.
        bus: Event bus used to request auto-transforms and announce changes.
    """

    def __init__(
        self,
        store: DocumentStore,
        client: StudioClient,
        scheduler: CoalescingScheduler,
        bus: EventBus,
    ) -> None:
        self._store = store
        self._client = client
        self._scheduler = scheduler
        self._bus = bus

    def on_input_changed(self, text: str) -> None:
        self._on_changed(BufferKind.INPUT, text)

    def on_spec_changed(self, text: str) -> None:
        self._on_changed(BufferKind.SPEC, text)

    def _on_changed(self, kind: BufferKind, text: str) -> None:
        # Any edit invalidates the snapshot right away.
        self._store.set_snapshot(kind, None)

        if not text.strip():
            self._scheduler.cancel(kind.value)
            status = BufferStatus.ready() if kind is BufferKind.INPUT else BufferStatus.required()
            self._store.set_status(kind, status)
            return

        self._store.set_status(kind, BufferStatus.validating())
        self._scheduler.schedule(kind.value, lambda: self.validate(kind, text))

    async def validate(self, kind: BufferKind, text: str) -> None:
        """Validate ``text`` for ``kind`` now and apply the answer if still current."""
        try:
            if kind is BufferKind.INPUT:
                result = await self._client.validate_json(text)
            else:
                result = await self._client.validate_spec(text)
        except TransportError as e:
            if self._is_stale(kind, text):
                return
            self._store.set_snapshot(kind, None)
            self._store.set_status(
                kind,
                BufferStatus.error("Validation Error", f"{_TRANSPORT_DETAIL[kind]}: {e.reason}"),
            )
            logger.warning("Validation request failed", buffer=kind.value, error=e.reason)
            await self._bus.dispatch(StudioEvent.state_changed(kind))
            return

        if self._is_stale(kind, text):
            return

        await self._apply(kind, text, result)

    async def _apply(self, kind: BufferKind, text: str, result: ValidationResult) -> None:
        was_ready = self._store.both_valid

        if result.valid:
            self._store.set_snapshot(kind, text)
            if (result.level or "").upper() == "WARNING":
                status = BufferStatus(
                    label="Valid",
                    level=StatusLevel.WARNING,
                    detail=result.detail_text or None,
                )
            else:
                status = BufferStatus(label="Valid", level=StatusLevel.VALID)
            self._store.set_status(kind, status)
        else:
            self._store.set_snapshot(kind, None)
            self._store.set_status(kind, BufferStatus.error("Error", result.detail_text or None))

        logger.debug("Validation applied", buffer=kind.value, valid=result.valid)
        await self._bus.dispatch(StudioEvent.state_changed(kind))

        if self._store.auto_transform_armed and self._store.both_valid and not was_ready:
            logger.debug("Both buffers valid, requesting auto-transform")
            await self._bus.dispatch(StudioEvent.transform_requested())

    def _is_stale(self, kind: BufferKind, text: str) -> bool:
        if self._store.text(kind) == text:
            return False
        logger.debug("Discarded stale validation response", buffer=kind.value)
        return True
