"""Transform orchestrator: one transform attempt per trigger.

Builds the request from the current buffers, dispatches it and maps the
outcome into output state. The spec buffer is sent decoded when it parses as
JSON (``chainSpec``) and as a raw string otherwise (``spec``), leaving the
service to interpret forms the client does not understand.
"""

import json
import time

import structlog

from j2j_studio.client.client import StudioClient
from j2j_studio.core.exceptions import PreconditionError, TransportError
from j2j_studio.core.store import DocumentStore
from j2j_studio.core.types import (
    BufferKind,
    BufferStatus,
    Complexity,
    StatusLevel,
    TransformOutcome,
    TransformRequest,
)
from j2j_studio.session.events import EventBus, NoticeLevel, StudioEvent

logger = structlog.get_logger()


def build_request(input_text: str, spec_text: str) -> TransformRequest:
    """Build a chain transform request.

    ``input`` is always the raw input text; the service parses it.
    """
    try:
        decoded = json.loads(spec_text)
    except (ValueError, RecursionError):
        return TransformRequest(spec=spec_text, input=input_text)
    return TransformRequest(chain_spec=decoded, input=input_text)


class TransformOrchestrator:
    """Turns the current buffers into a transform attempt and applies its outcome.

    Requests are never cancelled. Each request takes a generation number and
    only the response to the most recently issued request is applied; a late
    answer to a superseded request is dropped.
    """

    def __init__(self, store: DocumentStore, client: StudioClient, bus: EventBus) -> None:
        self._store = store
        self._client = client
        self._bus = bus
        self._generation = 0

    @property
    def generation(self) -> int:
        """Number of requests issued so far."""
        return self._generation

    def check_preconditions(self) -> None:
        """Raise PreconditionError if either buffer is empty."""
        if not self._store.input_text.strip():
            raise PreconditionError("Please provide input JSON data")
        if not self._store.spec_text.strip():
            raise PreconditionError("Please provide a transformation specification")

    async def transform(self) -> TransformOutcome | None:
        """Run one transform attempt.

        Returns:
            The service outcome, or None on transport failure.

        Raises:
            PreconditionError: If input or spec is empty. No request is made
                and the output buffer is left untouched.
        """
        self.check_preconditions()

        self._generation += 1
        generation = self._generation
        request = build_request(self._store.input_text, self._store.spec_text)

        logger.debug(
            "Dispatching transform",
            generation=generation,
            decoded_spec=request.has_chain_spec,
        )
        self._store.output_status = BufferStatus(label="Transforming...", level=StatusLevel.PENDING)
        await self._bus.dispatch(StudioEvent.state_changed(BufferKind.OUTPUT))

        started = time.monotonic()
        outcome: TransformOutcome | None
        try:
            outcome = await self._client.transform(request)
            failure = None
        except TransportError as e:
            outcome = None
            failure = e.reason

        if generation != self._generation:
            logger.debug(
                "Discarded superseded transform response",
                generation=generation,
                latest=self._generation,
            )
            return outcome

        if outcome is None:
            self._apply_failure(f"Request failed: {failure}")
            logger.warning("Transform request failed", generation=generation, error=failure)
            await self._bus.dispatch(StudioEvent.state_changed(BufferKind.OUTPUT))
            await self._bus.dispatch(
                StudioEvent.notice(f"Request failed: {failure}", level=NoticeLevel.ERROR)
            )
            return None

        if outcome.success:
            self._apply_success(outcome)
            logger.info(
                "Transform completed",
                generation=generation,
                execution_time_ms=outcome.execution_time_ms,
                complexity=self._store.complexity.value if self._store.complexity else None,
                round_trip_ms=int((time.monotonic() - started) * 1000),
            )
            await self._bus.dispatch(StudioEvent.state_changed(BufferKind.OUTPUT))
            await self._bus.dispatch(
                StudioEvent.notice("Transformation completed successfully", level=NoticeLevel.SUCCESS)
            )
        else:
            error = outcome.error or "Transformation failed"
            self._apply_failure(error)
            logger.info("Transform rejected by service", generation=generation, error=error)
            await self._bus.dispatch(StudioEvent.state_changed(BufferKind.OUTPUT))
            await self._bus.dispatch(
                StudioEvent.notice(f"Transformation failed: {error}", level=NoticeLevel.ERROR)
            )
        return outcome

    def _apply_success(self, outcome: TransformOutcome) -> None:
        self._store.output_text = outcome.result or ""
        self._store.execution_time_ms = outcome.execution_time_ms
        self._store.complexity = outcome.complexity or Complexity.UNKNOWN
        self._store.output_status = BufferStatus(
            label="Success",
            level=StatusLevel.VALID,
            detail="Transformation successful",
        )

    def _apply_failure(self, detail: str) -> None:
        self._store.output_text = ""
        self._store.output_status = BufferStatus.error("Error", detail)
