"""HTTP client for the remote transform service."""

from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from j2j_studio.config.settings import ServiceConfig, get_settings
from j2j_studio.core.exceptions import TransportError
from j2j_studio.core.types import TransformOutcome, TransformRequest, ValidationResult

logger = structlog.get_logger()


class StudioClient:
    """Async client for the transform service endpoints.

    The service answers failures with a non-2xx status and a JSON body
    (``{"success": false, "error": ...}`` or ``{"valid": false, ...}``).
    Those are treated as well-formed answers. Only an unreachable service,
    a timeout or an undecodable body raises :class:`TransportError`.
    """

    VALIDATE_JSON_PATH = "/api/transform/validate/json"
    VALIDATE_SPEC_PATH = "/api/transform/validate/spec"
    TRANSFORM_PATH = "/api/transform"
    OPERATIONS_PATH = "/api/transform/operations"

    def __init__(
        self,
        service_config: ServiceConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            service_config: Base URL and timeout. If None, uses settings.
            transport: Optional httpx transport (used to plug in a mock service).
        """
        self._config = service_config or get_settings().service
        self._client = httpx.AsyncClient(
            base_url=self._config.base_url,
            timeout=self._config.timeout_s,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        """Get the service base URL."""
        return self._config.base_url

    async def __aenter__(self) -> "StudioClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def validate_json(self, text: str) -> ValidationResult:
        """Validate input text. The text is sent verbatim as the body."""
        data = await self._post(
            self.VALIDATE_JSON_PATH,
            content=text.encode("utf-8"),
            headers={"Content-Type": "application/json"},
        )
        return self._parse(self.VALIDATE_JSON_PATH, ValidationResult, data)

    async def validate_spec(self, text: str) -> ValidationResult:
        """Validate spec text.

        The spec is sent as an opaque string in ``chainSpec``; interpreting
        its structure is the service's job.
        """
        data = await self._post(
            self.VALIDATE_SPEC_PATH,
            json={"operation": "chain", "chainSpec": text},
        )
        return self._parse(self.VALIDATE_SPEC_PATH, ValidationResult, data)

    async def transform(self, request: TransformRequest) -> TransformOutcome:
        """Submit a transform request."""
        data = await self._post(self.TRANSFORM_PATH, json=request.to_body())
        return self._parse(self.TRANSFORM_PATH, TransformOutcome, data)

    async def list_operations(self) -> list[str]:
        """List the operation names the service supports."""
        try:
            response = await self._client.get(self.OPERATIONS_PATH)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise TransportError(self.OPERATIONS_PATH, self._describe(e)) from e
        except ValueError as e:
            raise TransportError(self.OPERATIONS_PATH, f"Invalid response body: {e}") from e

        if not isinstance(data, list):
            raise TransportError(self.OPERATIONS_PATH, "Expected a list of operations")
        return [str(item) for item in data]

    async def _post(self, path: str, **kwargs: Any) -> Any:
        logger.debug("Sending service request", endpoint=path)
        try:
            response = await self._client.post(path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("Service request failed", endpoint=path, error=self._describe(e))
            raise TransportError(path, self._describe(e)) from e

        try:
            return response.json()
        except ValueError as e:
            reason = f"HTTP {response.status_code}: response body is not JSON"
            logger.warning("Undecodable service response", endpoint=path, status=response.status_code)
            raise TransportError(path, reason) from e

    @staticmethod
    def _parse(path: str, model: type, data: Any) -> Any:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise TransportError(path, f"Unexpected response body: {e.error_count()} field error(s)") from e

    @staticmethod
    def _describe(error: httpx.HTTPError) -> str:
        if isinstance(error, httpx.TimeoutException):
            return "Request timed out"
        if isinstance(error, httpx.HTTPStatusError):
            return f"HTTP {error.response.status_code}"
        return str(error) or type(error).__name__
