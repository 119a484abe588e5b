"""Exceptions for J2J Studio."""


class StudioError(Exception):
    """Base exception for studio errors."""

    pass


class PreconditionError(StudioError):
    """Raised when a transform is requested without input or spec."""

    pass


class TransportError(StudioError):
    """Raised when a service call fails at the transport level.

    Covers unreachable service, timeouts and response bodies that cannot be
    decoded. Well-formed failure answers from the service are not transport
    errors.
    """

    def __init__(self, endpoint: str, reason: str) -> None:
        self.endpoint = endpoint
        self.reason = reason
        super().__init__(f"Request to {endpoint} failed: {reason}")


class DepthExceededError(StudioError):
    """Raised when a JSON value nests deeper than the renderer allows."""

    def __init__(self, max_depth: int) -> None:
        self.max_depth = max_depth
        super().__init__(f"JSON nesting exceeds maximum render depth of {max_depth}")
