"""HTTP access to the remote transform service."""

from j2j_studio.client.client import StudioClient

__all__ = ["StudioClient"]
