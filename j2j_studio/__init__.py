"""J2J Studio: client-side control surface for a JSON-to-JSON transform service."""

__version__ = "0.1.0"
