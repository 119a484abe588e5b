"""Command-line interface for J2J Studio."""
