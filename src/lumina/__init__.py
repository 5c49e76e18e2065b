"""Lumina: source structure extraction and call-graph visualization."""

__version__ = "0.1.0"
