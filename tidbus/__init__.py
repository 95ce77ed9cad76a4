"""Fetch bus departures, draw them with a BDF font, and send the WebP to a Tidbyt."""

__version__ = "0.1.0"