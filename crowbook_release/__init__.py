"""Release packaging helpers for the crowbook CI pipeline."""

__version__ = "0.1.0"
