"""Quill - article harvesting and AI enhancement pipeline."""

__version__ = "0.1.0"
