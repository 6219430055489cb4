"""Scribble: a small freehand painting program built on PyQt5."""

__version__ = "1.0.0"
