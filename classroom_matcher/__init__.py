"""Exam record -> classroom roster matcher."""

__version__ = "0.1.0"
