"""Chime - one-time and recurring chat reminders."""

__version__ = "0.1.0"
