"""Inbound request intake with session-funnel analytics."""

__version__ = "0.1.0"
