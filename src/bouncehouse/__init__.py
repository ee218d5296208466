"""Bounce House Kids platform API: tenant resolution and delivery lookup."""

__version__ = "0.1.0"
