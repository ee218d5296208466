"""Route group exports."""

from . import companies, delivery, health

__all__ = ["companies", "delivery", "health"]
