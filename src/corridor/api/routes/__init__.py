"""Route group exports."""

from . import buffer, health

__all__ = ["buffer", "health"]
