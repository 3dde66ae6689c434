"""Input validation, constant-time style helpers and buffer wiping."""

__all__ = ["constant_time", "memory", "validation"]