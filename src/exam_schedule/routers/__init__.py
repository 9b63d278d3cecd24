from . import health, schedule  # noqa: F401

__all__ = ["health", "schedule"]
