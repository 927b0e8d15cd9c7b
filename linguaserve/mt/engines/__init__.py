"""MT engine implementations."""

# Engines register themselves on import
from . import ct2_marian  # noqa: F401

__all__ = []
