from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised for invalid input before a run starts (quantum, bursts, arrivals, files)."""


class PreconditionError(RuntimeError):
    """Raised when the engine is driven in a way that indicates a caller bug."""
