"""
Round Robin scheduler package.

Provides a tick-driven Round Robin CPU scheduling engine, its Gantt log and
statistics, and a command-line interface for running workloads through it.
"""

from .engine import Simulation
from .errors import ConfigurationError, PreconditionError
from .models import ProcessSpec

__all__ = ["cli", "Simulation", "ProcessSpec", "ConfigurationError", "PreconditionError"]
