"""Discrete-time simulation of dynamic partitioning memory with first-fit placement."""

from .admission import AdmissionQueue
from .errors import (CapacityError, ConfigurationError, InvariantError,
                     QueueEmptyError, SimulationError)
from .memory import Hole, MemoryManager
from .process import Process, ProcessRegistry
from .simulation import Simulation, TickReport

__version__ = '0.1.0'
