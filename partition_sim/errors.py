"""Exceptions raised by the partition simulator."""


class SimulationError(Exception):
    """Base class for every simulator error."""


class ConfigurationError(SimulationError, ValueError):
    """Scenario rejected at setup (bad count, malformed record, oversized process)."""


class CapacityError(SimulationError):
    """A fixed bound (queue or process table) would be exceeded."""


class QueueEmptyError(SimulationError, IndexError):
    """dequeue() called on an empty admission queue."""


class InvariantError(SimulationError):
    """The address space no longer partitions into processes, holes and tail."""
