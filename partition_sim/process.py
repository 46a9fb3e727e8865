from .errors import CapacityError

PENDING = 'PENDING'
ALLOCATED = 'ALLOCATED'
FINISHED = 'FINISHED'


# ----------------------
# Process object
# ----------------------
class Process:
    __slots__ = ('pid', 'arrival_time', 'service_time', 'remaining', 'size',
                 'start_address', 'allocated', 'finished', 'completion_time')

    def __init__(self, pid, arrival_time, service_time, size):
        self.pid = pid
        self.arrival_time = arrival_time
        self.service_time = service_time
        self.remaining = service_time
        self.size = size
        self.start_address = None   # only meaningful while allocated
        self.allocated = False
        self.finished = False
        self.completion_time = None

    @property
    def state(self):
        if self.finished:
            return FINISHED
        if self.allocated:
            return ALLOCATED
        return PENDING

    @property
    def end_address(self):
        """First address past the occupied region."""
        return self.start_address + self.size

    @property
    def turnaround(self):
        if self.completion_time is None:
            return None
        return self.completion_time - self.arrival_time

    def snapshot(self):
        """Value copy; the admission queue holds these rather than live records."""
        copy = Process(self.pid, self.arrival_time, self.service_time, self.size)
        for field in ('remaining', 'start_address', 'allocated', 'finished', 'completion_time'):
            setattr(copy, field, getattr(self, field))
        return copy

    def __repr__(self):
        return (f"Process(pid={self.pid}, arrival={self.arrival_time}, service={self.service_time}, "
                f"size={self.size}, state={self.state})")


# ----------------------
# Process registry
# ----------------------
class ProcessRegistry:
    """
    The process table. Ids run 1..N in the order processes were added;
    once frozen, neither the count nor the ids change.
    """

    def __init__(self, max_processes):
        self.max_processes = max_processes
        self._processes = []
        self._frozen = False

    @classmethod
    def from_triples(cls, triples, max_processes):
        registry = cls(max_processes)
        for arrival, service, size in triples:
            registry.add(arrival, service, size)
        registry.freeze()
        return registry

    def add(self, arrival_time, service_time, size):
        if self._frozen:
            raise CapacityError("Process table is fixed once the simulation is set up")
        if len(self._processes) >= self.max_processes:
            raise CapacityError(f"Process table full ({self.max_processes} processes)")
        process = Process(len(self._processes) + 1, arrival_time, service_time, size)
        self._processes.append(process)
        return process

    def freeze(self):
        self._frozen = True

    def get(self, pid):
        if not 1 <= pid <= len(self._processes):
            raise KeyError(pid)
        return self._processes[pid - 1]

    def replace(self, process):
        """Write a snapshot back over the record with the same id."""
        if not 1 <= process.pid <= len(self._processes):
            raise KeyError(process.pid)
        self._processes[process.pid - 1] = process

    def allocated(self):
        return [p for p in self._processes if p.allocated]

    def arrivals(self, tick):
        """Processes arriving at `tick` that have not been placed or finished yet."""
        return [p for p in self._processes
                if p.arrival_time == tick and not p.allocated and not p.finished]

    def all_finished(self):
        return all(p.finished for p in self._processes)

    def __len__(self):
        return len(self._processes)

    def __iter__(self):
        # Index-based so records replaced mid-iteration are seen at their slot
        i = 0
        while i < len(self._processes):
            yield self._processes[i]
            i += 1
