from collections import deque

from .errors import CapacityError, QueueEmptyError


class AdmissionQueue:
    """FIFO of process snapshots waiting for a contiguous region."""

    def __init__(self, capacity):
        self.capacity = capacity
        self._entries = deque()

    def enqueue(self, process):
        if len(self._entries) >= self.capacity:
            raise CapacityError(f"Admission queue overflow (capacity {self.capacity})")
        self._entries.append(process)

    def dequeue(self):
        if not self._entries:
            raise QueueEmptyError("dequeue from empty admission queue")
        return self._entries.popleft()

    def drain(self, try_admit):
        """
        One pass over the entries present when the pass starts.
        Each is handed to `try_admit`; those it rejects go to the back,
        so nothing is retried twice in the same pass.
        Returns the admitted entries in the order they were admitted.
        """
        admitted = []
        for _ in range(len(self._entries)):
            process = self.dequeue()
            if try_admit(process):
                admitted.append(process)
            else:
                self.enqueue(process)
        return admitted

    def pids(self):
        return [p.pid for p in self]

    def is_empty(self):
        return not self._entries

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries))
