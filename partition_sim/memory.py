import logging
from collections import namedtuple

from .errors import InvariantError

logger = logging.getLogger(__name__)

Hole = namedtuple('Hole', ['start', 'size'])


class MemoryManager:
    """
    Manages a contiguous address space using the First Fit allocation strategy.
    Free regions released by finished processes are tracked as a list of
    Hole(start, size) tuples; memory never handed out yet is the implicit
    tail past the highest allocated process.
    """
    def __init__(self, size):
        self.size = size
        self._holes = []
        self.used = 0

    @property
    def free(self):
        return self.size - self.used

    @property
    def holes(self):
        return tuple(self._holes)

    def allocate(self, process, residents):
        """
        Attempts to place `process` using First Fit, falling back to the tail.
        `residents` are the processes currently in memory (used for the tail probe).
        Returns True on success; on failure the process is left untouched.
        """
        # Iterate through holes using First Fit
        for i, (start, size) in enumerate(self._holes):
            if size >= process.size:
                if size == process.size:
                    del self._holes[i]
                else:
                    # consume from the low end of the hole
                    self._holes[i] = Hole(start + process.size, size - process.size)
                self._place(process, start)
                logger.debug("P-ID %d placed in hole at %d (%d units)", process.pid, start, process.size)
                return True

        # No hole fits: probe the tail past every resident process
        candidate = 0
        for other in residents:
            if other.allocated and other.pid != process.pid:
                candidate = max(candidate, other.end_address)

        if candidate + process.size <= self.size:
            self._consume_tail(candidate, candidate + process.size)
            self._place(process, candidate)
            logger.debug("P-ID %d placed in tail at %d (%d units)", process.pid, candidate, process.size)
            return True

        return False  # Allocation failed (fragmentation or full)

    def _place(self, process, start):
        process.start_address = start
        process.allocated = True
        self.used += process.size

    def _consume_tail(self, low, high):
        """Drop or trim holes lying in [low, high); everything past `low` is free."""
        kept = []
        for start, size in self._holes:
            end = start + size
            if end <= low or start >= high:
                kept.append(Hole(start, size))
            elif end > high:
                kept.append(Hole(high, end - high))
        self._holes = kept

    def release(self, process, tick):
        """Frees the region held by `process` and merges adjacent holes."""
        self._holes.append(Hole(process.start_address, process.size))
        self.used -= process.size
        process.allocated = False
        process.finished = True
        process.completion_time = tick
        self.coalesce()

    def coalesce(self):
        """Sort holes by address and merge touching neighbours."""
        self._holes.sort(key=lambda h: h.start)
        i = 0
        while i < len(self._holes) - 1:
            curr = self._holes[i]
            nxt = self._holes[i + 1]
            if curr.start + curr.size == nxt.start:
                # Replace current hole with merged hole and re-test against the new neighbour
                self._holes[i] = Hole(curr.start, curr.size + nxt.size)
                del self._holes[i + 1]
            else:
                i += 1

    def get_stats(self):
        """Calculates current memory usage and fragmentation stats."""
        hole_sizes = [size for _, size in self._holes]
        return {
            'total': self.size,
            'used': self.used,
            'free': self.free,
            'num_holes': len(hole_sizes),
            'hole_total': sum(hole_sizes),
            'largest_hole': max(hole_sizes) if hole_sizes else 0,
        }

    def check_invariants(self, residents):
        """Raise InvariantError unless processes and holes partition the address space."""
        regions = [(p.start_address, p.end_address, f"process {p.pid}") for p in residents if p.allocated]
        used = sum(end - start for start, end, _ in regions)
        if used != self.used:
            raise InvariantError(f"used counter {self.used} != allocated total {used}")
        regions += [(h.start, h.start + h.size, f"hole at {h.start}") for h in self._holes]
        if used + sum(h.size for h in self._holes) > self.size:
            raise InvariantError("allocated plus hole memory exceeds total memory")

        regions.sort()
        for start, end, name in regions:
            if start < 0 or end > self.size or end <= start:
                raise InvariantError(f"{name} out of range [{start}, {end})")
        for (s1, e1, n1), (s2, e2, n2) in zip(regions, regions[1:]):
            if s2 < e1:
                raise InvariantError(f"{n1} [{s1}, {e1}) overlaps {n2} [{s2}, {e2})")

        ordered = sorted(self._holes)
        for a, b in zip(ordered, ordered[1:]):
            if a.start + a.size == b.start:
                raise InvariantError(f"holes at {a.start} and {b.start} are adjacent")
