import logging
from collections import namedtuple

import simpy

from . import config
from .admission import AdmissionQueue
from .memory import MemoryManager
from .process import ProcessRegistry
from .stats import summarize

logger = logging.getLogger(__name__)

# Per-tick snapshot handed to observers (the reporting side)
TickReport = namedtuple('TickReport', ['tick', 'total', 'used', 'free',
                                       'allocated', 'holes', 'queue', 'events'])

ARRIVED = 'arrived'
SUSPENDED = 'suspended'
FINISHED = 'finished'
MOVED = 'moved'


class Simulation:
    def __init__(self,
                 triples,                              # [(arrival, service, size), ...] in id order
                 total_memory=config.TOTAL_MEMORY,     # size of the address space
                 max_processes=config.MAX_PROCESSES,   # process table / queue bound
                 min_processes=config.MIN_PROCESSES,
                 check_invariants=False):              # verify the partition after every tick
        """
        Validates the process table up front; a Simulation is never built
        from a scenario that would be rejected.
        """
        triples = config.validate_processes(triples, total_memory, max_processes, min_processes)
        self.env = simpy.Environment()
        self.memory = MemoryManager(total_memory)
        self.registry = ProcessRegistry.from_triples(triples, max_processes)
        self.queue = AdmissionQueue(max_processes)
        self.check_invariants = check_invariants

        self.finished_count = 0
        self.ticks_run = 0
        self.history = []
        self.observers = []
        self._events = []
        self._clock = None   # the single SimPy clock process, started by run()

    @classmethod
    def from_scenario(cls, scenario, **kwargs):
        settings = config.extract_scenario(scenario)
        return cls(settings['processes'],
                   total_memory=settings['total_memory'],
                   max_processes=settings['max_processes'],
                   min_processes=settings['min_processes'],
                   **kwargs)

    def add_observer(self, callback):
        """`callback(report)` is called with a TickReport at the end of every tick."""
        self.observers.append(callback)

    # ---------- memory operations ----------
    def _admit(self, process):
        return self.memory.allocate(process, self.registry)

    def _admit_from_queue(self, process):
        if not self._admit(process):
            return False
        self.registry.replace(process)
        self._events.append((MOVED, process.pid))
        logger.info("Process %d moved from queue to memory.", process.pid)
        return True

    # ---------- tick phases ----------
    def _admission_phase(self, tick):
        for process in self.registry.arrivals(tick):
            self._events.append((ARRIVED, process.pid))
            logger.info("Process %d arrived.", process.pid)
            if not self._admit(process):
                self._events.append((SUSPENDED, process.pid))
                logger.info("Memory full! Process %d is suspended.", process.pid)
                self.queue.enqueue(process.snapshot())

    def _execution_phase(self, tick):
        # Records drained into memory during this pass land in their registry
        # slot and are visited here if their id is still ahead of the cursor.
        for process in self.registry:
            if not process.allocated:
                continue
            process.remaining -= 1
            if process.remaining < 0:
                self.memory.release(process, tick)
                self.finished_count += 1
                self._events.append((FINISHED, process.pid))
                logger.info("Process %d finished execution.", process.pid)
                self.queue.drain(self._admit_from_queue)

    def snapshot(self, tick):
        allocated = [(p.pid, p.size, p.start_address) for p in self.registry.allocated()]
        holes = [(h.start, h.size) for h in self.memory.holes]
        return TickReport(tick, self.memory.size, self.memory.used, self.memory.free,
                          allocated, holes, self.queue.pids(), list(self._events))

    def step(self, tick):
        """Run the admission, execution and snapshot phases for one tick."""
        self._events = []
        self._admission_phase(tick)
        self._execution_phase(tick)
        if self.check_invariants:
            self.memory.check_invariants(self.registry)

        report = self.snapshot(tick)
        self.history.append(report)
        for callback in self.observers:
            callback(report)
        self.ticks_run = tick + 1
        return report

    # ---------- clock ----------
    def clock(self):
        while self.finished_count < len(self.registry):
            self.step(int(self.env.now))
            yield self.env.timeout(1)

    # ---------- run ----------
    def run(self, until=None):
        """
        Drive the clock until every process has finished, or up to tick
        `until` when given. A later call resumes where the last one stopped.
        """
        if self._clock is None:
            self._clock = self.env.process(self.clock())
        if until is None:
            self.env.run()
        else:
            self.env.run(until=until)
        return self.results()

    @property
    def done(self):
        return self.registry.all_finished()

    # ---------- results ----------
    def results(self):
        res = summarize(self.registry, self.ticks_run)
        res['ticks'] = self.ticks_run
        res['memory'] = self.memory.get_stats()
        res['queued'] = self.queue.pids()
        return res
