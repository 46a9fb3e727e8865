"""Tests for the first-fit allocator and hole coalescing."""

import pytest

from partition_sim.errors import InvariantError
from partition_sim.memory import Hole, MemoryManager
from partition_sim.process import Process


def make(pid, size):
    return Process(pid, 0, 1, size)


def place_all(mm, sizes):
    residents = []
    for pid, size in enumerate(sizes, start=1):
        p = make(pid, size)
        assert mm.allocate(p, residents)
        residents.append(p)
    return residents


class TestAllocate:

    def test_empty_memory_uses_tail(self):
        mm = MemoryManager(1024)
        p1, p2 = place_all(mm, [100, 200])
        assert p1.start_address == 0
        assert p2.start_address == 100
        assert p1.allocated and p2.allocated
        assert mm.used == 300
        assert mm.free == 724
        assert mm.holes == ()

    def test_hole_shrinks_from_low_end(self):
        mm = MemoryManager(1024)
        p1, p2, p3 = place_all(mm, [100, 200, 100])
        mm.release(p2, 5)
        assert mm.holes == (Hole(100, 200),)

        p4 = make(4, 50)
        assert mm.allocate(p4, [p1, p2, p3])
        assert p4.start_address == 100
        assert mm.holes == (Hole(150, 150),)
        assert mm.used == 250

    def test_exact_fit_removes_hole(self):
        mm = MemoryManager(1024)
        p1, p2, p3 = place_all(mm, [100, 200, 100])
        mm.release(p2, 1)
        p4 = make(4, 200)
        assert mm.allocate(p4, [p1, p2, p3])
        assert p4.start_address == 100
        assert mm.holes == ()

    def test_first_fit_not_best_fit(self):
        mm = MemoryManager(1024)
        p1, p2, p3, p4 = place_all(mm, [300, 100, 100, 100])
        mm.release(p1, 1)
        mm.release(p3, 1)
        assert mm.holes == (Hole(0, 300), Hole(400, 100))

        p5 = make(5, 100)
        assert mm.allocate(p5, [p1, p2, p3, p4])
        # the exact fit at 400 is ignored in favour of the first hole
        assert p5.start_address == 0
        assert mm.holes == (Hole(100, 200), Hole(400, 100))

    def test_failure_leaves_process_untouched(self):
        mm = MemoryManager(1024)
        residents = place_all(mm, [600])
        p2 = make(2, 500)
        assert not mm.allocate(p2, residents)
        assert not p2.allocated
        assert p2.start_address is None
        assert mm.used == 600

    def test_tail_consumes_holes_it_covers(self):
        mm = MemoryManager(1024)
        p1, p2 = place_all(mm, [100, 200])
        mm.release(p2, 1)
        assert mm.holes == (Hole(100, 200),)

        p3 = make(3, 500)
        assert mm.allocate(p3, [p1, p2])
        assert p3.start_address == 100
        assert mm.holes == ()
        mm.check_invariants([p1, p2, p3])

    def test_tail_trims_hole_it_overlaps(self):
        mm = MemoryManager(1024)
        p1 = make(1, 100)
        assert mm.allocate(p1, [])
        mm._holes = [Hole(200, 300)]

        p2 = make(2, 350)
        assert mm.allocate(p2, [p1])
        assert p2.start_address == 100
        assert mm.holes == (Hole(450, 50),)
        mm.check_invariants([p1, p2])

    def test_tail_does_not_fit(self):
        mm = MemoryManager(1024)
        residents = place_all(mm, [1000])
        assert not mm.allocate(make(2, 25), residents)
        assert mm.allocate(make(3, 24), residents)


class TestRelease:

    def test_release_records_completion(self):
        mm = MemoryManager(1024)
        (p1,) = place_all(mm, [100])
        mm.release(p1, 7)
        assert not p1.allocated
        assert p1.finished
        assert p1.completion_time == 7
        assert mm.used == 0
        assert mm.holes == (Hole(0, 100),)

    def test_adjacent_releases_merge(self):
        mm = MemoryManager(1024)
        p1, p2, p3, p4 = place_all(mm, [300, 100, 100, 100])
        mm.release(p1, 1)
        mm.release(p2, 1)
        assert mm.holes == (Hole(0, 400),)
        mm.release(p4, 2)
        assert mm.holes == (Hole(0, 400), Hole(500, 100))
        mm.release(p3, 3)
        assert mm.holes == (Hole(0, 600),)


class TestCoalesce:

    def test_merges_chains_and_sorts(self):
        mm = MemoryManager(1024)
        mm._holes = [Hole(300, 50), Hole(0, 100), Hole(100, 50), Hole(150, 100), Hole(500, 10)]
        mm.coalesce()
        assert mm.holes == (Hole(0, 250), Hole(300, 50), Hole(500, 10))

    def test_idempotent(self):
        mm = MemoryManager(1024)
        mm._holes = [Hole(40, 10), Hole(0, 20), Hole(20, 20), Hole(60, 5)]
        mm.coalesce()
        first = mm.holes
        mm.coalesce()
        assert mm.holes == first == (Hole(0, 50), Hole(60, 5))

    def test_empty(self):
        mm = MemoryManager(1024)
        mm.coalesce()
        assert mm.holes == ()


class TestStatsAndInvariants:

    def test_get_stats(self):
        mm = MemoryManager(1024)
        p1, p2, p3 = place_all(mm, [100, 200, 100])
        mm.release(p2, 1)
        stats = mm.get_stats()
        assert stats == {
            'total': 1024,
            'used': 200,
            'free': 824,
            'num_holes': 1,
            'hole_total': 200,
            'largest_hole': 200,
        }

    def test_overlap_detected(self):
        mm = MemoryManager(1024)
        residents = place_all(mm, [100])
        mm._holes = [Hole(50, 100)]
        with pytest.raises(InvariantError):
            mm.check_invariants(residents)

    def test_adjacent_holes_detected(self):
        mm = MemoryManager(1024)
        mm._holes = [Hole(0, 10), Hole(10, 10)]
        with pytest.raises(InvariantError):
            mm.check_invariants([])

    def test_used_counter_mismatch_detected(self):
        mm = MemoryManager(1024)
        residents = place_all(mm, [100])
        mm.used = 90
        with pytest.raises(InvariantError):
            mm.check_invariants(residents)
