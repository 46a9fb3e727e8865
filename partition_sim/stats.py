import math

import numpy as np


# ----------------------
# Helper: Confidence Interval (95%)
# ----------------------
def mean_ci_95(data):
    n = len(data)
    if n == 0:
        return (None, None, None)
    samples = np.asarray(data, dtype=float)
    mean = float(samples.mean())
    if n == 1:
        return (mean, mean, mean)
    stdev = float(samples.std(ddof=1))
    # normal approximation, z = 1.96
    z = 1.96
    se = stdev / math.sqrt(n)
    return (mean, mean - z*se, mean + z*se)


# ----------------------
# Turnaround statistics
# ----------------------
def turnaround_rows(processes):
    """(pid, arrival, service, completion, turnaround) for every finished process."""
    rows = []
    for p in processes:
        if p.completion_time is None:
            continue
        rows.append((p.pid, p.arrival_time, p.service_time, p.completion_time,
                     p.completion_time - p.arrival_time))
    return rows


def summarize(processes, elapsed_ticks=None):
    """
    Aggregate end-of-run figures.
    avg_turnaround is the arithmetic mean of completion - arrival over finished processes.
    """
    rows = turnaround_rows(processes)
    turnaround = np.array([r[4] for r in rows], dtype=float)
    service = np.array([r[2] for r in rows], dtype=float)

    res = {}
    res['processes'] = rows
    res['finished'] = len(rows)
    res['avg_turnaround'] = float(turnaround.mean()) if len(rows) else 0.0
    res['max_turnaround'] = float(turnaround.max()) if len(rows) else 0.0
    mean, lo, hi = mean_ci_95(turnaround)
    res['turnaround_95ci'] = (lo, hi)
    # waiting = time spent queued or resident beyond the service demand
    res['avg_waiting'] = float((turnaround - service).mean()) if len(rows) else 0.0
    if elapsed_ticks:
        res['throughput'] = len(rows) / elapsed_ticks
    else:
        res['throughput'] = 0.0
    return res
