"""
Text rendering of the simulation output.

format_tick() renders one TickReport as the "Memory State" block printed
after every tick; format_summary() renders the turnaround table and the
aggregate figures printed once the run is over.
"""

EVENT_LINES = {
    'arrived': "Process {} arrived.",
    'suspended': "Memory full! Process {} is suspended.",
    'finished': "Process {} finished execution.",
    'moved': "Process {} moved from queue to memory.",
}


def format_tick(report):
    lines = [f"--- Time: {report.tick} ---", ""]
    for kind, pid in report.events:
        lines.append(EVENT_LINES[kind].format(pid))

    lines.append("")
    lines.append("----- Memory State ------")
    lines.append(f"Total Memory: {report.total} units")
    lines.append(f"Memory Used : {report.used} units")
    lines.append(f"Memory Free : {report.free} units")

    lines.append("")
    lines.append("Allocated Processes:")
    lines.append("PID\tSize\tStart")
    for pid, size, start in report.allocated:
        lines.append(f"{pid}\t{size}\t{start}")

    # Show free memory holes
    if report.holes:
        lines.append("")
        lines.append("Free Holes:")
        lines.append("Start\t\tSize")
        for start, size in report.holes:
            lines.append(f"{start}\t\t{size}")

    # Show blocked (waiting) processes
    if report.queue:
        lines.append("")
        lines.append("Suspended Processes : " + " ".join(str(pid) for pid in report.queue))
    return "\n".join(lines)


def fmt_ci(ci, fmt="({:.2f}, {:.2f})"):
    lo, hi = ci if ci is not None else (None, None)
    if lo is None or hi is None:
        return "N/A"
    return fmt.format(lo, hi)


def format_summary(res):
    lines = ["PID\tArrival\tService\tCompletion\tTurnaround"]
    for pid, arrival, service, completion, turnaround in res['processes']:
        lines.append(f"{pid}\t{arrival}\t{service}\t{completion}\t\t{turnaround}")
    lines.append("")
    lines.append(f"1. Processes finished                : {res['finished']}")
    lines.append(f"2. Simulated ticks                   : {res['ticks']}")
    lines.append(f"3. Throughput (processes/tick)       : {res['throughput']:.4f}")
    lines.append(f"4. Average Turnaround time           : {res['avg_turnaround']:.2f}")
    lines.append(f"5. Turnaround 95% CI                 : {fmt_ci(res['turnaround_95ci'])}")
    lines.append(f"6. Average waiting time              : {res['avg_waiting']:.2f}")
    mem = res['memory']
    lines.append(f"7. Final holes / largest hole        : {mem['num_holes']} / {mem['largest_hole']}")
    if res['queued']:
        lines.append(f"Still suspended: {' '.join(str(pid) for pid in res['queued'])}")
    return "\n".join(lines)


def print_tick(report):
    print()
    print(format_tick(report))


def print_summary(res):
    print("\t\t\n________________ Simulation Complete __________________\n")
    print(format_summary(res))
