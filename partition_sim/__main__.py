import argparse
import logging
import sys

from . import config
from .errors import ConfigurationError
from .report import print_summary, print_tick
from .simulation import Simulation


def positive_int(text):
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return value


def build_parser():
    parser = argparse.ArgumentParser(
        prog='partition-sim',
        description="Dynamic partitioning memory management simulation (first fit).")
    parser.add_argument('scenario', nargs='?', help="JSON scenario file")
    parser.add_argument('--interactive', action='store_true',
                        help="enter the process table at the prompt")
    parser.add_argument('--until', type=positive_int, default=None,
                        help="stop after this many ticks")
    parser.add_argument('--quiet', action='store_true', help="only print the final summary")
    parser.add_argument('--verbose', action='store_true', help="log allocator decisions")
    return parser


def main(argv=None):
    """Command line entry point."""
    args = build_parser().parse_args(argv)
    level = logging.DEBUG if args.verbose else logging.WARNING if args.quiet else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    if args.scenario is None and not args.interactive:
        build_parser().print_usage(sys.stderr)
        return 2

    try:
        if args.interactive:
            print("\n\t\t_____________ Dynamic Partitioning Memory Management Simulation _____________")
            settings = config.prompt_scenario()
        else:
            settings = config.load_scenario_file(args.scenario)
        sim = Simulation(settings['processes'],
                         total_memory=settings['total_memory'],
                         max_processes=settings['max_processes'],
                         min_processes=settings['min_processes'])
    except (ConfigurationError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if not args.quiet:
        sim.add_observer(print_tick)
    res = sim.run(until=args.until)
    print_summary(res)
    return 0


if __name__ == '__main__':
    sys.exit(main())
