# FILE INFO ###################################################
# Author: Jason Liu <jasonxliu2010@gmail.com>
# Created on October 6, 2019
# Last Update: Time-stamp: <2019-10-14 11:02:53 liux>
###############################################################

"""Command-line entry point.

usage: boundbuf [-s SEED] [-t TIMEOUT] [-u SECONDS] [-k KEY] [--stats] [-v] [-vv]
                CAPACITY JOBS PRODUCERS CONSUMERS

"""

import sys, argparse

from .config import SEM_KEY, TIMEOUT, EXIT_OK, EXIT_INCORRECT_NUMBER_OF_ARGUMENTS, \
    EXIT_NON_POSITIVE_INTEGER, EXIT_WORKER_FAILURE, Settings
from .coordinator import Coordinator
from .errors import ConfigurationError, ResourceError, WorkerError

__all__ = ["main", "check_arg", "parse_args"]

import logging
log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

ARG_NAMES = ("buffer capacity", "jobs per producer", "number of producers",
             "number of consumers")

def check_arg(s):
    """Return the non-negative integer written in decimal digits in the
    string, or -1 if the string is anything else."""
    if len(s) == 0 or not all('0' <= c <= '9' for c in s):
        return -1
    return int(s)

class _ArgumentParser(argparse.ArgumentParser):
    """Report malformed options as a ConfigurationError rather than
    exiting from inside the parser."""

    def error(self, message):
        raise ConfigurationError("%s: %s" % (self.prog, message),
                                 EXIT_NON_POSITIVE_INTEGER)

def _parser():
    parser = _ArgumentParser(
        prog="boundbuf",
        description="Producers and consumers sharing a bounded circular buffer of jobs.")
    parser.add_argument("values", nargs='*', metavar='N',
                        help="buffer capacity, jobs per producer, number of "
                        "producers, and number of consumers")
    parser.add_argument("-s", "--seed", type=int, metavar='SEED', default=None,
                        help="seed the job generator (default: current time)")
    parser.add_argument("-t", "--timeout", type=float, metavar='SECONDS', default=TIMEOUT,
                        help="seconds a worker waits for the buffer before giving up "
                        "(default: %(default)s)")
    parser.add_argument("-u", "--time-unit", type=float, metavar='SECONDS', default=1.0,
                        help="real seconds per simulated second (default: %(default)s)")
    parser.add_argument("-k", "--key", type=lambda s: int(s, 0), metavar='KEY',
                        default=SEM_KEY, help="key of the semaphore set (default: %#x)" % SEM_KEY)
    parser.add_argument("--stats", action="store_true",
                        help="print statistics at the end of the run")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="enable verbose information")
    parser.add_argument("-vv", "--debug", action="store_true",
                        help="enable debug information")
    return parser

def parse_args(argv):
    """Parse the command line and return (args, settings).

    Raises ConfigurationError if the number of positional arguments
    is wrong or one of them is not a valid number, or if an
    option is unknown or malformed.

    """

    args = _parser().parse_args(argv)
    if len(args.values) != len(ARG_NAMES):
        raise ConfigurationError("Incorrect number of arguments!",
                                 EXIT_INCORRECT_NUMBER_OF_ARGUMENTS)

    nums = []
    for i, s in enumerate(args.values):
        n = check_arg(s)
        if n == -1 or (i == 0 and n == 0):
            raise ConfigurationError(
                "Argument number %d (%s) is not a valid number!\n"
                "Command line arguments are supposed to be positive integers" %
                (i+1, ARG_NAMES[i]), EXIT_NON_POSITIVE_INTEGER)
        nums.append(n)

    settings = Settings(*nums, timeout=args.timeout, time_unit=args.time_unit,
                        seed=args.seed, key=args.key)
    return args, settings

def _setup_logging(args):
    """Send the worker events to stdout and, if asked for, the
    diagnostic logging to stderr. Return what has to be undone."""

    if args.debug:
        logging.basicConfig(level=logging.DEBUG)
    elif args.verbose:
        logging.basicConfig(level=logging.INFO)

    events = logging.getLogger("boundbuf.events")
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    saved = (events.level, events.propagate)
    events.addHandler(handler)
    events.setLevel(logging.INFO)
    events.propagate = False
    return events, handler, saved

def _teardown_logging(events, handler, saved):
    handler.flush()
    events.removeHandler(handler)
    events.setLevel(saved[0])
    events.propagate = saved[1]

def main(argv=None):
    """Run the program with the given arguments (sys.argv[1:] by default)
    and return the exit status."""

    if argv is None:
        argv = sys.argv[1:]

    try:
        args, settings = parse_args(argv)
    except ConfigurationError as e:
        print(e, file=sys.stderr)
        return e.exit_status

    events, handler, saved = _setup_logging(args)
    try:
        stats = Coordinator(settings).run()
    except ResourceError as e:
        print(e, file=sys.stderr)
        print(e.diagnostic, file=sys.stderr)
        return e.errno
    except WorkerError as e:
        print(e, file=sys.stderr)
        return EXIT_WORKER_FAILURE
    finally:
        _teardown_logging(events, handler, saved)

    if args.stats:
        print(stats.report())
    return EXIT_OK
