"""
ossim.py


Operating-system process scheduler simulator.


Reads a simulator configuration file and the program meta-data file it
points to, then replays every program under the configured scheduling
policy (FIFO, or non-preemptive shortest-job-first for SJF/SRTF-N),
logging each scheduler decision and operation with the elapsed time.


Usage:
python ossim.py config.conf
"""


import argparse
import sys

from core.errors import SimulatorError
from core.scheduler import make_scheduler
from core.system import Simulator
from simio.log import LogSink
from simio.parser import parse_config, parse_meta_data


TIMESTAMP_PRECISION = 6


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='ossim (operating-system scheduler simulator)')
    parser.add_argument('config', help='Path to simulator configuration file')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Print scheduler diagnostics to stderr')
    args = parser.parse_args(argv)

    try:
        config = parse_config(args.config)
        programs = parse_meta_data(config.meta_data_path, config)
        scheduler = make_scheduler(config.scheduling_code)
        sink = LogSink(config.log_location, config.log_file_path, precision=TIMESTAMP_PRECISION)
    except SimulatorError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.verbose:
        print(f"found {len(programs)} programs", file=sys.stderr)
        print(f"scheduling code is {config.scheduling_code}", file=sys.stderr)

    with sink:
        try:
            Simulator(programs, scheduler, sink, verbose=args.verbose).run()
        except SimulatorError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
