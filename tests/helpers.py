"""
Shared builders for simulator tests.
"""
import os
import subprocess
import sys

from core.operation import Operation, OperationKind
from core.program import Program

REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def make_program(*bursts, cycle_time=1):
    """Build a framed program; each burst is (kind, resource, cycles)."""
    ops = [Operation(OperationKind.PROGRAM, 'start', 0)]
    for kind, resource, cycles in bursts:
        ops.append(Operation(kind, resource, cycles, cycle_time))
    ops.append(Operation(OperationKind.PROGRAM, 'end', 0))
    return Program(ops)


def cpu_program(cycles, cycle_time=1):
    return make_program((OperationKind.PROCESSING, 'run', cycles), cycle_time=cycle_time)


class RecordingSink:
    def __init__(self):
        self.records = []

    def write(self, elapsed, message):
        self.records.append((elapsed, message))

    @property
    def messages(self):
        return [msg for _, msg in self.records]


def run_cli(config, *extra):
    return subprocess.run(
        [sys.executable, os.path.join(REPO_ROOT, 'ossim.py'), os.path.join(REPO_ROOT, config), *extra],
        capture_output=True,
        text=True,
        cwd=REPO_ROOT,
        check=False,
    )


def split_log(stdout):
    """Return (elapsed, message) pairs from the simulator's screen log."""
    pairs = []
    for line in stdout.splitlines():
        if not line.strip():
            continue
        stamp, _, message = line.partition(' - ')
        pairs.append((float(stamp), message))
    return pairs


def process_block(pid, actions):
    lines = ["OS: selecting next process", f"OS: starting process {pid}"]
    for action in actions:
        lines.append(f"Process {pid}: start {action}")
        lines.append(f"Process {pid}: end {action}")
    lines.append(f"OS: removing process {pid}")
    return lines
