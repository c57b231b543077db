# Per-operation dispatch
import threading
import time
from typing import Callable

from core.errors import UnrecognizedOperationKind
from core.operation import Operation, OperationKind
from core.program import Program


IO_ACTIONS = {
    (OperationKind.INPUT, 'hard drive'): 'hard drive input',
    (OperationKind.OUTPUT, 'hard drive'): 'hard drive output',
    (OperationKind.INPUT, 'keyboard'): 'keyboard input',
    (OperationKind.OUTPUT, 'monitor'): 'monitor output',
    (OperationKind.OUTPUT, 'printer'): 'printer output',
}


class ExecutionEngine:
    """Runs a selected program's operations, emulating their cost in wall-clock time.

    CPU bursts sleep on the calling thread. Each I/O burst sleeps on its own
    thread, which is joined before the next operation is dispatched, so the
    caller always sees a blocking, strictly sequential run. Only the wait
    happens off the calling thread; every log line is written from it.
    """

    def __init__(self, log: Callable[[str], None], sleep: Callable[[float], None] = time.sleep):
        self.log = log
        self.sleep = sleep

    def advance(self, program: Program) -> None:
        while not program.done():
            self.process_operation(program)

    def process_operation(self, program: Program) -> None:
        pid = program.id
        op = program.next_operation()
        kind = op.kind

        if kind is OperationKind.PROGRAM:
            if op.resource == 'start':
                self.log(f"OS: starting process {pid}")
            else:
                self.log(f"OS: removing process {pid}")
        elif kind is OperationKind.OS:
            # simulator sentinels carry no work
            return
        elif kind is OperationKind.PROCESSING:
            self.log(f"Process {pid}: start processing action")
            self.sleep(op.duration / 1000)
            self.log(f"Process {pid}: end processing action")
        elif kind in (OperationKind.INPUT, OperationKind.OUTPUT):
            self._process_io(op, pid)
        else:
            raise UnrecognizedOperationKind(
                f"Unrecognized operation kind {kind!r} in process {pid}")

    def _process_io(self, op: Operation, pid: int) -> None:
        action = IO_ACTIONS.get((op.kind, op.resource))
        if action is None:
            raise UnrecognizedOperationKind(
                f"Unrecognized {op.kind.name.lower()} resource {op.resource!r} in process {pid}")
        self.log(f"Process {pid}: start {action}")
        failures = []

        def wait():
            try:
                self.sleep(op.duration / 1000)
            except Exception as exc:
                failures.append(exc)

        io_thread = threading.Thread(target=wait, name=f"io-{pid}")
        io_thread.start()
        io_thread.join()
        # surface the wait's failure on the calling thread
        if failures:
            raise failures[0]
        self.log(f"Process {pid}: end {action}")
