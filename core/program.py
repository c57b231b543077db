from collections import deque
from enum import Enum, auto
from typing import Deque, Iterable, Optional

from core.operation import Operation


class ProgramState(Enum):
    START = auto()
    READY = auto()
    RUNNING = auto()
    EXIT = auto()


class Program:
    """A simulated process: a FIFO queue of operations plus scheduling metadata.

    Program is a passive holder. The scheduler owns ``state`` and ``id``; the
    execution engine consumes ``operations``.
    """

    def __init__(self, operations: Optional[Iterable[Operation]] = None):
        self.operations: Deque[Operation] = deque()
        self.state = ProgramState.START
        self.id = 0
        # fixed at load time, used as the shortest-job ranking key
        self.total_burst_time = 0
        for op in operations or ():
            self.add_operation(op)

    def add_operation(self, operation: Operation) -> None:
        self.operations.append(operation)
        self.total_burst_time += operation.duration

    def next_operation(self) -> Operation:
        return self.operations.popleft()

    def remaining_operations(self) -> int:
        return len(self.operations)

    def done(self) -> bool:
        return not self.operations

    def __repr__(self) -> str:
        return (f"Program(id={self.id}, state={self.state.name}, "
                f"burst={self.total_burst_time}ms, remaining={len(self.operations)})")
