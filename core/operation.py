from dataclasses import dataclass
from enum import Enum

from core.errors import MetaDataFormatError


class OperationKind(Enum):
    OS = 'S'
    PROGRAM = 'A'
    PROCESSING = 'P'
    INPUT = 'I'
    OUTPUT = 'O'


# resources accepted for each kind of operation
VALID_RESOURCES = {
    OperationKind.OS: ('start', 'end'),
    OperationKind.PROGRAM: ('start', 'end'),
    OperationKind.PROCESSING: ('run',),
    OperationKind.INPUT: ('hard drive', 'keyboard'),
    OperationKind.OUTPUT: ('hard drive', 'monitor', 'printer'),
}


@dataclass(frozen=True)
class Operation:
    kind: OperationKind
    resource: str      # start/end/run/hard drive/keyboard/monitor/printer
    cycles: int
    cycle_time: int = 0  # milliseconds per cycle

    def __post_init__(self):
        if self.cycles < 0 or self.cycle_time < 0:
            raise MetaDataFormatError(
                f"Operation {self.resource!r} has a negative cost "
                f"({self.cycles} cycles x {self.cycle_time}ms)")

    @property
    def duration(self) -> int:
        """Cost of the operation in milliseconds."""
        return self.cycles * self.cycle_time

    def is_marker(self, resource: str) -> bool:
        return self.kind is OperationKind.PROGRAM and self.resource == resource

    def __repr__(self):
        return f"Operation({self.kind.value}({self.resource}){self.cycles} x {self.cycle_time}ms)"
