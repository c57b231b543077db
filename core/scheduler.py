# Scheduling policies
import heapq
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterable, List, Optional

from core.errors import ConfigurationError
from core.program import Program, ProgramState


class Scheduler:
    """Common ready-set bookkeeping shared by the policies.

    Subclasses only decide how the ready set is ordered: ``enqueue_ready``,
    ``has_ready`` and ``pick_next``.
    """

    name = 'base'

    def __init__(self):
        self.running: Optional[Program] = None
        self._id_counter = 0

    def prepare(self, programs: Iterable[Program]) -> None:
        for program in programs:
            self.enqueue_ready(program)

    def select_next(self) -> Optional[Program]:
        if not self.has_ready():
            return None
        program = self.pick_next()
        # ids are handed out on first selection only
        if program.id == 0:
            self._id_counter += 1
            program.id = self._id_counter
        program.state = ProgramState.RUNNING
        self.running = program
        return program

    def finish(self, program: Program) -> None:
        if program.done():
            program.state = ProgramState.EXIT
        else:
            self.enqueue_ready(program)
        if self.running is program:
            self.running = None

    def enqueue_ready(self, program: Program) -> None:
        raise NotImplementedError

    def has_ready(self) -> bool:
        raise NotImplementedError

    def pick_next(self) -> Program:
        raise NotImplementedError


class FIFOScheduler(Scheduler):
    name = 'FIFO'

    def __init__(self):
        super().__init__()
        self.ready_queue: Deque[Program] = deque()

    def enqueue_ready(self, program: Program) -> None:
        program.state = ProgramState.READY
        self.ready_queue.append(program)

    def has_ready(self) -> bool:
        return bool(self.ready_queue)

    def pick_next(self) -> Program:
        return self.ready_queue.popleft()


@dataclass(order=True)
class ReadyEntry:
    burst: int
    order: int
    program: Program = field(compare=False)


class ShortestJobFirstScheduler(Scheduler):
    """Non-preemptive shortest-total-burst-first.

    Configured as either ``SJF`` or ``SRTF-N``. The key is the burst total
    computed at load time and never decremented, so a program that is
    re-queued keeps its original rank. Ties go to the earliest enqueue.
    """

    name = 'SJF'

    def __init__(self):
        super().__init__()
        self.ready_heap: List[ReadyEntry] = []
        self._enqueue_counter = 0

    def enqueue_ready(self, program: Program) -> None:
        program.state = ProgramState.READY
        self._enqueue_counter += 1
        heapq.heappush(self.ready_heap,
                       ReadyEntry(program.total_burst_time, self._enqueue_counter, program))

    def has_ready(self) -> bool:
        return bool(self.ready_heap)

    def pick_next(self) -> Program:
        return heapq.heappop(self.ready_heap).program


SCHEDULERS = {
    'FIFO': FIFOScheduler,
    'SJF': ShortestJobFirstScheduler,
    'SRTF-N': ShortestJobFirstScheduler,
}


def make_scheduler(code: str) -> Scheduler:
    try:
        return SCHEDULERS[code]()
    except KeyError:
        raise ConfigurationError(f"Unrecognized scheduling code: {code!r}") from None
