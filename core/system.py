import sys
from typing import List, Optional

from core.clock import Clock
from core.engine import ExecutionEngine
from core.program import Program
from core.scheduler import Scheduler


class Simulator:
    def __init__(self, programs: List[Program], scheduler: Scheduler, sink,
                 clock: Optional[Clock] = None, engine: Optional[ExecutionEngine] = None,
                 verbose: bool = False):
        self.programs = programs
        self.scheduler = scheduler
        self.sink = sink
        self.clock = clock or Clock()
        self.engine = engine or ExecutionEngine(self.log)
        self.verbose = verbose
        self.finished: List[Program] = []

    def log(self, message: str) -> None:
        self.sink.write(self.clock.elapsed(), message)

    def debug(self, message: str) -> None:
        if self.verbose:
            print(f"[t={self.clock.elapsed():.6f}] {message}", file=sys.stderr)

    # main loop
    def run(self) -> List[Program]:
        self.finished = []
        self.clock.start()
        self.log("Simulator program starting")

        self.log("OS: preparing all processes")
        self.scheduler.prepare(self.programs)
        self.debug(f"{len(self.programs)} programs ready under {self.scheduler.name}")

        while self.scheduler.has_ready():
            self.log("OS: selecting next process")
            program = self.scheduler.select_next()
            self.debug(f"selected {self.scheduler.running!r}")
            self.engine.advance(program)
            self.scheduler.finish(program)
            self.debug(f"  pid={program.id} -> {program.state.name}")
            if program.done():
                self.finished.append(program)

        self.log("Simulator program ending")
        return self.finished
