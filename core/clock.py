import time


class Clock:
    """Monotonic elapsed-time reference for one simulation run."""

    def __init__(self, now=time.perf_counter):
        self._now = now
        self._start = None

    def start(self) -> None:
        self._start = self._now()

    def elapsed(self) -> float:
        if self._start is None:
            return 0.0
        return self._now() - self._start
