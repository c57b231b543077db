# Simulation log sink
import sys
from enum import Enum
from typing import Optional, TextIO

from core.errors import ConfigurationError


class LogLocation(Enum):
    SCREEN = 'Screen'
    FILE = 'File'
    BOTH = 'Both'

    @property
    def to_screen(self) -> bool:
        return self in (LogLocation.SCREEN, LogLocation.BOTH)

    @property
    def to_file(self) -> bool:
        return self in (LogLocation.FILE, LogLocation.BOTH)


class LogSink:
    """Writes ``<elapsed> - <message>`` lines to the screen, a file, or both."""

    def __init__(self, location: LogLocation, path: Optional[str] = None,
                 precision: int = 6, stream: Optional[TextIO] = None):
        self.location = location
        self.precision = precision
        self.stream = stream if stream is not None else sys.stdout
        self.path = path
        self._fh: Optional[TextIO] = None
        if location.to_file:
            if not path:
                raise ConfigurationError("A log file path is required when logging to a file")
            try:
                self._fh = open(path, 'w')
            except OSError as exc:
                raise ConfigurationError(f"Unable to open log file {path}: {exc.strerror}") from exc

    def format(self, elapsed: float, message: str) -> str:
        return f"{elapsed:.{self.precision}f} - {message}"

    def write(self, elapsed: float, message: str) -> None:
        line = self.format(elapsed, message)
        if self.location.to_screen:
            print(line, file=self.stream, flush=True)
        if self._fh is not None:
            self._fh.write(line + '\n')

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False
