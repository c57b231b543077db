# Config + meta-data file parser
import os
import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from core.errors import ConfigurationError, MetaDataFormatError
from core.operation import VALID_RESOURCES, Operation, OperationKind
from core.program import Program
from simio.log import LogLocation


CONFIG_START = 'Start Simulator Configuration File'
SIMULATOR_VERSION = 3.0
SCHEDULING_CODES = ('FIFO', 'SJF', 'SRTF-N')

META_START = 'Start Program Meta-Data Code:'
META_END = 'End Program Meta-Data Code.'
SIM_START = 'S(start)0'
SIM_END = 'S(end)0'

# configuration label -> Config field
CONFIG_LABELS = {
    'version/phase': 'version',
    'file path': 'meta_data_path',
    'cpu scheduling code': 'scheduling_code',
    'quantum time (cycles)': 'quantum',
    'processor cycle time (msec)': 'processor_cycle_time',
    'monitor display time (msec)': 'monitor_display_time',
    'hard drive cycle time (msec)': 'hard_drive_cycle_time',
    'printer cycle time (msec)': 'printer_cycle_time',
    'keyboard cycle time (msec)': 'keyboard_cycle_time',
    'log': 'log',
    'log file path': 'log_file_path',
}
INT_FIELDS = ('quantum', 'processor_cycle_time', 'monitor_display_time',
              'hard_drive_cycle_time', 'printer_cycle_time', 'keyboard_cycle_time')

TOKEN_RE = re.compile(r'^([A-Za-z])\s*\(\s*([^()]*?)\s*\)\s*(-?\d+)$')


@dataclass(frozen=True)
class Config:
    meta_data_path: str
    scheduling_code: str
    quantum: int            # reserved, no implemented policy uses it
    processor_cycle_time: int
    monitor_display_time: int
    hard_drive_cycle_time: int
    printer_cycle_time: int
    keyboard_cycle_time: int
    log_location: LogLocation = LogLocation.SCREEN
    log_file_path: Optional[str] = None

    def cycle_time(self, kind: OperationKind, resource: str) -> int:
        """Milliseconds per cycle for an operation of ``kind`` on ``resource``."""
        if kind is OperationKind.PROCESSING:
            return self.processor_cycle_time
        if kind in (OperationKind.INPUT, OperationKind.OUTPUT):
            by_resource = {
                'hard drive': self.hard_drive_cycle_time,
                'keyboard': self.keyboard_cycle_time,
                'monitor': self.monitor_display_time,
                'printer': self.printer_cycle_time,
            }
            if resource in by_resource:
                return by_resource[resource]
            raise MetaDataFormatError(f"Unrecognized I/O resource {resource!r}")
        if kind in (OperationKind.PROGRAM, OperationKind.OS):
            return 0
        raise MetaDataFormatError(f"Unrecognized operation type {kind!r}, check meta-data file")


def _read_lines(path: str, error) -> List[str]:
    try:
        with open(path, 'r', encoding='utf-8') as fh:
            return [line.strip() for line in fh if line.strip()]
    except OSError as exc:
        raise error(f"Unable to open file {path}") from exc
    except UnicodeDecodeError as exc:
        raise error(f"File {path} is not valid text: {exc.reason} at byte {exc.start}") from exc


def _resolve(path: str, base_dir: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(base_dir, path)


def _parse_log_location(value: str) -> LogLocation:
    value = value.strip().lower()
    if value == 'log to both':
        return LogLocation.BOTH
    if value == 'log to file':
        return LogLocation.FILE
    return LogLocation.SCREEN


def parse_config(path: str) -> Config:
    lines = _read_lines(path, ConfigurationError)
    if not lines or lines[0] != CONFIG_START:
        raise ConfigurationError("Incorrect config file format: start line is missing")
    if len(lines) < 2 or not lines[-1].startswith('End'):
        raise ConfigurationError("Incorrect config file format: end line is missing")

    values: Dict[str, str] = {}
    for line in lines[1:-1]:
        label, sep, value = line.partition(':')
        key = re.sub(r'\s+', ' ', label.strip().lower())
        if not sep or key not in CONFIG_LABELS:
            raise ConfigurationError(f"Unrecognized configuration line: {line!r}")
        name = CONFIG_LABELS[key]
        if name in values:
            raise ConfigurationError(f"Duplicate configuration entry: {line!r}")
        values[name] = value.strip()

    missing = [label for label, name in CONFIG_LABELS.items()
               if name not in values and name != 'log_file_path']
    if missing:
        raise ConfigurationError(f"Missing configuration entries: {', '.join(missing)}")

    try:
        version = float(values['version'])
    except ValueError:
        raise ConfigurationError(f"Invalid simulator version {values['version']!r}") from None
    if version != SIMULATOR_VERSION:
        raise ConfigurationError(f"Wrong simulator version {values['version']}, expected {SIMULATOR_VERSION}")

    code = values['scheduling_code']
    if code not in SCHEDULING_CODES:
        raise ConfigurationError(f"Unrecognized scheduling code {code!r}")

    numbers = {}
    for name in INT_FIELDS:
        try:
            numbers[name] = int(values[name])
        except ValueError:
            raise ConfigurationError(f"Expected an integer for {name}, got {values[name]!r}") from None
        if numbers[name] < 0:
            raise ConfigurationError(f"{name} must not be negative")

    base_dir = os.path.dirname(os.path.abspath(path))
    location = _parse_log_location(values['log'])
    log_file_path = values.get('log_file_path') or None
    if location.to_file and not log_file_path:
        raise ConfigurationError("Log file path is required when logging to a file")
    if log_file_path:
        log_file_path = _resolve(log_file_path, base_dir)

    if not values['meta_data_path']:
        raise ConfigurationError("Meta-data file path is empty")

    return Config(
        meta_data_path=_resolve(values['meta_data_path'], base_dir),
        scheduling_code=code,
        log_location=location,
        log_file_path=log_file_path,
        **numbers,
    )


def parse_operation(token: str, config: Config) -> Operation:
    m = TOKEN_RE.match(token)
    if not m:
        raise MetaDataFormatError(f"Malformed operation {token!r}")
    letter, resource, cycles = m.groups()
    try:
        kind = OperationKind(letter)
    except ValueError:
        raise MetaDataFormatError(f"Unrecognized operation type {letter!r} in {token!r}") from None
    resource = ' '.join(resource.split())
    if resource not in VALID_RESOURCES[kind]:
        raise MetaDataFormatError(f"Unrecognized resource {resource!r} for operation {token!r}")
    cycles = int(cycles)
    if cycles < 0:
        raise MetaDataFormatError(f"Negative cycle count in {token!r}")
    return Operation(kind, resource, cycles, config.cycle_time(kind, resource))


def _split_tokens(text: str) -> List[str]:
    text = text.strip()
    if not text.startswith(META_START):
        raise MetaDataFormatError("Incorrect meta-data file format: start line is missing")
    if not text.endswith(META_END):
        raise MetaDataFormatError(
            "Incorrect meta-data file format: file does not end after simulator operations end")
    body = text[len(META_START):-len(META_END)].strip()
    if not body.endswith('.'):
        raise MetaDataFormatError("Incorrect meta-data file format: simulator end flag is missing")
    tokens = [' '.join(t.split()) for t in body[:-1].split(';')]
    if not tokens or tokens[0] != SIM_START:
        raise MetaDataFormatError("Incorrect meta-data file format: simulator start flag is missing")
    if tokens[-1] != SIM_END or len(tokens) < 2:
        raise MetaDataFormatError("Incorrect meta-data file format: simulator end flag is missing")
    return tokens[1:-1]


def parse_meta_data(path: str, config: Config) -> List[Program]:
    try:
        with open(path, 'r', encoding='utf-8') as fh:
            text = fh.read()
    except OSError as exc:
        raise MetaDataFormatError(f"Unable to open file {path}") from exc
    except UnicodeDecodeError as exc:
        raise MetaDataFormatError(
            f"File {path} is not valid text: {exc.reason} at byte {exc.start}") from exc

    programs: List[Program] = []
    current: Optional[Program] = None
    for token in _split_tokens(text):
        op = parse_operation(token, config)
        if op.kind is OperationKind.OS:
            raise MetaDataFormatError(f"Unexpected simulator flag {token!r}")
        if op.is_marker('start'):
            if current is not None:
                raise MetaDataFormatError("Program started before the previous one ended")
            current = Program()
        elif current is None:
            raise MetaDataFormatError(f"Operation {token!r} is outside a program block")
        current.add_operation(op)
        if op.is_marker('end'):
            programs.append(current)
            current = None
    if current is not None:
        raise MetaDataFormatError("Last program is missing its A(end)0 marker")
    return programs
