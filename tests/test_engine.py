"""
Tests for operation dispatch in the execution engine.
"""
import threading
import time
from enum import Enum

import pytest

from core.engine import ExecutionEngine
from core.errors import MetaDataFormatError, UnrecognizedOperationKind
from core.operation import Operation, OperationKind
from core.program import Program
from helpers import make_program


class FakeSleep:
    def __init__(self):
        self.calls = []
        self.threads = []

    def __call__(self, seconds):
        self.calls.append(seconds)
        self.threads.append(threading.current_thread())


@pytest.fixture
def engine_parts():
    messages = []
    sleep = FakeSleep()
    return ExecutionEngine(messages.append, sleep=sleep), messages, sleep


def test_processing_and_io_messages(engine_parts):
    engine, messages, sleep = engine_parts
    program = make_program(
        (OperationKind.PROCESSING, 'run', 4),
        (OperationKind.INPUT, 'hard drive', 2),
        (OperationKind.OUTPUT, 'hard drive', 1),
        (OperationKind.INPUT, 'keyboard', 3),
        (OperationKind.OUTPUT, 'monitor', 5),
        (OperationKind.OUTPUT, 'printer', 6),
        cycle_time=10,
    )
    program.id = 7

    engine.advance(program)

    assert messages == [
        "OS: starting process 7",
        "Process 7: start processing action",
        "Process 7: end processing action",
        "Process 7: start hard drive input",
        "Process 7: end hard drive input",
        "Process 7: start hard drive output",
        "Process 7: end hard drive output",
        "Process 7: start keyboard input",
        "Process 7: end keyboard input",
        "Process 7: start monitor output",
        "Process 7: end monitor output",
        "Process 7: start printer output",
        "Process 7: end printer output",
        "OS: removing process 7",
    ]
    assert sleep.calls == pytest.approx([0.04, 0.02, 0.01, 0.03, 0.05, 0.06])
    assert program.done()


def test_cpu_waits_on_caller_io_waits_on_own_thread(engine_parts):
    engine, _, sleep = engine_parts
    program = make_program(
        (OperationKind.PROCESSING, 'run', 1),
        (OperationKind.INPUT, 'keyboard', 1),
    )

    engine.advance(program)

    cpu_thread, io_thread = sleep.threads
    assert cpu_thread is threading.current_thread()
    assert io_thread is not threading.current_thread()
    assert not io_thread.is_alive()


def test_frame_only_program(engine_parts):
    engine, messages, sleep = engine_parts
    program = make_program()
    program.id = 1

    engine.advance(program)

    assert messages == ["OS: starting process 1", "OS: removing process 1"]
    assert sleep.calls == []


def test_zero_cycle_operation_still_logged(engine_parts):
    engine, messages, sleep = engine_parts
    program = make_program((OperationKind.OUTPUT, 'monitor', 0))
    program.id = 2

    engine.advance(program)

    assert "Process 2: start monitor output" in messages
    assert sleep.calls == [0]


class RetiredKind(Enum):
    TRAP = 'T'


def test_unrecognized_kind_fails_loudly(engine_parts):
    engine, messages, _ = engine_parts
    program = Program([Operation(OperationKind.PROGRAM, 'start', 0),
                       Operation(RetiredKind.TRAP, 'run', 1, 1)])
    program.id = 3

    with pytest.raises(UnrecognizedOperationKind, match='TRAP'):
        engine.advance(program)
    assert messages == ["OS: starting process 3"]


def test_unrecognized_io_resource_fails_loudly(engine_parts):
    engine, messages, sleep = engine_parts
    program = Program([Operation(OperationKind.INPUT, 'printer', 1, 1)])

    with pytest.raises(UnrecognizedOperationKind, match='printer'):
        engine.advance(program)
    assert messages == []
    assert sleep.calls == []


def test_real_sleep_duration():
    stamps = []

    def log(message):
        stamps.append((time.perf_counter(), message))

    engine = ExecutionEngine(log)
    engine.advance(make_program((OperationKind.OUTPUT, 'printer', 3), cycle_time=10))

    start = next(t for t, m in stamps if m.endswith("start printer output"))
    end = next(t for t, m in stamps if m.endswith("end printer output"))
    assert end - start >= 0.029
    assert end - start < 0.5


def test_io_wait_failure_reaches_caller():
    messages = []

    def broken_sleep(seconds):
        raise RuntimeError("device wait failed")

    engine = ExecutionEngine(messages.append, sleep=broken_sleep)
    program = make_program((OperationKind.INPUT, 'keyboard', 1))
    program.id = 1

    with pytest.raises(RuntimeError, match='device wait failed'):
        engine.advance(program)
    assert messages == ["OS: starting process 1", "Process 1: start keyboard input"]


@pytest.mark.parametrize('cycles,cycle_time', [(-1, 5), (2, -3)])
def test_negative_cost_is_rejected(cycles, cycle_time):
    with pytest.raises(MetaDataFormatError, match='negative cost'):
        Operation(OperationKind.INPUT, 'keyboard', cycles, cycle_time)
