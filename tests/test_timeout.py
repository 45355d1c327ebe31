import threading

import pytest

from wjs.errors import ExecutionTimeout, ScriptRuntimeError
from wjs.interpreter import run_program, run_with_timeout


def test_returns_the_result():
    assert run_with_timeout(lambda: run_program('6 * 7;'), timeout=5) == 42


def test_errors_propagate():
    with pytest.raises(ScriptRuntimeError):
        run_with_timeout(lambda: run_program('y;'), timeout=5)


def test_gives_up_after_the_deadline():
    release = threading.Event()
    try:
        with pytest.raises(ExecutionTimeout) as excinfo:
            run_with_timeout(lambda: release.wait(10), timeout=0.05)
        assert str(excinfo.value) == 'Timeout: execution took longer than 0.05 seconds'
    finally:
        release.set()
