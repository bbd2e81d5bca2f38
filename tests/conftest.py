import io

import pytest

from stackcalc.interpreter import Interpreter


@pytest.fixture
def interp():
    """Fresh session with the standard prelude loaded."""
    return Interpreter()


@pytest.fixture
def bare():
    """Fresh session with primitives only."""
    return Interpreter(prelude=None)


@pytest.fixture
def make_io_interp():
    """Build a prelude-less session reading `text` as stdin; returns (interp, stdout)."""
    def _make(text: str = ""):
        stdout = io.StringIO()
        return Interpreter(prelude=None, stdin=io.StringIO(text), stdout=stdout), stdout
    return _make
