import io
import json
import os

import pytest

from counter_contract.contract_server import handle_contract_request
from counter_contract.runner import ContractRunner
from counter_contract.stdio_server import run_stdio_server

SRC_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))


@pytest.fixture
def run_contract():
    """
    Runs the contract in-process against in-memory streams.
    Returns (exit_code, response, events) with both output channels decoded.
    """

    def _run(stdin_text):
        stdin, stdout, stderr = io.StringIO(stdin_text), io.StringIO(), io.StringIO()
        exit_code = run_stdio_server(handle_contract_request, stdin=stdin, stdout=stdout, stderr=stderr)
        out_lines = stdout.getvalue().splitlines()
        assert len(out_lines) == 1
        events = [json.loads(line) for line in stderr.getvalue().splitlines()]
        return exit_code, json.loads(out_lines[0]), events

    return _run


@pytest.fixture
def request_line():
    def _line(method, state=None, params=None):
        data = {"method": method, "params": params}
        if state is not None:
            data["state"] = state
        return json.dumps(data) + "\n"

    return _line


@pytest.fixture
def contract_env(monkeypatch):
    """Environment under which child processes import the contract module from this checkout."""
    pythonpath = os.environ.get("PYTHONPATH")
    monkeypatch.setenv("PYTHONPATH", SRC_DIR if not pythonpath else os.pathsep.join([SRC_DIR, pythonpath]))
    for name in ("COUNTER_CONTRACT_CONFIG", "COUNTER_CONTRACT_LOG_LEVEL", "COUNTER_CONTRACT_LOG_FILE", "COUNTER_CONTRACT_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def runner(contract_env):
    """A ContractRunner that spawns the contract module from this checkout."""
    return ContractRunner(timeout=30)


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")
