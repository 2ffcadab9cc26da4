import sys

import pytest

from counter_contract.exceptions import ContractExecutionError, ContractResponseError
from counter_contract.runner import ContractRunner

pytestmark = pytest.mark.integration


def test_execute_increment(runner):
    execution = runner.execute_method("increment", state={"counter": 5})
    assert execution.result is None
    assert execution.state == {"counter": 6}
    assert execution.events == [{"event": "CounterIncremented", "data": {"counter": 6}}]


def test_state_carries_across_invocations(runner):
    first = runner.execute_method("initialize")
    second = runner.execute_method("increment", state=first.state)
    third = runner.execute_method("increment", state=second.state)
    assert third.state == {"counter": 2}


def test_events_are_forwarded(runner):
    seen = []
    runner.on_event = seen.append
    runner.execute_method("initialize", state={"counter": 9})
    assert seen == [{"event": "Initialized", "data": {"counter": 0}}]


def test_get_available_methods(runner):
    assert runner.get_available_methods() == ["initialize", "increment"]


def test_unknown_method_raises(runner):
    with pytest.raises(ContractExecutionError) as exc_info:
        runner.execute_method("decrement", state={"counter": 1})
    assert exc_info.value.exit_code == 1
    assert exc_info.value.events == [{"event": "Error", "data": "Unknown method"}]


def test_non_json_stderr_lines_are_skipped(caplog):
    script = "import sys; sys.stdin.readline(); print('warming up', file=sys.stderr); print('{\"result\": 1, \"state\": {\"counter\": 0}}')"
    runner = ContractRunner(command=[sys.executable, "-c", script], timeout=30)
    with caplog.at_level("WARNING", logger="counter_contract.runner"):
        execution = runner.execute_method("anything")
    assert execution.result == 1
    assert execution.events == []
    assert "Non-JSON message in STDERR" in caplog.text


def test_incomplete_response_raises():
    script = "import sys; sys.stdin.readline(); print('{\"result\": null}')"
    runner = ContractRunner(command=[sys.executable, "-c", script], timeout=30)
    with pytest.raises(ContractResponseError):
        runner.execute_method("increment")


def test_missing_executable_raises():
    runner = ContractRunner(command=["/nonexistent/contract-binary"], timeout=5)
    with pytest.raises(ContractExecutionError, match="Failed to start contract"):
        runner.get_available_methods()
