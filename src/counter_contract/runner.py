import json
import logging
import subprocess
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from counter_contract.config import load_runner_config, read_config_file
from counter_contract.exceptions import ContractExecutionError, ContractResponseError

logger = logging.getLogger(__name__)


@dataclass
class ExecutionResult:
    result: Any
    state: Dict[str, Any]
    events: List[Dict[str, Any]] = field(default_factory=list)


class ContractRunner:
    """Runs a contract as a child process, one request per invocation."""

    def __init__(self, command=None, timeout=None, on_event: Optional[Callable[[dict], None]] = None):
        self.command = command or [sys.executable, "-m", "counter_contract"]
        self.timeout = timeout if timeout is not None else load_runner_config(read_config_file())["timeout"]
        self.on_event = on_event

    def _invoke(self, request):
        payload = json.dumps(request) + "\n"
        logger.info(f"Invoking contract {self.command} with method {request['method']}")
        try:
            completed = subprocess.run(
                self.command,
                input=payload,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise ContractExecutionError(f"Contract timed out after {self.timeout}s") from e
        except OSError as e:
            raise ContractExecutionError(f"Failed to start contract: {e}") from e

        events = self._parse_events(completed.stderr)
        if completed.returncode != 0:
            raise ContractExecutionError(
                f"Contract exited with code {completed.returncode}: {completed.stderr.strip()}",
                exit_code=completed.returncode,
                stderr=completed.stderr,
                events=events,
            )
        return self._parse_response(completed.stdout), events

    def _parse_events(self, stderr_data):
        events = []
        for line in stderr_data.splitlines():
            line = line.strip()
            if not line:
                continue
            try:
                event = json.loads(line)
            except ValueError:
                logger.warning(f'Non-JSON message in STDERR: "{line}"')
                continue
            if not isinstance(event, dict) or "event" not in event:
                logger.warning(f'Unrecognized message in STDERR: "{line}"')
                continue
            events.append(event)
        return events

    def _parse_response(self, stdout_data):
        try:
            response = json.loads(stdout_data.strip())
        except ValueError as e:
            raise ContractResponseError(f"Failed to parse contract response: {e}") from e
        if not isinstance(response, dict) or "result" not in response or "state" not in response:
            raise ContractResponseError("Contract did not return a complete response.")
        return response

    def execute_method(self, method, params=None, state=None):
        request = {"method": method, "params": params or {}}
        # Only include state if it's not empty
        if state:
            request["state"] = state

        response, events = self._invoke(request)
        if self.on_event is not None:
            for event in events:
                self.on_event(event)
        return ExecutionResult(result=response["result"], state=response["state"], events=events)

    def get_available_methods(self):
        response, _ = self._invoke({"method": "list_methods", "params": {}})
        if not isinstance(response["result"], list):
            raise ContractResponseError("Invalid response format from contract.")
        return response["result"]
