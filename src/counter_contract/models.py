import json
from dataclasses import dataclass, field
from typing import Any, Optional

from counter_contract.exceptions import InvalidRequestError

# Unsigned 64-bit ceiling for the counter
COUNTER_MAX = 2**64 - 1


def _is_unsigned(value):
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= COUNTER_MAX


@dataclass
class ContractState:
    counter: int = 0

    def to_dict(self):
        return {"counter": self.counter}

    @classmethod
    def from_dict(cls, data):
        """Build a state from its wire shape ``{"counter": <u64>}``. Keys other than ``counter`` are ignored."""
        if not isinstance(data, dict):
            raise InvalidRequestError(f"state must be an object, got {type(data).__name__}")
        if "counter" not in data:
            raise InvalidRequestError("state is missing 'counter'")
        if not _is_unsigned(data["counter"]):
            raise InvalidRequestError(f"counter must be an unsigned 64-bit integer, got {data['counter']!r}")
        return cls(counter=data["counter"])


@dataclass
class Request:
    method: str
    params: Any = None
    state: Optional[ContractState] = None


@dataclass
class Response:
    result: Any
    state: ContractState = field(default_factory=ContractState)

    def to_dict(self):
        return {"result": self.result, "state": self.state.to_dict()}


@dataclass
class Event:
    event: str
    data: Any

    def to_dict(self):
        data = self.data.to_dict() if isinstance(self.data, ContractState) else self.data
        return {"event": self.event, "data": data}


def _reject_constant(name):
    raise InvalidRequestError(f"{name} is not valid JSON")


def _reject_duplicate_keys(pairs):
    data = {}
    for key, value in pairs:
        if key in data:
            raise InvalidRequestError(f"Duplicate key {key!r}")
        data[key] = value
    return data

def parse_request(line):
    """
    Decode one input line into a Request.
    Raises InvalidRequestError when the line is not JSON or does not match the envelope shape.
    """
    try:
        data = json.loads(line, parse_constant=_reject_constant, object_pairs_hook=_reject_duplicate_keys)
    except ValueError as e:
        raise InvalidRequestError(f"Malformed JSON: {e}") from e

    if not isinstance(data, dict):
        raise InvalidRequestError("Request must be a JSON object")

    method = data.get("method")
    if not isinstance(method, str):
        raise InvalidRequestError("'method' is required and must be a string")

    state = data.get("state")
    if state is not None:
        state = ContractState.from_dict(state)

    if "params" not in data:
        raise InvalidRequestError("'params' is required, use null for none")

    return Request(method=method, params=data["params"], state=state)
