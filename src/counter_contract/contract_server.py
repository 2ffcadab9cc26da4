import logging
from dataclasses import dataclass
from typing import Optional

from counter_contract.exceptions import InvalidRequestError
from counter_contract.models import COUNTER_MAX, ContractState, Event, Response, parse_request

logger = logging.getLogger(__name__)

# Error payloads carried by the "Error" event
INVALID_INPUT = "Invalid JSON input"
NO_INPUT = "No input received"
UNKNOWN_METHOD = "Unknown method"
COUNTER_OVERFLOW = "Counter overflow"

LISTED_METHODS = ("initialize", "increment")


@dataclass
class Outcome:
    """Tagged result of one dispatch, translated into output lines and an exit status by the caller."""

    ok: bool
    response: Response
    event: Optional[Event] = None

    @property
    def exit_code(self):
        return 0 if self.ok else 1


def _failure(message, state):
    return Outcome(ok=False, response=Response(result=None, state=state), event=Event("Error", message))


def initialize(state):
    state.counter = 0
    return None, Event("Initialized", state)


def increment(state):
    if state.counter >= COUNTER_MAX:
        raise OverflowError(f"counter already at {COUNTER_MAX}")
    state.counter += 1
    return None, Event("CounterIncremented", state)


def list_methods(state):
    # list_methods is dispatchable but not part of its own listing
    return list(LISTED_METHODS), None


# Method mapping
METHOD_MAPPING = {
    "initialize": initialize,
    "increment": increment,
    "list_methods": list_methods,
}


def handle_contract_request(line):
    """
    Dispatch one raw input line.
    ``line`` is None when nothing could be read from the input stream.
    """
    state = ContractState()

    if line is None:
        logger.info("No input received")
        return _failure(NO_INPUT, state)

    try:
        request = parse_request(line)
    except InvalidRequestError as e:
        logger.info(f"Rejected request: {e}")
        return _failure(INVALID_INPUT, state)

    if request.state is not None:
        state = request.state

    func = METHOD_MAPPING.get(request.method)
    if func is None:
        logger.info(f"Method not found: {request.method}")
        return _failure(UNKNOWN_METHOD, state)

    try:
        result, event = func(state)
    except OverflowError as e:
        logger.info(f"Rejected {request.method}: {e}")
        return _failure(COUNTER_OVERFLOW, state)

    logger.debug(f"Handled {request.method}, counter={state.counter}")
    return Outcome(ok=True, response=Response(result=result, state=state), event=event)
