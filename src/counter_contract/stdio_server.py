import json
import logging
import sys

logger = logging.getLogger(__name__)


def read_request_line(stream):
    """Read at most one line; returns None on EOF or a read error."""
    try:
        line = stream.readline()
    except (OSError, UnicodeDecodeError) as e:
        logger.info(f"Failed to read input: {e}")
        return None
    if not line:
        return None  # EOF
    return line.strip()


def emit_event(event, stream):
    stream.write(json.dumps(event.to_dict()) + "\n")
    stream.flush()


def emit_response(response, stream):
    stream.write(json.dumps(response.to_dict()) + "\n")
    stream.flush()


def run_stdio_server(handler, stdin=None, stdout=None, stderr=None):
    """
    Reads a single request line from stdin, calls the handler, and writes the event to stderr
    and the response to stdout.
    The handler takes the raw line (or None) and returns an Outcome. Returns the exit status.
    """
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout
    stderr = sys.stderr if stderr is None else stderr

    outcome = handler(read_request_line(stdin))
    if outcome.event is not None:
        emit_event(outcome.event, stderr)
    emit_response(outcome.response, stdout)
    return outcome.exit_code
