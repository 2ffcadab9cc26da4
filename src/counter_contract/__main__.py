import sys

from counter_contract.config import DEFAULT_LOGGING_CONFIG, configure_logging, load_logging_config, read_config_file
from counter_contract.contract_server import handle_contract_request
from counter_contract.exceptions import ConfigError
from counter_contract.stdio_server import run_stdio_server


def main():
    # Bad configuration must not cost the caller its response line
    try:
        configure_logging(load_logging_config(read_config_file()))
    except (ConfigError, OSError):
        configure_logging(DEFAULT_LOGGING_CONFIG)
    return run_stdio_server(handle_contract_request)


if __name__ == "__main__":
    sys.exit(main())
