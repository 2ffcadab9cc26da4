class ContractError(Exception):
    """Base class for counter contract errors."""


class InvalidRequestError(ContractError):
    """The input line is not a valid request envelope."""


class ContractExecutionError(ContractError):
    def __init__(self, message, exit_code=None, stderr="", events=None):
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr
        self.events = events or []


class ContractResponseError(ContractError):
    """The contract produced output that is not a valid response."""


class ConfigError(ContractError):
    """The configuration file or an override is unusable."""
