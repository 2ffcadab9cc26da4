import logging
import os

import yaml

from counter_contract.exceptions import ConfigError

DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_TIMEOUT = 10.0
DEFAULT_LOGGING_CONFIG = {"level": DEFAULT_LOG_LEVEL, "file": None}


def read_config_file(config_path=None):
    """Read the YAML config; a missing file means no settings."""
    config_path = config_path or os.environ.get("COUNTER_CONTRACT_CONFIG") or os.path.join(os.path.dirname(__file__), "config.yaml")
    try:
        with open(config_path) as file:
            config = yaml.safe_load(file) or {}
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing YAML configuration: {e}") from e
    if not isinstance(config, dict):
        raise ConfigError(f"Configuration in {config_path} must be a mapping")
    return config


def _section(config, name):
    section = config.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"Configuration section '{name}' must be a mapping")
    return section


# Environment variables override YAML values
def load_logging_config(config):
    logging_config = _section(config, "logging")
    log_level = os.environ.get("COUNTER_CONTRACT_LOG_LEVEL") or logging_config.get("level", DEFAULT_LOG_LEVEL)
    log_file = os.environ.get("COUNTER_CONTRACT_LOG_FILE") or logging_config.get("file")
    return {"level": str(log_level).upper(), "file": log_file}


def load_runner_config(config):
    runner_config = _section(config, "runner")
    raw_timeout = os.environ.get("COUNTER_CONTRACT_TIMEOUT") or runner_config.get("timeout", DEFAULT_TIMEOUT)
    try:
        timeout = float(raw_timeout)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid runner timeout: {raw_timeout!r}") from e
    return {"timeout": timeout}


def configure_logging(logging_config):
    """
    Attach handlers to the package logger.
    stderr is the event channel, so records only ever go to a file.
    """
    logger = logging.getLogger("counter_contract")
    level = getattr(logging, logging_config.get("level", DEFAULT_LOG_LEVEL), None)
    logger.setLevel(level if isinstance(level, int) else logging.WARNING)
    log_file = logging_config.get("file")
    if log_file:
        handler = logging.FileHandler(log_file)
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    else:
        handler = logging.NullHandler()
    logger.handlers = [handler]
    logger.propagate = False
    return logger
