import math
import os
import re
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from models.cli_config import CliConfig, DEFAULT_TIMEOUT
from .errors import ConfigurationError

ENV_PREFIX = "GITLAB_CLI_"

# Checked in this order so the first missing flag is the one reported
REQUIRED_FLAGS = ("url-prefix", "group", "token")

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def load_environment(dotenv_path: Optional[str] = None) -> bool:
    """Load a .env file without overriding variables that are already set"""
    return load_dotenv(dotenv_path=dotenv_path, override=False)


def env_var_name(flag: str) -> str:
    return ENV_PREFIX + flag.upper().replace("-", "_")


def parse_duration(text: str) -> float:
    """
    Parse a duration such as "10s", "1m30s" or "250ms" into seconds.

    A bare number is read as seconds.

    Raises:
        ConfigurationError: if the text is not a valid duration
    """
    value = (text or "").strip()
    if not value:
        raise ConfigurationError("empty duration")

    try:
        seconds = float(value)
    except ValueError:
        pass
    else:
        if not math.isfinite(seconds):
            raise ConfigurationError(f"invalid duration {text!r}")
        return seconds

    sign = 1.0
    if value[0] in "+-":
        sign = -1.0 if value[0] == "-" else 1.0
        value = value[1:]

    total = 0.0
    position = 0
    while position < len(value):
        match = _DURATION_PART_RE.match(value, position)
        if not match:
            raise ConfigurationError(f"invalid duration {text!r}")
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        position = match.end()

    if position == 0:
        raise ConfigurationError(f"invalid duration {text!r}")
    return sign * total


def resolve_option(cli_value: Optional[str], flag: str, environ: Mapping[str, str]) -> Optional[str]:
    """Command line wins; otherwise a non-empty GITLAB_CLI_* variable; otherwise None"""
    if cli_value is not None:
        return cli_value
    env_value = environ.get(env_var_name(flag))
    if env_value:
        return env_value
    return None


def build_config(args, environ: Optional[Mapping[str, str]] = None) -> CliConfig:
    """
    Build the run configuration from parsed arguments and the environment.

    Args:
        args: namespace with token, group, url_prefix and timeout attributes
              (None for options not given on the command line)
        environ: environment mapping, defaults to os.environ

    Returns:
        CliConfig: the validated, immutable configuration

    Raises:
        ConfigurationError: if a required option is missing or a value is invalid
    """
    if environ is None:
        environ = os.environ

    values = {}
    for flag in REQUIRED_FLAGS:
        value = resolve_option(getattr(args, flag.replace("-", "_"), None), flag, environ)
        if not value:
            raise ConfigurationError(f"--{flag} must be specified")
        values[flag.replace("-", "_")] = value

    timeout_text = resolve_option(getattr(args, "timeout", None), "timeout", environ)
    timeout = DEFAULT_TIMEOUT if timeout_text is None else parse_duration(timeout_text)
    if timeout <= 0:
        raise ConfigurationError(f"--timeout must be positive, got {timeout_text!r}")

    try:
        return CliConfig(timeout=timeout, **values)
    except ValidationError as e:
        raise ConfigurationError(f"invalid configuration: {e}") from e
