from .errors import GitLabCliError, ConfigurationError, TransportError, HTTPStatusError
from .app_config import build_config, env_var_name, load_environment, parse_duration, resolve_option
from .gitlab_paginator import GroupProjectsPaginator, is_last_page, run

__all__ = [
    'GitLabCliError',
    'ConfigurationError',
    'TransportError',
    'HTTPStatusError',
    'build_config',
    'env_var_name',
    'load_environment',
    'parse_duration',
    'resolve_option',
    'GroupProjectsPaginator',
    'is_last_page',
    'run'
]
