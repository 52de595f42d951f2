#!/usr/bin/env python3
"""
gitlab-cli: dump every project of a GitLab group to stdout.

Each page of /api/v4/groups/<group>/projects is written as returned by the
server, followed by a newline. Options can also come from GITLAB_CLI_TOKEN,
GITLAB_CLI_GROUP, GITLAB_CLI_URL_PREFIX and GITLAB_CLI_TIMEOUT (or a .env file).
"""

import argparse
import logging
import os
import sys

from helpers.app_config import build_config, env_var_name, load_environment
from helpers.errors import ConfigurationError, GitLabCliError
from helpers.gitlab_paginator import run

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitlab-cli",
        description="Fetch all projects of a GitLab group, one raw JSON page per line",
    )
    # Defaults stay None so the GITLAB_CLI_* variables can fill unset flags
    parser.add_argument("--token", help="private token")
    parser.add_argument("--group", help="Group name")
    parser.add_argument("--url-prefix", dest="url_prefix", help="URL prefix of gitlab server")
    parser.add_argument("--timeout", help="Timeout of http request (default 10s)")
    return parser


def setup_logging():
    level = logging.getLevelName(os.getenv(env_var_name("log-level"), "INFO").upper())
    # getLevelName gives back "Level X" for names it does not know
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level)


def main(argv=None, output=None) -> int:
    load_environment()
    setup_logging()

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
    except ConfigurationError as e:
        parser.error(str(e))

    try:
        run(config, output if output is not None else sys.stdout.buffer)
    except GitLabCliError as e:
        logger.error(f"*** {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
