import logging
import socket
import threading
import time
from typing import BinaryIO
from urllib.parse import urlencode

import requests

from models.cli_config import CliConfig
from .errors import HTTPStatusError, TransportError

logger = logging.getLogger(__name__)

PER_PAGE = 100
TOKEN_HEADER = "Private-Token"
TOTAL_PAGES_HEADER = "X-Total-Pages"
CHUNK_SIZE = 64 * 1024


def is_last_page(total_pages: str, page: int) -> bool:
    """An empty or missing total is read as "no more pages" too"""
    return total_pages == "" or total_pages == str(page)


def abort_read(response):
    """Shut down the socket under a streamed response so a blocked read returns"""
    sock = getattr(getattr(response.raw, "connection", None), "sock", None)
    if sock is None:
        return
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError as e:
        logger.debug(f"Socket already closed: {e}")


class GroupProjectsPaginator:
    """Streams every page of a group's project list to a binary output, one body per line"""

    def __init__(self, config: CliConfig, output: BinaryIO):
        self.config = config
        self.output = output
        try:
            self.base_url = config.projects_url
        except ValueError as e:
            raise TransportError(config.url_prefix, e) from e
        self.headers = {TOKEN_HEADER: config.token}

    def page_url(self, page: int) -> str:
        return f"{self.base_url}?{urlencode({'per_page': PER_PAGE, 'page': page})}"

    def fetch_page(self, page: int) -> bool:
        """
        Fetch one page and copy its body to the output

        Args:
            page: 1-based page number

        Returns:
            bool: True when this was the last page

        Raises:
            TransportError: connection, DNS, timeout or stream failure
            HTTPStatusError: any status other than 200
        """
        url = self.page_url(page)
        logger.info(f"url={url}")

        deadline = time.monotonic() + self.config.timeout
        try:
            with requests.get(url, headers=self.headers, timeout=self.config.timeout, stream=True) as response:
                if response.status_code != requests.codes.ok:
                    raise HTTPStatusError(url, response.status_code, response.reason)

                self._copy_body(response, deadline)
                self.output.write(b"\n")
                self.output.flush()

                return is_last_page(response.headers.get(TOTAL_PAGES_HEADER, ""), page)
        except requests.RequestException as e:
            raise TransportError(url, e) from e

    def _copy_body(self, response, deadline: float):
        # The timeout covers the whole page: a watchdog cuts the connection when it expires
        watchdog = threading.Timer(max(deadline - time.monotonic(), 0), abort_read, args=(response,))
        watchdog.daemon = True
        watchdog.start()
        try:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                self.output.write(chunk)
        except requests.RequestException:
            if time.monotonic() >= deadline:
                raise self._timed_out()
            raise
        finally:
            watchdog.cancel()

        if time.monotonic() >= deadline:
            raise self._timed_out()

    def _timed_out(self) -> requests.exceptions.Timeout:
        return requests.exceptions.Timeout(f"page not received within {self.config.timeout}s")

    def run(self) -> int:
        """
        Write every page in order until GitLab reports the last one

        Returns:
            int: number of pages written

        Raises:
            TransportError, HTTPStatusError: the run stops at the first failure
        """
        page = 1
        while not self.fetch_page(page):
            page += 1
        logger.debug(f"Wrote {page} page(s) for group {self.config.group}")
        return page


def run(config: CliConfig, output: BinaryIO) -> int:
    return GroupProjectsPaginator(config, output).run()
