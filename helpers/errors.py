class GitLabCliError(Exception):
    """Base class for every error the CLI reports before exiting"""


class ConfigurationError(GitLabCliError):
    """A required option is missing or a value cannot be used"""


class TransportError(GitLabCliError):
    """The request never produced a usable response (connection, DNS, timeout)"""

    def __init__(self, url: str, cause: Exception):
        self.url = url
        self.cause = cause
        super().__init__(f"request to {url} failed: {cause}")


class HTTPStatusError(GitLabCliError):
    """GitLab answered with something other than 200 OK"""

    def __init__(self, url: str, status_code: int, reason: str = ""):
        self.url = url
        self.status_code = status_code
        self.reason = reason or ""
        super().__init__(f"status={status_code} {self.reason}".rstrip())
