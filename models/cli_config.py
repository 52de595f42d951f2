import posixpath
from urllib.parse import quote, urlsplit, urlunsplit

from pydantic import BaseModel, Field

DEFAULT_TIMEOUT = 10.0
PROJECTS_PATH = "/api/v4/groups/{group}/projects"


class CliConfig(BaseModel):
    """Immutable settings for one run of the group projects export"""
    token: str = Field(..., min_length=1, description="GitLab private token")
    group: str = Field(..., min_length=1, description="Group name or ID")
    url_prefix: str = Field(..., min_length=1, description="URL prefix of the GitLab server")
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0, description="Per-request timeout in seconds")

    class Config:
        frozen = True

    @property
    def projects_url(self) -> str:
        """Group projects endpoint joined onto the prefix path, without query string"""
        parts = urlsplit(self.url_prefix)
        path = posixpath.normpath(
            posixpath.join("/", parts.path, PROJECTS_PATH.format(group=self.group).lstrip("/"))
        )
        # normpath keeps a leading "//"
        path = "/" + path.lstrip("/")
        return urlunsplit((parts.scheme, parts.netloc, quote(path, safe="/:@"), "", ""))
