"""HTTP client for the repository hosting API."""

from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from gitshelf import __version__
from gitshelf.infrastructure.exceptions import NetworkError, NotFoundError
from gitshelf.infrastructure.logging import get_logger

logger = get_logger(__name__)


class HostingClient:
    """HTTP client for the GitHub tree API and raw content host."""

    def __init__(
        self,
        api_base_url: str = "https://api.github.com",
        raw_base_url: str = "https://raw.githubusercontent.com",
        token: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize hosting client.

        Args:
            api_base_url: Base URL of the REST API
            raw_base_url: Base URL of the raw content host
            token: Optional access token
            timeout: Timeout for every request, in seconds
            transport: Optional httpx transport (tests use ``httpx.MockTransport``)
        """
        self.api_base_url = api_base_url.rstrip("/")
        self.raw_base_url = raw_base_url.rstrip("/")

        self.headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": f"gitshelf/{__version__}",
        }
        if token:
            self.headers["Authorization"] = f"token {token}"

        self.client = httpx.Client(
            headers=self.headers,
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close HTTP client."""
        self.client.close()

    def _get(self, url: str, resource: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        logger.debug("http_get", url=url)
        try:
            response = self.client.get(url, params=params)
        except httpx.HTTPError as e:
            raise NetworkError(f"Request to {url} failed: {e}", url=url) from e

        if response.status_code == 404:
            raise NotFoundError(resource, url=url)

        if response.status_code == 403 and response.headers.get("X-RateLimit-Remaining") == "0":
            raise NetworkError(
                "Hosting API rate limit exceeded", url=url, status_code=403
            )

        if response.is_error:
            raise NetworkError(
                f"{url} returned HTTP {response.status_code}",
                url=url,
                status_code=response.status_code,
            )

        return response

    def get_tree(self, repo_id: str, branch: str) -> Dict[str, Any]:
        """
        Get the recursive tree listing of a branch.

        Raises:
            NotFoundError: Repository or branch does not exist
            NetworkError: Transport failure or non-success status
        """
        url = f"{self.api_base_url}/repos/{repo_id}/git/trees/{quote(branch, safe='')}"
        response = self._get(url, f"{repo_id}@{branch}", params={"recursive": "1"})
        try:
            data = response.json()
        except ValueError as e:
            raise NetworkError(f"Invalid tree listing from {url}", url=url) from e

        if not isinstance(data, dict) or not isinstance(data.get("tree"), list):
            raise NetworkError(f"Unexpected tree listing from {url}", url=url)
        return data

    def get_raw(self, repo_id: str, branch: str, file_path: str) -> bytes:
        """Get the raw bytes of one file."""
        url = f"{self.raw_base_url}/{repo_id}/{quote(branch, safe='')}/{quote(file_path)}"
        return self._get(url, f"{repo_id}@{branch}:{file_path}").content

    def get_url(self, url: str) -> bytes:
        """Get the raw bytes at an absolute URL."""
        return self._get(url, url).content

    def ping(self) -> Dict[str, Any]:
        """Query the API rate limit endpoint, used by ``doctor``."""
        return self._get(f"{self.api_base_url}/rate_limit", "rate_limit").json()
