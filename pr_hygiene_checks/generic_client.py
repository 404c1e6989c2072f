"""GitHub REST client for the PR-files endpoint using httpx."""

import json

import httpx

from .errors import ApiUnavailableError
from .models import ApiResponse
from .settings import DEFAULT_API_URL

ACCEPT_HEADER = "application/vnd.github.v3+json"
TIMEOUT_SECONDS = 30.0


class PullRequestFilesClient:
    """Thin authenticated client for GET /repos/{owner}/{repo}/pulls/{n}/files.

    A single request per call: no retry, no pagination, no cache.
    """

    def __init__(self, token: str, api_url: str = DEFAULT_API_URL):
        self.api_url = api_url.rstrip("/")
        self._client = httpx.Client(
            headers={
                "Authorization": f"token {token}",
                "Accept": ACCEPT_HEADER,
            },
            timeout=TIMEOUT_SECONDS,
        )

    def files_url(self, owner: str, repo: str, pr_number: str) -> str:
        return f"{self.api_url}/repos/{owner}/{repo}/pulls/{pr_number}/files"

    def get_pull_request_files(self, owner: str, repo: str, pr_number: str) -> ApiResponse:
        """Fetch the first page of changed files for a PR.

        Raises ApiUnavailableError on transport errors and non-2xx responses.
        A body that is not valid JSON is returned as None.
        """
        url = self.files_url(owner, repo, pr_number)
        try:
            resp = self._client.request("GET", url)
        except httpx.HTTPError as e:
            raise ApiUnavailableError(url, reason=f"{type(e).__name__}: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise ApiUnavailableError(url, status_code=resp.status_code)

        try:
            body = resp.json() if resp.content else None
        except (json.JSONDecodeError, UnicodeDecodeError):
            body = None
        return ApiResponse(status=resp.status_code, body=body, url=url)

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
