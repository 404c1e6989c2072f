"""Integration tests for the PR-files REST client.

Only external HTTP calls (httpx) are mocked.
"""

import json
from unittest.mock import MagicMock

import httpx
import pytest

from pr_hygiene_checks.errors import ApiUnavailableError
from pr_hygiene_checks.generic_client import ACCEPT_HEADER, PullRequestFilesClient
from pr_hygiene_checks.models import ApiResponse


@pytest.fixture
def client():
    c = PullRequestFilesClient("test-token", api_url="https://github.example.com/api/v3/")
    yield c
    c.close()


def _mock_response(status_code=200, json_body=None, content=None):
    resp = MagicMock(spec=httpx.Response)
    resp.status_code = status_code
    if content is None:
        content = json.dumps(json_body).encode() if json_body is not None else b""
    resp.content = content
    if json_body is not None:
        resp.json.return_value = json_body
    else:
        resp.json.side_effect = json.JSONDecodeError("Expecting value", content.decode(errors="replace"), 0)
    resp.headers = {}
    resp.request = MagicMock()
    return resp


class TestApiResponse:
    def test_fields(self):
        r = ApiResponse(status=200, body=[{"filename": "a"}], url="https://x")
        assert r.status == 200
        assert r.body == [{"filename": "a"}]
        assert r.url == "https://x"


class TestPullRequestFilesClient:
    def test_headers(self, client):
        assert client._client.headers["Authorization"] == "token test-token"
        assert client._client.headers["Accept"] == ACCEPT_HEADER

    def test_files_url(self, client):
        assert (
            client.files_url("org", "repo", "42")
            == "https://github.example.com/api/v3/repos/org/repo/pulls/42/files"
        )

    def test_single_get(self, client):
        body = [{"filename": "src/a.ts", "additions": 1, "deletions": 0}]
        client._client.request = MagicMock(return_value=_mock_response(200, body))

        resp = client.get_pull_request_files("org", "repo", "42")

        client._client.request.assert_called_once_with(
            "GET", "https://github.example.com/api/v3/repos/org/repo/pulls/42/files"
        )
        assert resp.status == 200
        assert resp.body == body
        assert resp.url.endswith("/pulls/42/files")

    @pytest.mark.parametrize("status", [401, 404, 422, 500, 502])
    def test_non_2xx_is_unavailable(self, client, status):
        client._client.request = MagicMock(return_value=_mock_response(status, {"message": "nope"}))

        with pytest.raises(ApiUnavailableError) as exc_info:
            client.get_pull_request_files("org", "repo", "42")

        assert exc_info.value.status_code == status
        assert exc_info.value.url.endswith("/repos/org/repo/pulls/42/files")
        # No retries on the fetch
        assert client._client.request.call_count == 1

    def test_transport_error_is_unavailable(self, client):
        client._client.request = MagicMock(side_effect=httpx.ConnectError("connection failed"))

        with pytest.raises(ApiUnavailableError) as exc_info:
            client.get_pull_request_files("org", "repo", "42")

        assert exc_info.value.status_code is None
        assert "ConnectError" in str(exc_info.value)

    def test_empty_body(self, client):
        client._client.request = MagicMock(return_value=_mock_response(200, None))

        resp = client.get_pull_request_files("org", "repo", "42")
        assert resp.body is None

    def test_unparsable_body(self, client):
        client._client.request = MagicMock(return_value=_mock_response(200, None, content=b"<html>"))

        resp = client.get_pull_request_files("org", "repo", "42")
        assert resp.body is None

    def test_context_manager_closes(self):
        with PullRequestFilesClient("t") as c:
            pass
        assert c._client.is_closed
