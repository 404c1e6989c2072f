"""Unit tests for status decision and publishing."""

import logging
from unittest.mock import MagicMock

import pytest
import requests
from github import GithubException

from .models import FILES_CHANGED_CONTEXT, CheckStatus
from .reporter import (
    PUBLISH_RETRIES,
    decide_status,
    files_changed_description,
    lines_changed_description,
    report_check,
)


def describe_decide_status():
    def it_passes_at_the_limit():
        assert decide_status(10, 10) is CheckStatus.SUCCESS

    def it_passes_below_the_limit():
        assert decide_status(0, 10) is CheckStatus.SUCCESS

    def it_fails_above_the_limit():
        assert decide_status(11, 10) is CheckStatus.FAILURE


def describe_descriptions():
    def it_describes_files():
        assert files_changed_description(10, 2) == "Expected number of files changed to be <= 10 but was 2"

    def it_describes_lines():
        description = lines_changed_description(300, 4)
        assert description.startswith("Expected number of lines changed to be <= 300 but was 4;")
        assert "added + deleted" in description


def describe_report_check():
    @pytest.fixture
    def publisher():
        return MagicMock()

    def _report(publisher, actual=2, limit=10):
        return report_check(
            FILES_CHANGED_CONTEXT,
            "creds",
            files_changed_description(limit, actual),
            "https://ci/job/1",
            actual,
            limit,
            publisher,
        )

    def it_publishes_success(publisher):
        result = _report(publisher, actual=10, limit=10)

        publisher.publish.assert_called_once_with(
            FILES_CHANGED_CONTEXT,
            CheckStatus.SUCCESS,
            "Expected number of files changed to be <= 10 but was 10",
            "https://ci/job/1",
        )
        assert result.status is CheckStatus.SUCCESS
        assert result.context == FILES_CHANGED_CONTEXT
        assert result.target_url == "https://ci/job/1"

    def it_publishes_failure(publisher):
        result = _report(publisher, actual=11, limit=10)

        assert publisher.publish.call_args.args[1] is CheckStatus.FAILURE
        assert result.status is CheckStatus.FAILURE

    def it_logs_the_final_status(publisher, caplog):
        caplog.set_level(logging.INFO)

        _report(publisher)

        assert "status=SUCCESS" in caplog.text
        assert FILES_CHANGED_CONTEXT in caplog.text

    def it_retries_transient_failures_once_then_succeeds(publisher):
        publisher.publish.side_effect = [GithubException(502, {"message": "Bad Gateway"}, None), None]

        result = _report(publisher)

        assert publisher.publish.call_count == 2
        assert result.status is CheckStatus.SUCCESS

    def it_retries_connection_errors(publisher):
        publisher.publish.side_effect = [requests.ConnectionError("reset"), requests.Timeout("slow"), None]

        _report(publisher)

        assert publisher.publish.call_count == 3

    def it_raises_after_exhausting_retries(publisher):
        error = GithubException(500, {"message": "boom"}, None)
        publisher.publish.side_effect = error

        with pytest.raises(GithubException) as exc_info:
            _report(publisher)

        assert exc_info.value is error
        assert publisher.publish.call_count == PUBLISH_RETRIES + 1 == 3

    def it_does_not_retry_unexpected_errors(publisher):
        publisher.publish.side_effect = ValueError("bug")

        with pytest.raises(ValueError):
            _report(publisher)

        assert publisher.publish.call_count == 1
