"""Decide and publish pass/fail statuses for the hygiene limits."""

import logging

import requests
from github import GithubException

from .github import StatusPublisher
from .models import CheckResult, CheckStatus

logger = logging.getLogger(__name__)

# Publish is attempted once plus this many retries, with no delay in between
PUBLISH_RETRIES = 2
TRANSIENT_PUBLISH_ERRORS = (GithubException, requests.RequestException)


def decide_status(actual_count: int, limit_count: int) -> CheckStatus:
    """FAILURE only when the count is strictly above the limit."""
    if actual_count > limit_count:
        return CheckStatus.FAILURE
    return CheckStatus.SUCCESS


def files_changed_description(limit: int, actual: int) -> str:
    return f"Expected number of files changed to be <= {limit} but was {actual}"


def lines_changed_description(limit: int, actual: int) -> str:
    return (
        f"Expected number of lines changed to be <= {limit} but was {actual}; "
        "number of lines changed (meaning: added + deleted)"
    )


def report_check(
    context_name: str,
    credential_id: str,
    description: str,
    target_url: str | None,
    actual_count: int,
    limit_count: int,
    publisher: StatusPublisher,
    retries: int = PUBLISH_RETRIES,
) -> CheckResult:
    """Publish one status check, retrying transient publish failures.

    The last error is re-raised once all attempts are exhausted.
    """
    status = decide_status(actual_count, limit_count)
    attempts = retries + 1
    for attempt in range(attempts):
        try:
            publisher.publish(context_name, status, description, target_url)
            break
        except TRANSIENT_PUBLISH_ERRORS as e:
            if attempt == attempts - 1:
                raise
            logger.warning(
                "prHygiene: publishing %r with credentials %r failed: %s, retrying (%d/%d)",
                context_name,
                credential_id,
                e,
                attempt + 1,
                retries,
            )

    logger.info(
        "prHygiene: successfully set status=%s description='%s' for context='%s'",
        status.value,
        description,
        context_name,
    )
    return CheckResult(
        context=context_name,
        status=status,
        description=description,
        target_url=target_url,
    )
