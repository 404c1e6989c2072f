"""Preflight gate deciding whether a build should report hygiene checks."""

import logging

from .models import PR_BRANCH_PREFIX, HygieneConfig, PullRequestContext
from .settings import Settings

logger = logging.getLogger(__name__)


def should_run(
    config: HygieneConfig,
    branch_name: str | None,
    owner_name: str | None,
    repo_name: str | None,
) -> bool:
    """Return True when every precondition for checking the PR holds.

    Conditions are evaluated in order and the first failing one is logged.
    """
    if config.disable_status_check:
        logger.info("prHygiene: skipping PR hygiene check because disableStatusCheck is set.")
        return False
    if not branch_name:
        logger.info("prHygiene: we cannot check the PR because input github branch name is NULL")
        return False
    if not branch_name.startswith(PR_BRANCH_PREFIX):
        logger.info(
            "prHygiene: we cannot check the PR because branch name %r does not start with %s "
            "and this is not a PR build",
            branch_name,
            PR_BRANCH_PREFIX,
        )
        return False
    if not owner_name:
        logger.info("prHygiene: we cannot check the PR because GitHub Org Name is not set.")
        return False
    if not repo_name:
        logger.info("prHygiene: we cannot check the PR because GitHub Repo Name is not set.")
        return False
    return True


def parse_pr_number(branch_name: str | None, change_id: str | None = None) -> str | None:
    """Extract the PR number from a PR-<n> branch name, falling back to change_id.

    Returns None unless the result is a non-empty numeric string.
    """
    number = (branch_name or "").replace(PR_BRANCH_PREFIX, "", 1).strip()
    if not number:
        number = (change_id or "").strip()
    if not number.isdigit():
        return None
    return number


def build_context(settings: Settings, branch_name: str | None = None) -> PullRequestContext:
    """Build the PR context from pipeline settings.

    branch_name overrides the pipeline's BRANCH_NAME.
    """
    branch = branch_name if branch_name is not None else settings.branch_name
    return PullRequestContext(
        owner=(settings.owner_name or "").strip(),
        repo=(settings.repo_name or "").strip(),
        branch_name=branch,
        pr_number=parse_pr_number(branch, settings.change_id),
        target_url=settings.build_url or settings.run_display_url,
        commit_sha=settings.git_commit,
    )
