"""Run the hygiene checks for one PR build.

The flow is gate -> aggregate -> report. Every failure is logged and turned
into a RunReport so the surrounding pipeline never fails because of it.
"""

import logging
from contextlib import closing

from .aggregator import aggregate
from .credentials import Credential, CredentialProvider, EnvCredentialProvider
from .errors import ApiUnavailableError, CredentialsError, InvalidResponseError
from .gate import build_context, should_run
from .generic_client import PullRequestFilesClient
from .github import StatusPublisher
from .models import (
    FILES_CHANGED_CONTEXT,
    LINES_CHANGED_CONTEXT,
    FileCounts,
    HygieneConfig,
    PullRequestContext,
    RunReport,
    RunState,
)
from .reporter import (
    TRANSIENT_PUBLISH_ERRORS,
    files_changed_description,
    lines_changed_description,
    report_check,
)
from .settings import DEFAULT_API_URL, get_settings

logger = logging.getLogger(__name__)


class HygieneChecker:
    """Checks PR size against the configured limits and publishes two statuses."""

    def __init__(
        self,
        config: HygieneConfig,
        credentials: CredentialProvider,
        api_url: str = DEFAULT_API_URL,
        files_client_factory=PullRequestFilesClient,
        publisher_factory=StatusPublisher,
    ):
        self.config = config
        self.credentials = credentials
        self.api_url = api_url
        self.files_client_factory = files_client_factory
        self.publisher_factory = publisher_factory

    def run(self, context: PullRequestContext) -> RunReport:
        if not should_run(self.config, context.branch_name, context.owner, context.repo):
            return RunReport(RunState.SKIPPED, reason="preflight gate")
        if context.pr_number is None:
            logger.info("prHygiene: we cannot check the PR because input PR number is NULL")
            return RunReport(RunState.SKIPPED, reason="missing PR number")

        try:
            with self.credentials.acquire(self.config.github_credentials_id) as credential:
                return self._check(context, credential)
        except CredentialsError as e:
            logger.error("prHygiene: %s", e)
            return RunReport(RunState.ABORTED, reason=str(e))
        except Exception as e:
            logger.error(
                "prHygiene: exception while checking PR %s#%s: %s",
                context.full_name,
                context.pr_number,
                e,
                exc_info=True,
            )
            return RunReport(RunState.ABORTED, reason=str(e))

    def collect_counts(self, context: PullRequestContext, credential: Credential) -> FileCounts:
        """Fetch and aggregate the PR's changed files without publishing anything."""
        with closing(self.files_client_factory(credential.token, self.api_url)) as client:
            return aggregate(
                context.owner,
                context.repo,
                context.pr_number,
                self.config.ignore_set,
                client,
                strategy=self.config.line_count_strategy,
            )

    def _check(self, context: PullRequestContext, credential: Credential) -> RunReport:
        try:
            counts = self.collect_counts(context, credential)
        except ApiUnavailableError as e:
            logger.error("prHygiene: %s", e)
            return RunReport(RunState.ABORTED, reason=str(e))
        except InvalidResponseError as e:
            logger.error("prHygiene: %s, skipping", e)
            return RunReport(RunState.ABORTED, reason=str(e))

        config = self.config
        publisher = self.publisher_factory(
            credential.token,
            context.owner,
            context.repo,
            context.pr_number,
            commit_sha=context.commit_sha,
            api_url=self.api_url,
        )
        results = []
        try:
            results.append(
                report_check(
                    FILES_CHANGED_CONTEXT,
                    config.github_credentials_id,
                    files_changed_description(config.changed_file_count_limit, counts.changed_file_count),
                    context.target_url,
                    counts.changed_file_count,
                    config.changed_file_count_limit,
                    publisher,
                )
            )
            results.append(
                report_check(
                    LINES_CHANGED_CONTEXT,
                    config.github_credentials_id,
                    lines_changed_description(config.changed_line_count_limit, counts.changed_line_count),
                    context.target_url,
                    counts.changed_line_count,
                    config.changed_line_count_limit,
                    publisher,
                )
            )
        except TRANSIENT_PUBLISH_ERRORS as e:
            logger.error(
                "prHygiene: exception while publishing status for %s#%s to %s: %s",
                context.full_name,
                context.pr_number,
                self.api_url,
                e,
            )
            return RunReport(RunState.ABORTED, reason=str(e), counts=counts, results=results)
        except Exception as e:
            logger.error(
                "prHygiene: unexpected error while publishing status for %s#%s to %s: %s",
                context.full_name,
                context.pr_number,
                self.api_url,
                e,
                exc_info=True,
            )
            return RunReport(RunState.ABORTED, reason=str(e), counts=counts, results=results)
        finally:
            publisher.close()

        return RunReport(RunState.COMPLETED, counts=counts, results=results)


def run_hygiene_checks(
    config: HygieneConfig,
    branch_name: str | None = None,
    credentials: CredentialProvider | None = None,
) -> RunReport:
    """Run the checks for the current pipeline build.

    branch_name defaults to the pipeline's BRANCH_NAME.
    """
    settings = get_settings()
    context = build_context(settings, branch_name)
    checker = HygieneChecker(
        config,
        credentials or EnvCredentialProvider(),
        api_url=settings.github_api_url,
    )
    report = checker.run(context)
    logger.debug("prHygiene: run finished in state %s", report.state.value)
    return report
