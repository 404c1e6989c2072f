"""Commit status publisher using PyGithub."""

from github import Auth, Github
from github.Commit import Commit
from github.CommitStatus import CommitStatus
from github.GithubObject import NotSet

from .models import CheckStatus
from .settings import DEFAULT_API_URL

# GitHub rejects status descriptions longer than this
MAX_DESCRIPTION_LENGTH = 140


def truncate_description(description: str, max_len: int = MAX_DESCRIPTION_LENGTH) -> str:
    if len(description) <= max_len:
        return description
    return description[: max_len - 3] + "..."


class StatusPublisher:
    """Publishes commit statuses on the head commit of a pull request.

    The commit is the explicit commit_sha when given, otherwise the PR head.
    """

    def __init__(
        self,
        token: str,
        owner: str,
        repo: str,
        pr_number: str,
        commit_sha: str | None = None,
        api_url: str = DEFAULT_API_URL,
    ):
        self._token = token
        self.full_name = f"{owner}/{repo}"
        self.pr_number = pr_number
        self.commit_sha = commit_sha
        self.api_url = api_url.rstrip("/")
        self._github: Github | None = None
        self._commit: Commit | None = None

    @property
    def github(self) -> Github:
        """Lazy-initialize the GitHub client."""
        if self._github is None:
            # report_check owns publish retries
            self._github = Github(auth=Auth.Token(self._token), base_url=self.api_url, retry=None)
        return self._github

    def _get_commit(self) -> Commit:
        if self._commit is None:
            repo = self.github.get_repo(self.full_name)
            sha = self.commit_sha or repo.get_pull(int(self.pr_number)).head.sha
            self._commit = repo.get_commit(sha)
        return self._commit

    def publish(
        self,
        context: str,
        status: CheckStatus,
        description: str,
        target_url: str | None = None,
    ) -> CommitStatus:
        """Create a status on the commit. Raises GithubException on API errors."""
        return self._get_commit().create_status(
            state=status.state,
            target_url=target_url or NotSet,
            description=truncate_description(description),
            context=context,
        )

    def close(self):
        if self._github is not None:
            self._github.close()
