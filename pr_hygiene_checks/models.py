"""Data models and constants for PR hygiene checks."""

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigurationError

PR_BRANCH_PREFIX = "PR-"
DEFAULT_CREDENTIALS_ID = "github-creds-on-jenkins"
DEFAULT_CHANGED_FILE_COUNT_LIMIT = 10
DEFAULT_CHANGED_LINE_COUNT_LIMIT = 300
# Generated lockfiles never count towards PR size
DEFAULT_IGNORED_FILE_PATHS = ("yarn.lock", "package-lock.json")

FILES_CHANGED_CONTEXT = "Files Changed Check"
LINES_CHANGED_CONTEXT = "Lines Changed Check"

LineCountStrategy = Literal["per_file", "additions_deletions"]


class HygieneConfig(BaseModel):
    """Check configuration for one pipeline run.

    Accepts the camelCase keys used in pipeline definitions as well as the
    snake_case attribute names.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    disable_status_check: bool = Field(default=False, alias="disableStatusCheck")
    github_credentials_id: str = Field(
        default=DEFAULT_CREDENTIALS_ID, alias="githubCredentialsId", min_length=1
    )
    changed_file_count_limit: int = Field(
        default=DEFAULT_CHANGED_FILE_COUNT_LIMIT, alias="changedFileCountLimit", ge=0
    )
    changed_line_count_limit: int = Field(
        default=DEFAULT_CHANGED_LINE_COUNT_LIMIT, alias="changedLineCountLimit", ge=0
    )
    list_of_file_paths_to_be_ignored: list[str] = Field(
        default_factory=list, alias="listOfFilePathsToBeIgnored"
    )
    line_count_strategy: LineCountStrategy = Field(default="per_file", alias="lineCountStrategy")

    @property
    def ignore_set(self) -> tuple[str, ...]:
        """User ignore patterns merged with the defaults, duplicates removed."""
        merged = [*self.list_of_file_paths_to_be_ignored, *DEFAULT_IGNORED_FILE_PATHS]
        return tuple(dict.fromkeys(p for p in merged if p))

    @classmethod
    def from_mapping(cls, data: dict | None) -> "HygieneConfig":
        """Validate a config mapping, raising ConfigurationError on bad values."""
        try:
            return cls.model_validate(data or {})
        except ValidationError as e:
            raise ConfigurationError(f"invalid hygiene config: {e}") from e


def load_config(path: Path | None) -> HygieneConfig:
    """Load a HygieneConfig from a JSON file, or defaults when path is None."""
    if path is None:
        return HygieneConfig()
    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"cannot read config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"config file {path} must contain a JSON object")
    return HygieneConfig.from_mapping(data)


@dataclass
class PullRequestContext:
    """Identity of the PR under check, derived from the pipeline environment."""

    owner: str
    repo: str
    branch_name: str | None
    pr_number: str | None
    target_url: str | None = None
    commit_sha: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass
class ChangedFile:
    """One record from the PR-files endpoint."""

    filename: str
    additions: int = 0
    deletions: int = 0

    @classmethod
    def from_api(cls, record: dict) -> "ChangedFile":
        return cls(
            filename=record["filename"],
            additions=int(record.get("additions") or 0),
            deletions=int(record.get("deletions") or 0),
        )


@dataclass
class FileCounts:
    changed_file_count: int = 0
    changed_line_count: int = 0


class CheckStatus(str, Enum):
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"

    @property
    def state(self) -> str:
        """State string accepted by the GitHub statuses API."""
        return self.value.lower()


@dataclass
class CheckResult:
    """Outcome of one published status check."""

    context: str
    status: CheckStatus
    description: str
    target_url: str | None = None


class RunState(str, Enum):
    SKIPPED = "skipped"
    ABORTED = "aborted"
    COMPLETED = "completed"


@dataclass
class RunReport:
    """Terminal state of one hygiene run."""

    state: RunState
    reason: str | None = None
    counts: FileCounts | None = None
    results: list[CheckResult] = field(default_factory=list)


@dataclass
class ApiResponse:
    """Response from the GitHub REST API client."""

    status: int
    body: dict | list | None
    url: str
