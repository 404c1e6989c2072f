"""Count the files and lines a PR changes, minus ignored paths."""

import logging
from collections.abc import Iterable

from .errors import InvalidResponseError
from .generic_client import PullRequestFilesClient
from .models import ChangedFile, FileCounts, LineCountStrategy

logger = logging.getLogger(__name__)


def is_ignored(filename: str, ignore_set: Iterable[str]) -> bool:
    """True if filename contains any ignore pattern as a substring.

    "lock" would therefore ignore every path containing "lock".
    """
    return any(pattern in filename for pattern in ignore_set)


def count_changed_files(
    files: Iterable[ChangedFile],
    ignore_set: Iterable[str],
    strategy: LineCountStrategy = "per_file",
) -> FileCounts:
    """Aggregate changed files into file and line counters.

    With the "per_file" strategy each non-ignored file adds one to both
    counters. "additions_deletions" adds the file's additions + deletions to
    the line counter instead.
    """
    ignore_set = tuple(ignore_set)
    counts = FileCounts()
    for changed in files:
        if is_ignored(changed.filename, ignore_set):
            logger.debug("prHygiene: ignoring %s", changed.filename)
            continue
        counts.changed_file_count += 1
        if strategy == "additions_deletions":
            counts.changed_line_count += changed.additions + changed.deletions
        else:
            counts.changed_line_count += 1
    return counts


def parse_changed_files(body, url: str) -> list[ChangedFile]:
    """Turn a PR-files response body into ChangedFile records.

    Raises InvalidResponseError for empty, null or malformed bodies.
    """
    if not body or not isinstance(body, list):
        raise InvalidResponseError(url, body)
    files = []
    for record in body:
        if not isinstance(record, dict) or not isinstance(record.get("filename"), str):
            raise InvalidResponseError(url, record, reason="file record without filename")
        try:
            files.append(ChangedFile.from_api(record))
        except (TypeError, ValueError) as e:
            raise InvalidResponseError(url, record, reason=f"malformed file record ({e})") from e
    return files


def aggregate(
    owner: str,
    repo: str,
    pr_number: str,
    ignore_set: Iterable[str],
    client: PullRequestFilesClient,
    strategy: LineCountStrategy = "per_file",
) -> FileCounts:
    """Fetch the PR's changed files and count those not ignored.

    Only the first page the endpoint returns is considered.
    Raises ApiUnavailableError or InvalidResponseError; nothing is partially counted.
    """
    response = client.get_pull_request_files(owner, repo, pr_number)
    files = parse_changed_files(response.body, response.url)
    counts = count_changed_files(files, ignore_set, strategy)
    logger.info(
        "prHygiene: %s/%s#%s changed_file_count=%d changed_line_count=%d (%d files returned)",
        owner,
        repo,
        pr_number,
        counts.changed_file_count,
        counts.changed_line_count,
        len(files),
    )
    return counts
