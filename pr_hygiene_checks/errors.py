"""Exceptions raised while checking PR hygiene."""


class HygieneError(Exception):
    """Base class for errors raised by pr_hygiene_checks."""


class ConfigurationError(HygieneError):
    """Raised when the check configuration fails validation."""


class CredentialsError(HygieneError):
    """Raised when no credential can be resolved for a credentials id."""


class ApiUnavailableError(HygieneError):
    """Raised when the PR-files endpoint cannot be reached or returns non-2xx."""

    def __init__(self, url: str, status_code: int | None = None, reason: str | None = None):
        self.url = url
        self.status_code = status_code
        self.reason = reason
        detail = f"status={status_code}" if status_code is not None else f"transport error: {reason}"
        super().__init__(f"GitHub returned {detail} from {url}")


class InvalidResponseError(HygieneError):
    """Raised when the PR-files response body is empty, null or not a file list."""

    def __init__(self, url: str, body=None, reason: str = "invalid PR details JSON"):
        self.url = url
        self.body = body
        super().__init__(f"{reason} returned from {url}: {body!r}")
