"""Credential providers scoped to a single hygiene run."""

import os
import re
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from .errors import CredentialsError
from .settings import get_settings


@dataclass(frozen=True)
class Credential:
    token: str
    username: str | None = None


class CredentialProvider(ABC):
    """Resolves a credentials id into a Credential for the lifetime of a block."""

    @abstractmethod
    def lookup(self, credentials_id: str) -> Credential:
        """Return the credential for credentials_id or raise CredentialsError."""

    @contextmanager
    def acquire(self, credentials_id: str) -> Iterator[Credential]:
        yield self.lookup(credentials_id)


def _env_prefix(credentials_id: str) -> str:
    return re.sub(r"[^A-Za-z0-9]", "_", credentials_id).upper()


class EnvCredentialProvider(CredentialProvider):
    """Reads <ID>_TOKEN / <ID>_USERNAME from the environment.

    The id is upper-cased with non-alphanumerics replaced by underscores, so
    "github-creds-on-jenkins" reads GITHUB_CREDS_ON_JENKINS_TOKEN. Falls back to
    GITHUB_TOKEN from settings.
    """

    def __init__(self, environ: dict[str, str] | None = None):
        self._environ = environ if environ is not None else os.environ

    def lookup(self, credentials_id: str) -> Credential:
        prefix = _env_prefix(credentials_id)
        token = self._environ.get(f"{prefix}_TOKEN") or get_settings().github_token
        if not token:
            raise CredentialsError(
                f"no token for credentials id {credentials_id!r}: set {prefix}_TOKEN or GITHUB_TOKEN"
            )
        return Credential(token=token, username=self._environ.get(f"{prefix}_USERNAME"))


class StaticCredentialProvider(CredentialProvider):
    """Always yields the same credential."""

    def __init__(self, token: str, username: str | None = None):
        self._credential = Credential(token=token, username=username)

    def lookup(self, credentials_id: str) -> Credential:
        return self._credential
