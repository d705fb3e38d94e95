"""Credential models and the enums the auth policy branches on."""

from dataclasses import dataclass, field
from enum import Enum


class AuthMode(str, Enum):
    SHARED = "shared"
    PER_USER = "per-user"
    HYBRID = "hybrid"


class OperationKind(str, Enum):
    READ = "read"
    WRITE = "write"


def normalize_url(url: str) -> str:
    return url.rstrip("/")


@dataclass(frozen=True)
class CredentialIdentity:
    """Cache key for a credential: (effective endpoint, token)."""

    endpoint: str
    token: str = field(repr=False)


@dataclass(frozen=True)
class Credential:
    """A caller-supplied GitLab token, optionally bound to another instance."""

    token: str = field(repr=False)
    gitlab_url: str | None = None

    def __post_init__(self):
        if not self.token:
            raise ValueError("User access token is required")

    def identity(self, default_url: str) -> CredentialIdentity:
        """Resolve the cache key against the configured GitLab URL."""
        return CredentialIdentity(
            endpoint=normalize_url(self.gitlab_url or default_url),
            token=self.token,
        )
