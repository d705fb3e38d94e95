"""Application settings loaded from environment variables."""

from functools import lru_cache

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from gitlab_mcp.clients.models import AuthMode, Credential
from gitlab_mcp.exceptions import ConfigurationError


class Settings(BaseSettings):
    # GitLab instance
    gitlab_url: str = "https://gitlab.com"
    # Shared read-only token, used for reads when the caller sends none
    gitlab_shared_access_token: str | None = None
    gitlab_max_page_size: int = Field(default=50, ge=1, le=100)
    gitlab_timeout: int = Field(default=30000, ge=1000)  # milliseconds

    # shared | per-user | hybrid
    gitlab_auth_mode: AuthMode = AuthMode.HYBRID

    # Logging
    log_level: str = "INFO"
    audit_log_file: str = ""  # Empty = stdout only

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "frozen": True,
    }

    @field_validator("gitlab_url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("gitlab_url must be an http(s) URL")
        return value

    @field_validator("gitlab_shared_access_token")
    @classmethod
    def _blank_token_is_none(cls, value: str | None) -> str | None:
        return value or None

    @property
    def shared_credential(self) -> Credential | None:
        if self.gitlab_shared_access_token is None:
            return None
        return Credential(token=self.gitlab_shared_access_token, gitlab_url=self.gitlab_url)

    @property
    def timeout_seconds(self) -> float:
        return self.gitlab_timeout / 1000


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process. Invalid values abort startup."""
    try:
        return Settings()
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigurationError(f"Invalid configuration: {problems}") from e
