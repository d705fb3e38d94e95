"""Shared fixtures for the GitLab Tool Gateway test suite."""

from unittest.mock import AsyncMock

import pytest

from gitlab_mcp.clients.cache import ClientCache
from gitlab_mcp.clients.models import AuthMode, Credential
from gitlab_mcp.config.settings import Settings, get_settings
from gitlab_mcp.graphql.base import ClientHandle
from gitlab_mcp.proxy.router import RequestRouter
from gitlab_mcp.schema.cache import SchemaCache

GATEWAY_ENV_VARS = (
    "GITLAB_URL",
    "GITLAB_SHARED_ACCESS_TOKEN",
    "GITLAB_MAX_PAGE_SIZE",
    "GITLAB_TIMEOUT",
    "GITLAB_AUTH_MODE",
    "LOG_LEVEL",
    "AUDIT_LOG_FILE",
)


class FakeClient(ClientHandle):
    """In-memory client handle that records construction arguments."""

    def __init__(self, gitlab_url: str, access_token: str, timeout: float = 30.0):
        self.endpoint = f"{gitlab_url.rstrip('/')}/api/graphql"
        self.gitlab_url = gitlab_url
        self.token = access_token
        self.timeout = timeout
        self.responder = AsyncMock(return_value={})
        self.closed = False

    async def request(self, query: str, variables: dict | None = None) -> dict:
        return await self.responder(query, variables)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep host configuration variables from leaking into settings."""
    for name in GATEWAY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def override_settings(monkeypatch):
    """Factory fixture: set env vars and clear settings cache.

    Usage:
        override_settings(GITLAB_AUTH_MODE="per-user", GITLAB_SHARED_ACCESS_TOKEN="tok")
    """
    def _override(**kwargs):
        for key, value in kwargs.items():
            monkeypatch.setenv(key.upper(), str(value))
        # Clear lru_cache so Settings re-reads env
        get_settings.cache_clear()

    yield _override

    get_settings.cache_clear()


@pytest.fixture
def make_settings():
    """Build Settings directly, ignoring the environment's .env file."""
    def _make(**kwargs) -> Settings:
        kwargs.setdefault("gitlab_url", "https://gitlab.example.com")
        kwargs.setdefault("gitlab_auth_mode", AuthMode.HYBRID)
        return Settings(_env_file=None, **kwargs)

    return _make


@pytest.fixture
def make_router(make_settings):
    """Build a RequestRouter whose cache creates FakeClient handles."""
    def _make(**kwargs) -> RequestRouter:
        settings = make_settings(**kwargs)
        return RequestRouter(settings, ClientCache(settings, factory=FakeClient))

    return _make


@pytest.fixture
def hybrid_router(make_router) -> RequestRouter:
    return make_router(gitlab_shared_access_token="shared-token")


@pytest.fixture
def schemas(hybrid_router) -> SchemaCache:
    return SchemaCache(hybrid_router)


@pytest.fixture
def user_credential() -> Credential:
    return Credential(token="user-token-abc")


@pytest.fixture
def introspection_data() -> dict:
    return {
        "__schema": {
            "queryType": {"name": "Query", "fields": [{"name": "project"}, {"name": "currentUser"}]},
            "mutationType": {"name": "Mutation", "fields": [{"name": "createIssue"}]},
        }
    }
