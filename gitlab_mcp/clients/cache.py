"""Client cache: one GraphQL client per credential identity, plus the shared client."""

import threading
from collections.abc import Callable

from gitlab_mcp.clients.models import CredentialIdentity
from gitlab_mcp.config.settings import Settings
from gitlab_mcp.exceptions import ConfigurationError
from gitlab_mcp.graphql.base import ClientHandle
from gitlab_mcp.graphql.client import GitLabGraphQLClient

# (gitlab_url, access_token, timeout_seconds) -> handle
ClientFactory = Callable[[str, str, float], ClientHandle]


class ClientCache:
    """Holds the shared-token client and a growing map of per-user clients.

    Entries are never evicted. Lookups of an existing entry are lock-free;
    the miss path re-checks under a lock so one identity never ends up with
    two handles.
    """

    def __init__(self, settings: Settings, factory: ClientFactory = GitLabGraphQLClient):
        self._factory = factory
        self._timeout = settings.timeout_seconds
        self._lock = threading.Lock()
        self._clients: dict[CredentialIdentity, ClientHandle] = {}
        self._shared: ClientHandle | None = None

        shared = settings.shared_credential
        if shared is not None:
            self._shared = factory(settings.gitlab_url, shared.token, self._timeout)

    @property
    def has_shared(self) -> bool:
        return self._shared is not None

    def get_shared(self) -> ClientHandle:
        if self._shared is None:
            raise ConfigurationError("No shared access token configured")
        return self._shared

    def get_or_create(self, identity: CredentialIdentity) -> ClientHandle:
        """Get or create the client bound to ``identity``."""
        client = self._clients.get(identity)
        if client is not None:
            return client

        with self._lock:
            client = self._clients.get(identity)
            if client is None:
                client = self._factory(identity.endpoint, identity.token, self._timeout)
                self._clients[identity] = client
        return client

    def peek(self, identity: CredentialIdentity) -> ClientHandle | None:
        """The client bound to ``identity`` if one exists. Never creates."""
        return self._clients.get(identity)

    def __len__(self) -> int:
        """Number of per-user clients (the shared client is not counted)."""
        return len(self._clients)

    async def close_all(self) -> None:
        """Close every client's connections. Entries stay cached and reopen lazily."""
        if self._shared is not None:
            await self._shared.close()
        for client in list(self._clients.values()):
            await client.close()
