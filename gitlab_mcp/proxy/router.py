"""Request router: turns (operation, optional user credential) into a ready client."""

import httpx

from gitlab_mcp.clients.cache import ClientCache
from gitlab_mcp.clients.models import Credential, OperationKind
from gitlab_mcp.config.settings import Settings
from gitlab_mcp.exceptions import AuthorizationError, RequestError
from gitlab_mcp.graphql.base import ClientHandle
from gitlab_mcp.logging.audit import RequestTimer, log_exchange
from gitlab_mcp.security.policy import Reject, UseShared, UseUser, decide


class RequestRouter:
    """Single entry point for authorized GraphQL exchanges.

    The router owns the process configuration and the client cache. It
    never resolves a write to the shared client, whatever the auth mode.
    """

    def __init__(self, settings: Settings, cache: ClientCache | None = None):
        self._settings = settings
        self._cache = cache if cache is not None else ClientCache(settings)

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def cache(self) -> ClientCache:
        return self._cache

    def resolve_client(
        self, operation: OperationKind, credential: Credential | None = None
    ) -> ClientHandle:
        """Return the client authorized for this call.

        Raises:
            AuthorizationError: If the policy rejects the call.
        """
        decision = decide(
            operation,
            credential,
            self._settings.gitlab_auth_mode,
            self._cache.has_shared,
        )
        if isinstance(decision, UseUser):
            identity = decision.credential.identity(self._settings.gitlab_url)
            return self._cache.get_or_create(identity)
        if isinstance(decision, UseShared):
            return self._cache.get_shared()
        if isinstance(decision, Reject):
            raise AuthorizationError(decision.reason)
        raise TypeError(f"Unhandled auth decision: {decision!r}")

    def find_client(
        self, operation: OperationKind, credential: Credential | None = None
    ) -> ClientHandle | None:
        """Like ``resolve_client`` but never creates a client or raises on reject."""
        decision = decide(
            operation,
            credential,
            self._settings.gitlab_auth_mode,
            self._cache.has_shared,
        )
        if isinstance(decision, UseUser):
            identity = decision.credential.identity(self._settings.gitlab_url)
            return self._cache.peek(identity)
        if isinstance(decision, UseShared):
            return self._cache.get_shared()
        return None

    async def execute(
        self,
        query: str,
        variables: dict | None = None,
        operation: OperationKind = OperationKind.READ,
        credential: Credential | None = None,
    ) -> dict:
        """Run a GraphQL document with the client the policy selects.

        Returns:
            The decoded ``data`` object.

        Raises:
            AuthorizationError: If no credential qualifies.
            RequestError: If the exchange fails; the cause is chained.
        """
        client = self.resolve_client(operation, credential)
        source = "user" if credential is not None else "shared"

        with RequestTimer() as timer:
            try:
                data = await client.request(query, variables)
            except RequestError as e:
                error = e
            except httpx.HTTPError as e:
                # Handles that don't translate transport errors themselves
                error = RequestError(f"GitLab request failed: {type(e).__name__}")
                error.__cause__ = e
            else:
                error = None

        log_exchange(
            client.endpoint, OperationKind(operation).value, source, timer.elapsed_ms, error
        )
        if error is not None:
            raise error
        return data

    async def close(self) -> None:
        """Gracefully close all cached clients on shutdown."""
        await self._cache.close_all()
