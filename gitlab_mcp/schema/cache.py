"""Schema cache: memoized GraphQL introspection per client.

Snapshots are keyed by the client handle the router resolves. The client
cache guarantees one handle per credential identity (and a single shared
handle), so this is the same as keying by identity without holding tokens
in a second table.
"""

import asyncio
from dataclasses import dataclass

from gitlab_mcp.clients.models import Credential, OperationKind
from gitlab_mcp.exceptions import IntrospectionError, RequestError
from gitlab_mcp.graphql.base import ClientHandle
from gitlab_mcp.logging.audit import get_audit_logger
from gitlab_mcp.proxy.router import RequestRouter

INTROSPECTION_QUERY = """
query IntrospectSchema {
  __schema {
    queryType { name fields { name } }
    mutationType { name fields { name } }
  }
}
"""


@dataclass(frozen=True)
class SchemaSnapshot:
    """The capability surface a GitLab instance reported for one client."""

    schema: dict

    def _field_names(self, root: str) -> list[str]:
        root_type = self.schema.get(root) or {}
        return [f["name"] for f in root_type.get("fields") or []]

    @property
    def query_names(self) -> list[str]:
        return self._field_names("queryType")

    @property
    def mutation_names(self) -> list[str]:
        return self._field_names("mutationType")


class SchemaCache:
    def __init__(self, router: RequestRouter):
        self._router = router
        self._snapshots: dict[ClientHandle, SchemaSnapshot] = {}
        self._locks: dict[ClientHandle, asyncio.Lock] = {}

    async def ensure_introspected(self, credential: Credential | None = None) -> SchemaSnapshot:
        """Introspect once per client and return the stored snapshot.

        A failed attempt stores nothing, so a later call may retry.

        Raises:
            AuthorizationError: If no credential qualifies for a read.
            IntrospectionError: If the introspection exchange fails.
        """
        client = self._router.resolve_client(OperationKind.READ, credential)
        snapshot = self._snapshots.get(client)
        if snapshot is not None:
            return snapshot

        lock = self._locks.setdefault(client, asyncio.Lock())
        async with lock:
            snapshot = self._snapshots.get(client)
            if snapshot is not None:
                return snapshot

            try:
                data = await self._router.execute(
                    INTROSPECTION_QUERY, operation=OperationKind.READ, credential=credential
                )
            except RequestError as e:
                raise IntrospectionError(f"Failed to introspect GitLab GraphQL schema: {e}") from e

            schema = data.get("__schema")
            if not isinstance(schema, dict):
                raise IntrospectionError(
                    "Failed to introspect GitLab GraphQL schema: response has no __schema"
                )

            snapshot = SchemaSnapshot(schema=schema)
            self._snapshots[client] = snapshot

        get_audit_logger().info(
            "Schema introspected",
            extra={"audit_data": {
                "endpoint": client.endpoint,
                "queries": len(snapshot.query_names),
                "mutations": len(snapshot.mutation_names),
            }},
        )
        return snapshot

    def get(self, credential: Credential | None = None) -> SchemaSnapshot | None:
        """The snapshot for the caller's client, or None if not introspected yet.

        Read-only: a credential that has no client yet gets None and no
        client is created for it.
        """
        client = self._router.find_client(OperationKind.READ, credential)
        if client is None:
            return None
        return self._snapshots.get(client)

    def list_queries(self, credential: Credential | None = None) -> list[str]:
        snapshot = self.get(credential)
        return snapshot.query_names if snapshot else []

    def list_mutations(self, credential: Credential | None = None) -> list[str]:
        snapshot = self.get(credential)
        return snapshot.mutation_names if snapshot else []
