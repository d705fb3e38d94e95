"""Tests for gitlab_mcp/schema/cache.py — memoized introspection."""

import asyncio

import pytest

from gitlab_mcp.clients.models import AuthMode, Credential, OperationKind
from gitlab_mcp.exceptions import AuthorizationError, IntrospectionError, RequestError
from gitlab_mcp.schema.cache import INTROSPECTION_QUERY, SchemaCache, SchemaSnapshot


class TestSchemaSnapshot:

    def test_names(self, introspection_data):
        snapshot = SchemaSnapshot(schema=introspection_data["__schema"])
        assert snapshot.query_names == ["project", "currentUser"]
        assert snapshot.mutation_names == ["createIssue"]

    def test_missing_mutation_type(self):
        snapshot = SchemaSnapshot(schema={"queryType": {"fields": [{"name": "a"}]}, "mutationType": None})
        assert snapshot.mutation_names == []


class TestEnsureIntrospected:

    async def test_one_exchange_across_repeated_calls(self, schemas, hybrid_router, introspection_data):
        shared = hybrid_router.cache.get_shared()
        shared.responder.return_value = introspection_data

        first = await schemas.ensure_introspected()
        for _ in range(4):
            assert await schemas.ensure_introspected() is first

        shared.responder.assert_awaited_once_with(INTROSPECTION_QUERY, None)

    async def test_failures_do_not_poison_cache(self, schemas, hybrid_router, introspection_data):
        shared = hybrid_router.cache.get_shared()
        shared.responder.side_effect = RequestError("Cannot reach GitLab API")

        for _ in range(3):
            with pytest.raises(IntrospectionError, match="Failed to introspect"):
                await schemas.ensure_introspected()
        assert shared.responder.await_count == 3
        assert schemas.list_queries() == []

        shared.responder.side_effect = None
        shared.responder.return_value = introspection_data
        snapshot = await schemas.ensure_introspected()
        assert snapshot.query_names == ["project", "currentUser"]
        assert shared.responder.await_count == 4

    async def test_error_chains_request_error(self, schemas, hybrid_router):
        cause = RequestError("GitLab API returned HTTP 500")
        hybrid_router.cache.get_shared().responder.side_effect = cause
        with pytest.raises(IntrospectionError) as exc_info:
            await schemas.ensure_introspected()
        assert exc_info.value.__cause__ is cause

    async def test_response_without_schema(self, schemas, hybrid_router):
        hybrid_router.cache.get_shared().responder.return_value = {"something": "else"}
        with pytest.raises(IntrospectionError, match="no __schema"):
            await schemas.ensure_introspected()
        assert schemas.get() is None

    async def test_keyed_per_identity(self, schemas, hybrid_router, introspection_data):
        hybrid_router.cache.get_shared().responder.return_value = introspection_data
        await schemas.ensure_introspected()

        cred = Credential(token="user-token")
        assert schemas.list_queries(cred) == []

        user_client = hybrid_router.resolve_client("read", cred)
        user_client.responder.return_value = {
            "__schema": {"queryType": {"fields": [{"name": "echo"}]}, "mutationType": None}
        }
        snapshot = await schemas.ensure_introspected(cred)
        assert snapshot.query_names == ["echo"]
        assert schemas.list_queries() == ["project", "currentUser"]
        user_client.responder.assert_awaited_once()

    async def test_concurrent_first_calls_share_one_exchange(self, schemas, hybrid_router, introspection_data):
        shared = hybrid_router.cache.get_shared()

        async def slow_introspection(query, variables):
            await asyncio.sleep(0.01)
            return introspection_data

        shared.responder.side_effect = slow_introspection
        results = await asyncio.gather(*(schemas.ensure_introspected() for _ in range(5)))

        assert shared.responder.await_count == 1
        assert all(r is results[0] for r in results)

    async def test_unauthorized_caller_is_rejected(self, make_router):
        schemas = SchemaCache(make_router(gitlab_auth_mode=AuthMode.PER_USER))
        with pytest.raises(AuthorizationError, match="requires user authentication"):
            await schemas.ensure_introspected()


class TestViews:

    def test_empty_before_introspection(self, schemas):
        assert schemas.get() is None
        assert schemas.list_queries() == []
        assert schemas.list_mutations() == []

    def test_empty_when_caller_cannot_resolve(self, make_router):
        schemas = SchemaCache(make_router(gitlab_auth_mode=AuthMode.SHARED))
        assert schemas.list_queries() == []

    async def test_lists_after_introspection(self, schemas, hybrid_router, introspection_data):
        hybrid_router.cache.get_shared().responder.return_value = introspection_data
        await schemas.ensure_introspected()
        assert schemas.list_queries() == ["project", "currentUser"]
        assert schemas.list_mutations() == ["createIssue"]

    def test_views_do_not_create_clients(self, schemas, hybrid_router):
        unseen = Credential(token="never-used")
        assert schemas.get(unseen) is None
        assert schemas.list_queries(unseen) == []
        assert schemas.list_mutations(unseen) == []
        assert len(hybrid_router.cache) == 0

    async def test_user_snapshot_visible_after_introspection(self, schemas, hybrid_router, introspection_data):
        cred = Credential(token="user-a")
        client = hybrid_router.resolve_client(OperationKind.READ, cred)
        client.responder.return_value = introspection_data
        await schemas.ensure_introspected(cred)
        assert schemas.list_mutations(cred) == ["createIssue"]
        assert len(hybrid_router.cache) == 1
