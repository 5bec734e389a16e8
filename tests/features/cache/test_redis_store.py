"""Tests for the Redis permission set store."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
import redis.asyncio as redis

from booka_authz.core.exceptions import CacheError
from booka_authz.features.cache import PermissionSetStore, RedisPermissionSetStore
from booka_authz.features.permissions import RolePermissionSet
from booka_authz.features.roles import Role


def make_permission_set() -> RolePermissionSet:
    return RolePermissionSet(
        user_id="U1",
        tenant_id="T1",
        role=Role.STAFF,
        is_super_admin=False,
        permissions=frozenset({"booking:read:all", "profile:read:own"}),
        resolved_at=1700000000.0,
    )


def make_client() -> AsyncMock:
    client = AsyncMock()
    client.get.return_value = None
    client.delete.return_value = 1
    return client


class TestRedisPermissionSetStore:
    """Serialization and failure handling against a mocked client."""

    def test_implements_protocol(self):
        assert isinstance(RedisPermissionSetStore(client=make_client()), PermissionSetStore)

    @pytest.mark.asyncio
    async def test_set_writes_json_with_ttl(self):
        client = make_client()
        store = RedisPermissionSetStore(key_prefix="authz", client=client)

        await store.set(make_permission_set(), "T1", 600)

        key, ttl, payload = client.setex.call_args.args
        assert key == "authz:perms:U1:T1"
        assert ttl == 600
        assert json.loads(payload)["permissions"] == ["booking:read:all", "profile:read:own"]

    @pytest.mark.asyncio
    async def test_get_decodes_entry(self):
        client = make_client()
        client.get.return_value = json.dumps(make_permission_set().to_dict())
        store = RedisPermissionSetStore(client=client)

        assert await store.get("U1", "T1") == make_permission_set()

    @pytest.mark.asyncio
    async def test_get_miss(self):
        store = RedisPermissionSetStore(client=make_client())
        assert await store.get("U1", "T1") is None

    @pytest.mark.asyncio
    async def test_backend_error_is_a_miss(self):
        client = make_client()
        client.get.side_effect = redis.ConnectionError("refused")
        store = RedisPermissionSetStore(client=client)

        assert await store.get("U1", "T1") is None

    @pytest.mark.asyncio
    async def test_corrupt_entry_is_a_miss(self):
        client = make_client()
        client.get.return_value = "{not json"
        store = RedisPermissionSetStore(client=client)

        assert await store.get("U1", "T1") is None

    @pytest.mark.asyncio
    async def test_write_error_is_swallowed(self):
        client = make_client()
        client.setex.side_effect = redis.ConnectionError("refused")
        store = RedisPermissionSetStore(client=client)

        await store.set(make_permission_set(), "T1", 600)

    @pytest.mark.asyncio
    async def test_delete_single_key(self):
        client = make_client()
        store = RedisPermissionSetStore(key_prefix="authz", client=client)

        assert await store.delete("U1", "T1") == 1
        client.delete.assert_awaited_once_with("authz:perms:U1:T1")

    @pytest.mark.asyncio
    async def test_delete_tenant_scans_pattern(self):
        async def scan_iter(match):
            assert match == "authz:perms:*:T1"
            for key in ("authz:perms:U1:T1", "authz:perms:U2:T1"):
                yield key

        client = make_client()
        client.scan_iter = MagicMock(side_effect=scan_iter)
        client.delete.return_value = 2
        store = RedisPermissionSetStore(key_prefix="authz", client=client)

        assert await store.delete_tenant("T1") == 2
        client.delete.assert_awaited_once_with("authz:perms:U1:T1", "authz:perms:U2:T1")

    @pytest.mark.asyncio
    async def test_unconnected_store_reads_as_miss(self):
        store = RedisPermissionSetStore()
        assert await store.get("U1", "T1") is None

    @pytest.mark.asyncio
    async def test_connect_failure_raises_cache_error(self, mocker):
        client = make_client()
        client.ping.side_effect = redis.ConnectionError("refused")
        mocker.patch("booka_authz.features.cache.adapters.redis_adapter.redis.from_url", return_value=client)
        store = RedisPermissionSetStore()

        with pytest.raises(CacheError):
            await store.connect()
