"""Tests for PermissionResolver."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from booka_authz.core.exceptions import IndeterminateAccessError
from booka_authz.features.cache import PermissionSetStore
from booka_authz.features.permissions import PermissionResolver, RolePermissionSet
from booka_authz.features.roles import Role, catalog_permissions
from booka_authz.features.users import InMemoryUserDirectory


class DictStore(PermissionSetStore):
    """Shared store kept in a dict, standing in for Redis."""

    def __init__(self):
        self.entries = {}

    async def get(self, user_id, tenant_key):
        return self.entries.get((user_id, tenant_key))

    async def set(self, permission_set, tenant_key, ttl):
        self.entries[(permission_set.user_id, tenant_key)] = permission_set

    async def delete(self, user_id, tenant_key=None):
        doomed = [k for k in self.entries if k[0] == user_id and (tenant_key is None or k[1] == tenant_key)]
        for key in doomed:
            del self.entries[key]
        return len(doomed)

    async def delete_tenant(self, tenant_key):
        doomed = [k for k in self.entries if k[1] == tenant_key]
        for key in doomed:
            del self.entries[key]
        return len(doomed)


class GatedLoader:
    """Reads the directory, then holds the result until released."""

    def __init__(self, directory):
        self.directory = directory
        self.read = asyncio.Event()
        self.release = asyncio.Event()

    async def load_user(self, user_id, tenant_hint=None):
        user = await self.directory.load_user(user_id, tenant_hint)
        self.read.set()
        await self.release.wait()
        return user


class TestPermissionChecks:
    """Boolean permission checks."""

    @pytest.mark.asyncio
    async def test_has_permission(self, resolver):
        assert await resolver.has_permission("U1", "T1", "booking:read:own")
        assert not await resolver.has_permission("U1", "T1", "booking:read:all")

    @pytest.mark.asyncio
    async def test_inherited_permission(self, resolver):
        assert await resolver.has_permission("O1", "T1", "schedule:update:own")

    @pytest.mark.asyncio
    async def test_malformed_permission_is_false(self, resolver, caplog):
        assert not await resolver.has_permission("SA", "T1", "BOOKING:READ")
        assert "Malformed permission" in caplog.text

    @pytest.mark.asyncio
    @pytest.mark.parametrize("user_id", ["SA", "U1"])
    async def test_trailing_newline_is_malformed(self, resolver, user_id):
        assert not await resolver.has_permission(user_id, "T1", "system:manage:all\n")
        assert not await resolver.has_permission(user_id, "T1", "x:y:all\n")

    @pytest.mark.asyncio
    async def test_non_member_is_false(self, resolver):
        assert not await resolver.has_permission("U2", "T1", "service:read:all")

    @pytest.mark.asyncio
    async def test_has_all_permissions(self, resolver):
        assert await resolver.has_all_permissions("M1", "T1", ["team:read:all", "booking:read:own"])
        assert not await resolver.has_all_permissions("M1", "T1", ["team:read:all", "billing:read:all"])
        assert await resolver.has_all_permissions("M1", "T1", [])

    @pytest.mark.asyncio
    async def test_has_any_permissions(self, resolver):
        assert await resolver.has_any_permissions("U1", "T1", ["billing:read:all", "service:read:all"])
        assert not await resolver.has_any_permissions("U1", "T1", ["billing:read:all"])
        assert not await resolver.has_any_permissions("U1", "T1", [])

    @pytest.mark.asyncio
    async def test_loader_failure_raises(self):
        loader = AsyncMock()
        loader.load_user.side_effect = TimeoutError()
        resolver = PermissionResolver(loader=loader)

        with pytest.raises(IndeterminateAccessError) as exc_info:
            await resolver.has_permission("U1", "T1", "booking:read:own")
        assert isinstance(exc_info.value.__cause__, TimeoutError)


class TestPermissionSets:
    """Resolution into RolePermissionSet."""

    @pytest.mark.asyncio
    async def test_set_carries_identity(self, resolver):
        permission_set = await resolver.get_permission_set("M1", "T1")

        assert permission_set.user_id == "M1"
        assert permission_set.tenant_id == "T1"
        assert permission_set.role == Role.MANAGER
        assert "booking:read:own" in permission_set.permissions

    @pytest.mark.asyncio
    async def test_superadmin_gets_full_catalog(self, resolver):
        permission_set = await resolver.get_permission_set("SA", None)

        assert permission_set.is_super_admin
        assert permission_set.tenant_id is None
        assert permission_set.permissions == catalog_permissions()

    @pytest.mark.asyncio
    async def test_primary_tenant_without_hint(self, resolver):
        assert (await resolver.get_permission_set("U2", None)).tenant_id == "T2"

    @pytest.mark.asyncio
    async def test_shared_store_hit_skips_loader(self, directory, cache):
        stored = RolePermissionSet(
            user_id="U1",
            tenant_id="T1",
            role=Role.STAFF,
            is_super_admin=False,
            permissions=frozenset({"booking:read:own"}),
            resolved_at=0.0,
        )
        store = AsyncMock()
        store.get.return_value = stored
        resolver = PermissionResolver(loader=directory, cache=cache, store=store)

        assert await resolver.get_permission_set("U1", "T1") == stored
        assert directory.load_count == 0

    @pytest.mark.asyncio
    async def test_shared_store_miss_is_filled(self, directory, cache):
        store = AsyncMock()
        store.get.return_value = None
        resolver = PermissionResolver(loader=directory, cache=cache, store=store, ttl=300)

        permission_set = await resolver.get_permission_set("U1", "T1")

        store.set.assert_awaited_once_with(permission_set, "T1", 300)


class TestInvalidation:
    """Role and membership changes."""

    @pytest.mark.asyncio
    async def test_role_change_visible_after_invalidation(self, resolver, directory):
        assert not await resolver.has_permission("U1", "T1", "team:manage:all")

        directory.add_member("U1", "T1", "manager")
        assert not await resolver.has_permission("U1", "T1", "team:manage:all")

        await resolver.invalidate_user("U1", "T1")
        assert await resolver.has_permission("U1", "T1", "team:manage:all")

    @pytest.mark.asyncio
    async def test_invalidate_user_drops_hintless_entry(self, resolver):
        await resolver.get_permission_set("U1", None)
        await resolver.get_permission_set("U1", "T1")

        assert await resolver.invalidate_user("U1", "T1") == 2

    @pytest.mark.asyncio
    async def test_removed_member_after_tenant_invalidation(self, resolver, directory):
        await resolver.get_permission_set("U1", "T1")
        await resolver.get_permission_set("U1", None)
        await resolver.get_permission_set("U2", "T2")
        directory.remove_member("U1", "T1")

        assert await resolver.invalidate_tenant("T1") == 2
        assert await resolver.get_permission_set("U1", "T1") is None
        assert resolver.cache.peek("U2", "T2") is not None

    @pytest.mark.asyncio
    async def test_invalidation_reaches_shared_store(self, directory, cache):
        store = AsyncMock()
        store.get.return_value = None
        resolver = PermissionResolver(loader=directory, cache=cache, store=store)

        await resolver.invalidate_user("U1")
        await resolver.invalidate_tenant("T1")

        store.delete.assert_awaited_once_with("U1", None)
        store.delete_tenant.assert_awaited_once_with("T1")


class TestSharedStoreInvalidation:
    """Invalidation across the in-process and shared tiers."""

    @pytest.mark.asyncio
    async def test_load_overtaken_by_invalidation_is_not_shared(self, directory):
        store = DictStore()
        loader = GatedLoader(directory)
        resolver = PermissionResolver(loader=loader, store=store)

        pending = asyncio.create_task(resolver.get_permission_set("M1", "T1"))
        await loader.read.wait()

        directory.add_member("M1", "T1", "staff")
        await resolver.invalidate_user("M1", "T1")
        loader.release.set()

        stale = await pending
        assert stale.role == Role.MANAGER
        assert store.entries == {}

        other_process = PermissionResolver(loader=directory, store=store)
        assert not await other_process.has_permission("M1", "T1", "team:manage:all")
        assert not await resolver.has_permission("M1", "T1", "team:manage:all")

    @pytest.mark.asyncio
    async def test_invalidation_during_store_write_removes_entry(self, directory):
        class SlowStore(DictStore):
            def __init__(self):
                super().__init__()
                self.writing = asyncio.Event()
                self.release = asyncio.Event()

            async def set(self, permission_set, tenant_key, ttl):
                self.writing.set()
                await self.release.wait()
                await super().set(permission_set, tenant_key, ttl)

        store = SlowStore()
        resolver = PermissionResolver(loader=directory, store=store)

        pending = asyncio.create_task(resolver.get_permission_set("M1", "T1"))
        await store.writing.wait()
        await resolver.invalidate_user("M1", "T1")
        store.release.set()
        await pending

        assert store.entries == {}

    @pytest.mark.asyncio
    async def test_undisturbed_load_is_shared(self, directory):
        store = DictStore()
        resolver = PermissionResolver(loader=directory, store=store)

        await resolver.get_permission_set("M1", "T1")

        assert store.entries[("M1", "T1")].role == Role.MANAGER

    @pytest.mark.asyncio
    async def test_tenant_invalidation_drops_hintless_shared_entries(self):
        directory = InMemoryUserDirectory()
        directory.add_member("U1", "T1", "staff")
        directory.add_member("U2", "T2", "staff")
        store = DictStore()
        resolver = PermissionResolver(loader=directory, store=store)
        await resolver.get_permission_set("U1", None)
        await resolver.get_permission_set("U2", None)

        await resolver.invalidate_tenant("T1")

        assert ("U1", "*") not in store.entries
        assert ("U2", "*") in store.entries
