"""
Tests for DirectoryService.

These tests verify:
- Group-filtered search and its search log entries
- Denial for users with no group memberships
- Permission updates, cache refresh and their audit entries
"""

from unittest.mock import AsyncMock

import pytest

from vault.core.exceptions import InvalidInputError, UpstreamUnavailableError
from vault.models.logs import AdminAction

ADMIN_EMAIL = "admin@example.com"
DEV_EMAIL = "dev@example.com"
MARKETING_EMAIL = "marketer@example.com"
OUTSIDER_EMAIL = "nobody@example.com"


class TestDirectorySearch:

    @pytest.mark.asyncio
    async def test_restricted_service_visible_only_to_its_group(self, directory):
        await directory.set_permission("s2", ["DevTeam"], actor_email=ADMIN_EMAIL)

        dev = await directory.search("aws", actor_email=DEV_EMAIL)
        marketing = await directory.search("aws", actor_email=MARKETING_EMAIL)

        assert [r.id for r in dev] == ["s1", "s2"]
        assert [r.id for r in marketing] == ["s1"]

    @pytest.mark.asyncio
    async def test_admin_sees_everything(self, directory):
        await directory.set_permission("s2", ["DevTeam"], actor_email=ADMIN_EMAIL)

        results = await directory.search("aws", actor_email=ADMIN_EMAIL)

        assert [r.id for r in results] == ["s1", "s2"]

    @pytest.mark.asyncio
    async def test_search_logged_with_success_flag(self, directory):
        await directory.search("aws", actor_email=DEV_EMAIL, client_ip="10.0.0.1", user_agent="pytest")
        await directory.search("nothing-matches", actor_email=DEV_EMAIL)

        latest, earlier = directory.recent_searches(2)
        assert latest.query == "nothing-matches"
        assert latest.success is False
        assert earlier.success is True
        assert earlier.client_ip == "10.0.0.1"
        assert earlier.user_agent == "pytest"

    @pytest.mark.asyncio
    async def test_blank_query_not_logged(self, directory):
        assert await directory.search("  ", actor_email=DEV_EMAIL) == []
        assert len(directory.search_logs) == 0

    @pytest.mark.asyncio
    async def test_user_without_groups_gets_nothing(self, directory):
        assert await directory.search("aws", actor_email=OUTSIDER_EMAIL) == []
        assert await directory.popular(5, actor_email=OUTSIDER_EMAIL) == []

    @pytest.mark.asyncio
    async def test_upstream_failure_on_cold_cache_yields_empty_results(self, directory, record_store):
        async def broken():
            raise UpstreamUnavailableError("down")

        record_store.fetch_services = broken

        assert await directory.search("aws", actor_email=DEV_EMAIL) == []


class TestDirectoryPopular:

    @pytest.mark.asyncio
    async def test_popular_follows_successful_searches(self, directory):
        for _ in range(3):
            await directory.search("github", actor_email=DEV_EMAIL)
        await directory.search("aws", actor_email=DEV_EMAIL)

        popular = await directory.popular(2, actor_email=DEV_EMAIL)

        assert popular[0].id == "s3"
        assert len(popular) == 2

    @pytest.mark.asyncio
    async def test_popular_rejects_non_positive_limit(self, directory):
        with pytest.raises(InvalidInputError):
            await directory.popular(0, actor_email=DEV_EMAIL)


class TestDirectoryAdministration:

    @pytest.mark.asyncio
    async def test_set_permission_audited(self, directory):
        stored = await directory.set_permission("s2", ["DevTeam", "DevTeam"], actor_email=ADMIN_EMAIL)

        [entry] = await directory.audit.list_logs()
        assert stored == ["DevTeam"]
        assert entry.action == AdminAction.PERMISSION_UPDATE.value
        assert entry.target == "s2"
        assert entry.details == "Allowed groups: DevTeam"

    @pytest.mark.asyncio
    async def test_clearing_permission_audited_as_open(self, directory):
        await directory.set_permission("s2", [], actor_email=ADMIN_EMAIL)

        [entry] = await directory.audit.list_logs()
        assert entry.details == "Open to all groups"

    @pytest.mark.asyncio
    async def test_blank_service_id_rejected(self, directory):
        with pytest.raises(InvalidInputError):
            await directory.set_permission(" ", ["DevTeam"], actor_email=ADMIN_EMAIL)

    @pytest.mark.asyncio
    async def test_list_permissions_covers_whole_catalog(self, directory):
        await directory.set_permission("s3", ["DevTeam"], actor_email=ADMIN_EMAIL)

        entries = {e["service_id"]: e["allowed_groups"] for e in await directory.list_permissions()}

        assert entries == {"s1": [], "s2": [], "s3": ["DevTeam"], "s4": []}

    @pytest.mark.asyncio
    async def test_refresh_cache_reloads_catalog(self, directory, record_store):
        await directory.get_services()
        record_store.service_rows.append({"id": "s5", "serviceName": "Slack"})

        count = await directory.refresh_cache(ADMIN_EMAIL)

        assert count == 5
        assert record_store.fetch_count == 2
        [entry] = await directory.audit.list_logs()
        assert entry.action == AdminAction.CACHE_REFRESH.value

    @pytest.mark.asyncio
    async def test_member_changes_audited(self, directory):
        await directory.add_member("new@example.com", "Marketing", ADMIN_EMAIL)
        await directory.delete_member("new@example.com", "Marketing", ADMIN_EMAIL)

        actions = [e.action for e in await directory.audit.list_logs()]
        assert sorted(actions) == ["MEMBER_ADD", "MEMBER_DELETE"]


class TestResolvedGroups:
    """Groups resolved by the caller are used as given."""

    @pytest.mark.asyncio
    async def test_given_groups_skip_membership_lookup(self, directory):
        directory.members.get_user_groups = AsyncMock(return_value=[])

        results = await directory.search("git", actor_email="test-mode@local", user_groups=["*"])
        popular = await directory.popular(2, actor_email="test-mode@local", user_groups=["*"])

        assert [r.id for r in results] == ["s3"]
        assert len(popular) == 2
        directory.members.get_user_groups.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_given_empty_groups_denied(self, directory):
        assert await directory.search("aws", actor_email=DEV_EMAIL, user_groups=[]) == []
        assert await directory.popular(3, actor_email=DEV_EMAIL, user_groups=[]) == []
