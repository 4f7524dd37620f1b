"""Tests for usage service."""

import pytest

from shared.exceptions import StoreError

from modules.usage.exceptions import UsageLimitReachedError
from modules.usage.models import UsageStatus
from modules.usage.repository import UsageRepository
from modules.usage.service import UsageService


def make_service(fake_db, fake_query, check=None, increment=None) -> UsageService:
    rpcs = {}
    if check is not None:
        rpcs["check_usage_limit"] = check
    if increment is not None:
        rpcs["increment_usage_count"] = increment
    return UsageService(UsageRepository(fake_db(rpcs=rpcs)))


class TestUsageStatus:
    def test_defaults_are_permissive(self):
        status = UsageStatus()
        assert status.queries_today == 0
        assert status.can_query is True
        assert status.limit_reached is False

    def test_remaining(self):
        assert UsageStatus(queries_today=1).remaining(2) == 1
        assert UsageStatus(queries_today=5).remaining(2) == 0


class TestUsageService:
    @pytest.mark.asyncio
    async def test_check_usage_limit(self, fake_db, fake_query):
        check = fake_query([{"queries_today": 2, "limit_reached": True, "can_query": False}])
        service = make_service(fake_db, fake_query, check=check)

        status = await service.check_usage_limit("user-1")

        assert status.queries_today == 2
        assert status.can_query is False

    @pytest.mark.asyncio
    async def test_check_usage_limit_no_row(self, fake_db, fake_query):
        service = make_service(fake_db, fake_query, check=fake_query([]))
        assert await service.check_usage_limit("user-1") == UsageStatus()

    @pytest.mark.asyncio
    async def test_check_usage_limit_degrades_on_error(self, fake_db, fake_query):
        check = fake_query(error=StoreError("check usage limit", "missing function"))
        service = make_service(fake_db, fake_query, check=check)

        assert await service.check_usage_limit("user-1") == UsageStatus()

    @pytest.mark.asyncio
    async def test_increment(self, fake_db, fake_query):
        db = fake_db()
        service = UsageService(UsageRepository(db))

        assert await service.increment_usage_count("user-1") is True
        db.rpc.assert_called_once_with("increment_usage_count", {"user_id": "user-1"})

    @pytest.mark.asyncio
    async def test_increment_failure_returns_false(self, fake_db, fake_query):
        increment = fake_query(error=StoreError("increment usage", "down"))
        service = make_service(fake_db, fake_query, increment=increment)

        assert await service.increment_usage_count("user-1") is False

    @pytest.mark.asyncio
    async def test_consume_query_counts_when_allowed(self, fake_db, fake_query):
        check = fake_query([{"queries_today": 1, "limit_reached": False, "can_query": True}])
        db = fake_db(rpcs={"check_usage_limit": check})
        service = UsageService(UsageRepository(db))

        status = await service.consume_query("user-1")

        assert status.queries_today == 1
        assert [c.args[0] for c in db.rpc.call_args_list] == [
            "check_usage_limit",
            "increment_usage_count",
        ]

    @pytest.mark.asyncio
    async def test_consume_query_refuses_at_limit(self, fake_db, fake_query):
        check = fake_query([{"queries_today": 2, "limit_reached": True, "can_query": False}])
        db = fake_db(rpcs={"check_usage_limit": check})
        service = UsageService(UsageRepository(db))

        with pytest.raises(UsageLimitReachedError) as exc_info:
            await service.consume_query("user-1")

        assert exc_info.value.details["limit"] == 2
        assert [c.args[0] for c in db.rpc.call_args_list] == ["check_usage_limit"]
