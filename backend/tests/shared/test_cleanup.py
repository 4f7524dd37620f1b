"""Tests for shared/cleanup.py."""

from unittest.mock import AsyncMock

import pytest

from shared.cleanup import CleanupReport, CleanupStep, run_cleanup


class TestRunCleanup:
    @pytest.mark.asyncio
    async def test_all_steps_succeed(self):
        first, second = AsyncMock(), AsyncMock()

        report = await run_cleanup([CleanupStep("first", first), CleanupStep("second", second)])

        assert report.completed == ["first", "second"]
        assert report.warnings == []
        assert report.ok

    @pytest.mark.asyncio
    async def test_failed_step_does_not_stop_chain(self):
        """Every step runs; failures become warnings."""
        last = AsyncMock()
        steps = [
            CleanupStep("profile", AsyncMock(side_effect=RuntimeError("denied"))),
            CleanupStep("sign out", last),
        ]

        report = await run_cleanup(steps)

        last.assert_awaited_once()
        assert report.completed == ["sign out"]
        assert report.warnings == ["profile: denied"]
        assert not report.ok

    @pytest.mark.asyncio
    async def test_empty_chain(self):
        report = await run_cleanup([])
        assert report == CleanupReport()
