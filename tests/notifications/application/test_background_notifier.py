"""Tests for BackgroundNotifier — fire-and-forget notification tasks."""

import asyncio

from notifications.notification.dispatch import BackgroundNotifier
from structlog.testing import capture_logs


class TestBackgroundNotifier:
    def setup_method(self):
        self.background = BackgroundNotifier()

    def test_schedule_returns_before_the_work_runs(self):
        ran = []

        async def notify():
            ran.append(True)
            return True

        async def run():
            self.background.schedule(notify(), description="new-order:ORD-1")
            state = (self.background.pending, list(ran))
            await self.background.drain()
            return state

        pending, ran_before_drain = asyncio.run(run())

        assert pending == 1
        assert ran_before_drain == []
        assert ran == [True]
        assert self.background.pending == 0

    def test_crash_is_logged_not_raised(self):
        async def notify():
            raise RuntimeError("boom")

        async def run():
            self.background.schedule(notify(), description="contact")
            await self.background.drain()

        with capture_logs() as logs:
            asyncio.run(run())

        crashed = next(e for e in logs if e["event"] == "Background notification crashed")
        assert crashed["task"] == "contact"
        assert crashed["log_level"] == "error"

    def test_unreached_notification_is_logged(self):
        async def notify():
            return False

        async def run():
            self.background.schedule(notify(), description="new-review")
            await self.background.drain()

        with capture_logs() as logs:
            asyncio.run(run())

        assert any(e["event"] == "Background notification reached no channel" for e in logs)

    def test_drain_waits_for_tasks_scheduled_while_draining(self):
        done = []

        async def second():
            done.append("second")

        async def first():
            await asyncio.sleep(0)
            self.background.schedule(second(), description="second")
            done.append("first")

        async def run():
            self.background.schedule(first(), description="first")
            await self.background.drain()

        asyncio.run(run())
        assert done == ["first", "second"]

    def test_drain_with_nothing_pending(self):
        asyncio.run(self.background.drain())
        assert self.background.pending == 0
