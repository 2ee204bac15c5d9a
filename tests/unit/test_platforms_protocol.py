"""Unit tests for the platform adapter base class."""

import asyncio
import logging

import pytest

from conftest import MockAdapter
from intentbridge.platforms.models import Message, PlatformType


def _message(text: str = "hi") -> Message:
    return Message(id="m1", platform=PlatformType.TELEGRAM, user_id="u", chat_id="c", text=text)


class TestHandlerSubscription:
    """Tests for the single-subscriber handler model."""

    def test_no_handler_by_default(self):
        adapter = MockAdapter(PlatformType.TELEGRAM)
        assert not adapter.has_handler
        assert not adapter.is_connected

    def test_on_message_sets_handler(self):
        adapter = MockAdapter(PlatformType.TELEGRAM)

        async def handler(message):
            pass

        adapter.on_message(handler)
        assert adapter.has_handler

    @pytest.mark.asyncio
    async def test_second_registration_replaces_first(self, caplog):
        adapter = MockAdapter(PlatformType.TELEGRAM)
        calls: list[str] = []

        async def first(message):
            calls.append("first")

        async def second(message):
            calls.append("second")

        adapter.on_message(first)
        with caplog.at_level(logging.WARNING):
            adapter.on_message(second)
        assert "Replacing existing message handler" in caplog.text

        await adapter.dispatch(_message())
        assert calls == ["second"]

    def test_same_handler_twice_does_not_warn(self, caplog):
        adapter = MockAdapter(PlatformType.TELEGRAM)

        async def handler(message):
            pass

        adapter.on_message(handler)
        with caplog.at_level(logging.WARNING):
            adapter.on_message(handler)
        assert "Replacing" not in caplog.text


class TestDispatch:
    """Tests for PlatformAdapter.dispatch."""

    @pytest.mark.asyncio
    async def test_dispatch_without_handler_drops(self, caplog):
        adapter = MockAdapter(PlatformType.TELEGRAM)
        with caplog.at_level(logging.WARNING):
            assert adapter.dispatch(_message()) is None
        assert "no handler" in caplog.text

    @pytest.mark.asyncio
    async def test_dispatch_runs_handler_as_task(self):
        adapter = MockAdapter(PlatformType.TELEGRAM)
        received: list[Message] = []

        async def handler(message):
            received.append(message)

        adapter.on_message(handler)
        task = adapter.dispatch(_message("hello"))
        assert isinstance(task, asyncio.Task)
        assert task.get_name() == "handle-telegram-m1"

        await task
        assert [m.text for m in received] == ["hello"]

    @pytest.mark.asyncio
    async def test_handler_errors_are_contained(self, caplog):
        adapter = MockAdapter(PlatformType.TELEGRAM)

        async def handler(message):
            raise RuntimeError("boom")

        adapter.on_message(handler)
        with caplog.at_level(logging.ERROR):
            await adapter.dispatch(_message())
        assert "Message handler failed" in caplog.text

    @pytest.mark.asyncio
    async def test_messages_are_handled_concurrently(self):
        adapter = MockAdapter(PlatformType.TELEGRAM)
        release = asyncio.Event()
        order: list[str] = []

        async def handler(message):
            if message.text == "slow":
                await release.wait()
            order.append(message.text)
            if message.text == "fast":
                release.set()

        adapter.on_message(handler)
        slow = adapter.dispatch(_message("slow"))
        fast = adapter.dispatch(_message("fast"))
        await asyncio.wait_for(asyncio.gather(slow, fast), timeout=1)
        assert order == ["fast", "slow"]

    @pytest.mark.asyncio
    async def test_health_check_reports_connection(self):
        adapter = MockAdapter(PlatformType.SLACK)
        assert await adapter.health_check() is False
        await adapter.initialize()
        assert await adapter.health_check() is True
