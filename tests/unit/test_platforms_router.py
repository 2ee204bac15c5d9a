"""Unit tests for platform message router."""

import logging
from unittest.mock import AsyncMock, Mock

import pytest

from conftest import MockAdapter, StubProvider
from intentbridge.actions.client import RemoteActionClient
from intentbridge.actions.models import ActionRequest, ActionResult
from intentbridge.platforms.models import Message, PlatformType
from intentbridge.platforms.router import GENERIC_APOLOGY, MessageRouter
from intentbridge.providers.models import Intent
from intentbridge.providers.protocol import RESPONSE_FALLBACK


@pytest.fixture
def provider():
    return StubProvider(
        Intent(action="create", entities={"type": "user", "name": "John"}, confidence=0.9)
    )


@pytest.fixture
def telegram_adapter():
    return MockAdapter(PlatformType.TELEGRAM)


@pytest.fixture
def slack_adapter():
    return MockAdapter(PlatformType.SLACK)


@pytest.fixture
def router(provider):
    return MessageRouter(provider)


def _action_client(result: ActionResult) -> Mock:
    client = Mock(spec=RemoteActionClient)
    client.request = AsyncMock(return_value=result)
    client.disconnect = AsyncMock()
    return client


class TestRegistration:
    """Tests for adapter registration."""

    def test_register_adapter(self, router, telegram_adapter):
        router.register_adapter(telegram_adapter)
        assert router.active_platforms == ["telegram"]
        assert router.get_adapter("telegram") is telegram_adapter
        assert telegram_adapter.has_handler

    def test_register_multiple_adapters(self, router, telegram_adapter, slack_adapter):
        router.register_adapter(telegram_adapter)
        router.register_adapter(slack_adapter)
        assert set(router.active_platforms) == {"telegram", "slack"}

    def test_register_duplicate_raises(self, router, telegram_adapter):
        router.register_adapter(telegram_adapter)
        with pytest.raises(ValueError, match="already registered"):
            router.register_adapter(MockAdapter(PlatformType.TELEGRAM))

    def test_unregister_adapter(self, router, telegram_adapter):
        router.register_adapter(telegram_adapter)
        router.unregister_adapter("telegram")
        assert router.get_adapter("telegram") is None

    def test_unregister_unknown_is_noop(self, router):
        router.unregister_adapter("teams")
        assert router.active_platforms == []


class TestHandleMessage:
    """Tests for the interpret/act/respond/deliver pipeline."""

    @pytest.mark.asyncio
    async def test_scenario_simulated_create(self, router, provider, telegram_adapter, telegram_message):
        """No action client: the create is simulated and the reply delivered once."""
        router.register_adapter(telegram_adapter)

        await router.handle_message(telegram_message)

        assert len(telegram_adapter.sent) == 1
        chat_id, text, _ = telegram_adapter.sent[0]
        assert chat_id == "42"
        assert "Created user successfully" in text

    @pytest.mark.asyncio
    async def test_scenario_remote_failure_becomes_data(self, provider, telegram_adapter, telegram_message):
        """A failed remote action reaches the reply stage as {"error": ...}."""
        client = _action_client(ActionResult.failed("db down"))
        router = MessageRouter(provider, action_client=client)
        router.register_adapter(telegram_adapter)

        await router.handle_message(telegram_message)

        assert provider.received_data == [{"error": "db down"}]
        assert len(telegram_adapter.sent) == 1

    @pytest.mark.asyncio
    async def test_scenario_provider_failure_sends_apology(self, telegram_adapter, telegram_message):
        """An exception escaping the provider is replaced by the apology."""
        router = MessageRouter(StubProvider(fail=True))
        router.register_adapter(telegram_adapter)

        await router.handle_message(telegram_message)

        assert telegram_adapter.sent == [("42", GENERIC_APOLOGY, None)]
        assert "provider exploded" not in telegram_adapter.sent[0][1]

    @pytest.mark.asyncio
    async def test_scenario_no_adapter_logs_and_drops(self, router, slack_adapter, telegram_message, caplog):
        """A message for an unregistered platform is never sent anywhere."""
        router.register_adapter(slack_adapter)

        with caplog.at_level(logging.ERROR):
            await router.handle_message(telegram_message)

        assert slack_adapter.sent == []
        assert "No adapter registered for platform telegram" in caplog.text

    @pytest.mark.asyncio
    async def test_remote_success_passes_data(self, provider, telegram_adapter, telegram_message):
        client = _action_client(ActionResult.ok({"id": 99}))
        router = MessageRouter(provider, action_client=client)
        router.register_adapter(telegram_adapter)

        await router.handle_message(telegram_message)

        assert provider.received_data == [{"id": 99}]

    @pytest.mark.asyncio
    async def test_remote_request_shape(self, provider, telegram_adapter, telegram_message):
        client = _action_client(ActionResult.ok(None))
        router = MessageRouter(provider, action_client=client)
        router.register_adapter(telegram_adapter)

        await router.handle_message(telegram_message)

        request = client.request.await_args.args[0]
        assert isinstance(request, ActionRequest)
        assert request.method == "create"
        assert request.params == {"type": "user", "name": "John"}
        assert request.context == {
            "platform": "telegram",
            "userId": "7",
            "userName": "john",
            "chatId": "42",
        }

    @pytest.mark.asyncio
    async def test_error_intent_skips_remote_client(self, telegram_adapter, telegram_message):
        provider = StubProvider(Intent.error("timeout"))
        client = _action_client(ActionResult.ok({}))
        router = MessageRouter(provider, action_client=client)
        router.register_adapter(telegram_adapter)

        await router.handle_message(telegram_message)

        client.request.assert_not_awaited()
        assert provider.received_data[0]["success"] is False
        assert len(telegram_adapter.sent) == 1

    @pytest.mark.asyncio
    async def test_unknown_action_simulated(self, telegram_adapter, telegram_message):
        provider = StubProvider(Intent(action="dance"))
        router = MessageRouter(provider)
        router.register_adapter(telegram_adapter)

        await router.handle_message(telegram_message)

        assert "not sure how to help" in telegram_adapter.sent[0][1]

    @pytest.mark.asyncio
    async def test_contexts_passed_to_provider(self, router, provider, telegram_adapter, telegram_message):
        router.register_adapter(telegram_adapter)

        await router.handle_message(telegram_message)

        assert provider.interpret_contexts == [
            {"platform": "telegram", "userId": "7", "userName": "john"}
        ]
        assert provider.respond_contexts == [{"platform": "telegram"}]

    @pytest.mark.asyncio
    async def test_action_client_exception_sends_apology(self, provider, telegram_adapter, telegram_message):
        client = Mock(spec=RemoteActionClient)
        client.request = AsyncMock(side_effect=RuntimeError("contract violated"))
        router = MessageRouter(provider, action_client=client)
        router.register_adapter(telegram_adapter)

        await router.handle_message(telegram_message)

        assert telegram_adapter.sent == [("42", GENERIC_APOLOGY, None)]

    @pytest.mark.asyncio
    async def test_delivery_failure_is_contained(self, router, telegram_message, caplog):
        adapter = MockAdapter(PlatformType.TELEGRAM, fail_send=True)
        router.register_adapter(adapter)

        with caplog.at_level(logging.ERROR):
            await router.handle_message(telegram_message)

        assert "Failed to deliver reply" in caplog.text

    @pytest.mark.asyncio
    async def test_fallback_reply_is_delivered(self, telegram_adapter, telegram_message):
        provider = StubProvider()
        provider.generate_response = AsyncMock(return_value=RESPONSE_FALLBACK)
        router = MessageRouter(provider)
        router.register_adapter(telegram_adapter)

        await router.handle_message(telegram_message)

        assert telegram_adapter.sent[0][1] == RESPONSE_FALLBACK

    @pytest.mark.asyncio
    @pytest.mark.parametrize("platform", list(PlatformType))
    async def test_pipeline_is_platform_agnostic(self, platform):
        provider = StubProvider(Intent(action="delete", entities={"type": "order"}))
        adapter = MockAdapter(platform)
        router = MessageRouter(provider)
        router.register_adapter(adapter)

        message = Message(id="x", platform=platform, user_id="u", chat_id="c9", text="delete order")
        await adapter.dispatch(message)

        assert adapter.sent == [("c9", "Deleted order successfully", None)]

    @pytest.mark.asyncio
    async def test_thread_reply_metadata_is_forwarded(self, router, slack_adapter):
        router.register_adapter(slack_adapter)
        message = Message(
            id="1700000000.000200",
            platform=PlatformType.SLACK,
            user_id="U1",
            chat_id="C1",
            text="create a user",
            metadata={"channel_type": "channel", "thread_ts": "1700000000.000100"},
        )

        await router.handle_message(message)

        assert slack_adapter.sent == [
            ("C1", "Created user successfully", {"thread_ts": "1700000000.000100"})
        ]

    @pytest.mark.asyncio
    async def test_unthreaded_message_sends_without_metadata(self, router, slack_adapter):
        router.register_adapter(slack_adapter)
        message = Message(
            id="1700000000.000200",
            platform=PlatformType.SLACK,
            user_id="U1",
            chat_id="C1",
            text="create a user",
            metadata={"channel_type": "channel", "thread_ts": None},
        )

        await router.handle_message(message)

        assert slack_adapter.sent == [("C1", "Created user successfully", None)]

    @pytest.mark.asyncio
    async def test_audit_events(self, provider, telegram_adapter, telegram_message):
        audit = Mock()
        client = _action_client(ActionResult.failed("db down"))
        router = MessageRouter(provider, action_client=client, audit_logger=audit)
        router.register_adapter(telegram_adapter)

        await router.handle_message(telegram_message)

        audit.log_platform_message_received.assert_called_once()
        audit.log_action_request.assert_called_once_with(
            method="create", success=False, platform="telegram", error="db down"
        )
        audit.log_platform_message_sent.assert_called_once()


class TestHealthAndShutdown:
    """Tests for health checks and shutdown."""

    @pytest.mark.asyncio
    async def test_health_check(self, router, telegram_adapter, slack_adapter):
        router.register_adapter(telegram_adapter)
        router.register_adapter(slack_adapter)
        await telegram_adapter.initialize()

        health = await router.health_check()

        assert health == {"telegram": True, "slack": False}

    @pytest.mark.asyncio
    async def test_health_check_failure_is_false(self, router, telegram_adapter):
        telegram_adapter.health_check = AsyncMock(side_effect=RuntimeError("down"))
        router.register_adapter(telegram_adapter)

        assert await router.health_check() == {"telegram": False}

    @pytest.mark.asyncio
    async def test_shutdown_disconnects_everything(self, provider, telegram_adapter, slack_adapter):
        client = _action_client(ActionResult.ok())
        router = MessageRouter(provider, action_client=client)
        router.register_adapter(telegram_adapter)
        router.register_adapter(slack_adapter)

        await router.shutdown()

        assert telegram_adapter.disconnect_calls == 1
        assert slack_adapter.disconnect_calls == 1
        client.disconnect.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_shutdown_continues_past_failures(self, provider, slack_adapter):
        failing = MockAdapter(PlatformType.TELEGRAM)
        failing.disconnect = AsyncMock(side_effect=RuntimeError("stuck"))
        client = _action_client(ActionResult.ok())
        client.disconnect = AsyncMock(side_effect=RuntimeError("also stuck"))
        router = MessageRouter(provider, action_client=client)
        router.register_adapter(failing)
        router.register_adapter(slack_adapter)

        await router.shutdown()

        failing.disconnect.assert_awaited_once()
        assert slack_adapter.disconnect_calls == 1
        client.disconnect.assert_awaited_once()
