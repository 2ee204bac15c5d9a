"""Unit tests for service assembly and teardown."""

from unittest.mock import AsyncMock, patch

import pytest

from conftest import MockAdapter, StubProvider
from intentbridge.config.loader import ConfigurationError
from intentbridge.config.schema import Config
from intentbridge.platforms.models import PlatformType
from intentbridge.service import IntentBridgeService


def _config(**overrides) -> Config:
    data = {"ai": {"openai_api_key": "sk-test"}, "server": {"static_dir": None}}
    data.update(overrides)
    return Config.model_validate(data)


class RecordingAdapter(MockAdapter):
    """Adapter that checks it was registered before it was initialized."""

    def __init__(self, platform_type: PlatformType, fail_initialize: bool = False):
        super().__init__(platform_type)
        self.fail_initialize = fail_initialize
        self.handler_at_initialize = None

    async def initialize(self) -> None:
        self.handler_at_initialize = self._handler
        if self.fail_initialize:
            raise RuntimeError("credentials rejected")
        await super().initialize()


@pytest.fixture
def provider():
    with patch("intentbridge.service.create_provider", return_value=StubProvider()) as factory:
        yield factory


@pytest.mark.asyncio
async def test_start_registers_before_initialize(provider):
    telegram = RecordingAdapter(PlatformType.TELEGRAM)
    slack = RecordingAdapter(PlatformType.SLACK)
    service = IntentBridgeService(_config())

    with patch("intentbridge.service.create_adapters", return_value=[telegram, slack]):
        await service.start()

    assert service.router.active_platforms == ["telegram", "slack"]
    assert telegram.initialized and slack.initialized
    assert telegram.handler_at_initialize == service.router.handle_message
    assert service.action_client is None

    await service.stop()
    assert telegram.disconnect_calls == 1
    assert slack.disconnect_calls == 1


@pytest.mark.asyncio
async def test_start_refuses_incomplete_config(provider):
    service = IntentBridgeService(_config(ai={}))

    with pytest.raises(ConfigurationError, match="openai_api_key"):
        await service.start()

    provider.assert_not_called()
    assert service.router is None


@pytest.mark.asyncio
async def test_adapter_failure_shuts_down_started_adapters(provider):
    telegram = RecordingAdapter(PlatformType.TELEGRAM)
    slack = RecordingAdapter(PlatformType.SLACK, fail_initialize=True)
    service = IntentBridgeService(_config())

    with patch("intentbridge.service.create_adapters", return_value=[telegram, slack]):
        with pytest.raises(RuntimeError, match="credentials rejected"):
            await service.start()

    assert telegram.disconnect_calls == 1
    assert slack.disconnect_calls == 1


@pytest.mark.asyncio
async def test_remote_action_client_is_connected(provider):
    service = IntentBridgeService(
        _config(remote_action={"enable": True, "server_url": "http://actions:4000/"})
    )

    with patch("intentbridge.service.create_adapters", return_value=[]):
        await service.start()

    assert service.action_client.server_url == "http://actions:4000"
    assert service.router.action_client is service.action_client

    await service.stop()
    assert not service.action_client.is_connected


@pytest.mark.asyncio
async def test_audit_events_for_adapter_lifecycle(provider, temp_dir):
    audit_path = temp_dir / "audit.jsonl"
    service = IntentBridgeService(_config(audit={"enable": True, "path": str(audit_path)}))

    with patch(
        "intentbridge.service.create_adapters",
        return_value=[MockAdapter(PlatformType.TELEGRAM)],
    ):
        await service.start()
    await service.stop()

    lines = audit_path.read_text().splitlines()
    assert len(lines) == 2
    assert '"platform_adapter_started"' in lines[0]
    assert '"platform_adapter_stopped"' in lines[1]


@pytest.mark.asyncio
async def test_stop_is_idempotent(provider):
    service = IntentBridgeService(_config())
    await service.stop()

    with patch("intentbridge.service.create_adapters", return_value=[]):
        await service.start()
    await service.stop()
    await service.stop()

    assert service.router is None


def test_create_app_requires_start():
    with pytest.raises(RuntimeError, match="not started"):
        IntentBridgeService(_config()).create_app()


@pytest.mark.asyncio
async def test_run_serves_and_stops(provider):
    service = IntentBridgeService(_config(server={"static_dir": None, "port": 8123}))
    adapter = MockAdapter(PlatformType.TELEGRAM)

    with (
        patch("intentbridge.service.create_adapters", return_value=[adapter]),
        patch("intentbridge.service.uvicorn.Server") as server_cls,
    ):
        server_cls.return_value.serve = AsyncMock()
        await service.run()

    uvicorn_config = server_cls.call_args.args[0]
    assert uvicorn_config.port == 8123
    server_cls.return_value.serve.assert_awaited_once()
    assert adapter.disconnect_calls == 1
    assert service.router is None
