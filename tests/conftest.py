"""
Pytest configuration and fixtures for intentbridge tests.
"""

import tempfile
from collections.abc import Generator
from pathlib import Path
from typing import Any, Optional

import pytest
from typer.testing import CliRunner

from intentbridge.platforms.models import Message, PlatformType
from intentbridge.platforms.protocol import PlatformAdapter
from intentbridge.providers.models import Intent
from intentbridge.providers.protocol import LanguageProvider


class MockAdapter(PlatformAdapter):
    """In-memory platform adapter that records every send."""

    def __init__(self, platform_type: PlatformType, fail_send: bool = False):
        super().__init__()
        self._platform_type = platform_type
        self._fail_send = fail_send
        self.sent: list[tuple[str, str, Optional[dict[str, Any]]]] = []
        self.initialized = False
        self.disconnect_calls = 0

    @property
    def platform_type(self) -> PlatformType:
        return self._platform_type

    async def initialize(self) -> None:
        self.initialized = True
        self._connected = True

    async def send_message(
        self, chat_id: str, text: str, metadata: Optional[dict[str, Any]] = None
    ) -> None:
        if self._fail_send:
            raise RuntimeError("transport rejected send")
        self.sent.append((chat_id, text, metadata))

    async def disconnect(self) -> None:
        self.disconnect_calls += 1
        self._connected = False


class StubProvider(LanguageProvider):
    """Provider returning a fixed intent and echoing the act-stage data."""

    def __init__(self, intent: Optional[Intent] = None, fail: bool = False):
        self.intent = intent or Intent(action="create", entities={"type": "user"}, confidence=0.9)
        self.fail = fail
        self.received_data: list[Any] = []
        self.interpret_contexts: list[Optional[dict[str, Any]]] = []
        self.respond_contexts: list[Optional[dict[str, Any]]] = []

    @property
    def name(self) -> str:
        return "stub"

    async def process_natural_language(self, text, context=None) -> Intent:
        if self.fail:
            raise RuntimeError("provider exploded")
        self.interpret_contexts.append(context)
        return self.intent

    async def generate_response(self, intent, data, context=None) -> str:
        self.received_data.append(data)
        self.respond_contexts.append(context)
        if isinstance(data, dict) and data.get("message"):
            return data["message"]
        return f"Done: {data}"


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_intentbridge_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point INTENTBRIDGE_HOME at an empty temporary directory."""
    home = temp_dir / ".intentbridge"
    home.mkdir()
    monkeypatch.setenv("INTENTBRIDGE_HOME", str(home))
    return home


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove environment variables that feed configuration."""
    from intentbridge.config.loader import WELL_KNOWN_ENV

    for name in WELL_KNOWN_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def telegram_message() -> Message:
    """The canonical Telegram test message."""
    return Message(
        id="1001",
        platform=PlatformType.TELEGRAM,
        user_id="7",
        user_name="john",
        chat_id="42",
        text="Create a new user named John",
    )
