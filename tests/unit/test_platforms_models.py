"""Unit tests for platform data models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from intentbridge.platforms.models import Message, PlatformType


class TestPlatformType:
    """Tests for PlatformType enum."""

    def test_values(self):
        assert {p.value for p in PlatformType} == {"whatsapp", "telegram", "slack", "teams"}

    def test_from_string(self):
        assert PlatformType("telegram") is PlatformType.TELEGRAM


class TestMessage:
    """Tests for Message model."""

    def test_create_message(self):
        """Test creating a message with required fields only."""
        msg = Message(
            id="1",
            platform=PlatformType.SLACK,
            user_id="U1",
            chat_id="C1",
            text="hello",
        )
        assert msg.user_name is None
        assert msg.metadata == {}
        assert msg.timestamp.tzinfo is not None

    def test_message_is_frozen(self):
        msg = Message(id="1", platform=PlatformType.SLACK, user_id="U1", chat_id="C1", text="x")
        with pytest.raises(ValidationError):
            msg.text = "changed"

    def test_platform_from_string(self):
        msg = Message(id="1", platform="teams", user_id="u", chat_id="c", text="x")
        assert msg.platform is PlatformType.TEAMS

    def test_unknown_platform_rejected(self):
        with pytest.raises(ValidationError):
            Message(id="1", platform="discord", user_id="u", chat_id="c", text="x")

    def test_str_truncates_text(self):
        """Test the log representation."""
        msg = Message(
            id="1",
            platform=PlatformType.TELEGRAM,
            user_id="7",
            user_name="john",
            chat_id="42",
            text="a" * 80,
            timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        assert str(msg) == f"[telegram] john@42: {'a' * 50}"

    def test_str_falls_back_to_user_id(self):
        msg = Message(id="1", platform=PlatformType.WHATSAPP, user_id="15551234", chat_id="c", text="hi")
        assert str(msg).startswith("[whatsapp] 15551234@c")
