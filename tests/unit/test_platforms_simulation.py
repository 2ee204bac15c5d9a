"""Unit tests for simulated actions."""

import pytest

from intentbridge.platforms.simulation import SimulatedAction, simulate_action
from intentbridge.providers.models import Intent


class TestSimulatedAction:
    """Tests for SimulatedAction parsing."""

    @pytest.mark.parametrize("raw", ["create", "CREATE", " Create "])
    def test_parse_known(self, raw):
        assert SimulatedAction.parse(raw) is SimulatedAction.CREATE

    def test_parse_unknown(self):
        assert SimulatedAction.parse("launch") is None


class TestSimulateAction:
    """Tests for simulate_action."""

    def test_create(self):
        result = simulate_action(Intent(action="create", entities={"type": "user", "name": "John"}))
        assert result["success"] is True
        assert result["message"] == "Created user successfully"
        assert result["data"] == {"type": "user", "name": "John"}
        assert result["id"].isdigit()

    def test_create_without_type(self):
        result = simulate_action(Intent(action="create"))
        assert result["message"] == "Created item successfully"

    @pytest.mark.parametrize("action", ["read", "query", "search"])
    def test_lookup_actions(self, action):
        result = simulate_action(Intent(action=action, entities={"type": "orders"}))
        assert result["success"] is True
        assert result["results"] == [
            {"id": "1", "name": "Item 1", "type": "orders"},
            {"id": "2", "name": "Item 2", "type": "orders"},
        ]

    def test_update(self):
        result = simulate_action(Intent(action="update", entities={"type": "product", "price": 50}))
        assert result == {
            "success": True,
            "message": "Updated product successfully",
            "data": {"type": "product", "price": 50},
        }

    def test_delete(self):
        result = simulate_action(Intent(action="delete", entities={"type": "order"}))
        assert result == {"success": True, "message": "Deleted order successfully"}

    def test_unknown_action(self):
        result = simulate_action(Intent(action="launch", entities={"target": "moon"}))
        assert result == {
            "success": False,
            "message": "I understand you want to launch, but I'm not sure how to help with that yet.",
        }

    def test_error_intent_is_unknown(self):
        result = simulate_action(Intent.error("provider down"))
        assert result["success"] is False
        assert "you want to error" in result["message"]

    def test_entities_not_mutated(self):
        entities = {"type": "user"}
        result = simulate_action(Intent(action="create", entities=entities))
        result["data"]["name"] = "changed"
        assert entities == {"type": "user"}
