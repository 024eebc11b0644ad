"""Tests for the Letta REST client."""

import httpx
import pytest

from soundchain.agents.letta import LettaClient, parse_messages
from soundchain.core.errors import BackendError, BackendNotConfiguredError


def client_for(handler) -> LettaClient:
    return LettaClient("test-key", transport=httpx.MockTransport(handler))


class TestLettaClient:
    def test_requires_key(self):
        with pytest.raises(BackendNotConfiguredError):
            LettaClient("")

    def test_create_agent(self, fake_letta):
        letta = fake_letta(agent_id="agent-xyz")
        agent_id = letta.client().create_agent(
            name="en_negotiator_conv-000",
            system="prompt",
            memory_blocks=[{"label": "state", "value": "{}"}],
            model="m",
            embedding="e",
        )
        assert agent_id == "agent-xyz"
        request = letta.requests[0]
        assert request.headers["Authorization"] == "Bearer test-key"
        assert letta.payload(0)["memory_blocks"] == [{"label": "state", "value": "{}"}]

    def test_send_message(self, fake_letta):
        letta = fake_letta([{"message_type": "assistant_message", "content": "Hi!"}])
        text, invocations = letta.client().send_message("agent-1", "hello")
        assert text == "Hi!"
        assert invocations == []
        assert letta.payload(0) == {"messages": [{"role": "user", "content": "hello"}]}

    def test_http_error(self):
        client = client_for(lambda request: httpx.Response(503, text="down"))
        with pytest.raises(BackendError) as exc:
            client.send_message("agent-1", "hello")
        assert "503" in exc.value.message
        assert exc.value.details == "down"

    def test_invalid_json(self):
        client = client_for(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(BackendError, match="invalid JSON"):
            client.send_message("agent-1", "hello")

    def test_missing_agent_id(self):
        client = client_for(lambda request: httpx.Response(200, json={}))
        with pytest.raises(BackendError, match="no id"):
            client.create_agent("a", "s", [], "m", "e")


class TestParseMessages:
    def test_typed_messages(self):
        text, invocations = parse_messages(
            [
                {"message_type": "reasoning_message", "reasoning": "thinking"},
                {
                    "message_type": "tool_call_message",
                    "tool_call": {"name": "validate_price", "arguments": '{"offeredPrice": 80}'},
                },
                {"message_type": "tool_return_message", "tool_return": "ok"},
                {"message_type": "assistant_message", "content": "$80 works."},
            ]
        )
        assert text == "$80 works."
        assert invocations[0].name == "validate_price"
        assert invocations[0].arguments == {"offeredPrice": 80}

    def test_openai_style_messages(self):
        text, invocations = parse_messages(
            [
                {
                    "role": "assistant",
                    "content": "Let me price that.",
                    "tool_calls": [
                        {
                            "function": {
                                "name": "calculate_license_price",
                                "arguments": '{"usageRights": ["PODCAST"]}',
                            }
                        }
                    ],
                }
            ]
        )
        assert text == "Let me price that."
        assert invocations[0].arguments == {"usageRights": ["PODCAST"]}

    def test_content_parts_and_bad_arguments(self):
        text, invocations = parse_messages(
            [
                {"message_type": "assistant_message", "content": [{"type": "text", "text": "Hello"}]},
                {"message_type": "tool_call_message", "tool_call": {"name": "x", "arguments": "{oops"}},
            ]
        )
        assert text == "Hello"
        assert invocations[0].arguments == {}
