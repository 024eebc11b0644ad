"""Minimal REST client for the Letta agent-memory platform."""

import json
import logging

import httpx

from soundchain.agents.state import ToolInvocation
from soundchain.core.errors import BackendError, BackendNotConfiguredError

logger = logging.getLogger(__name__)


class LettaClient:
    """Creates remote agents and exchanges messages with them."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.letta.com",
        transport: httpx.BaseTransport | None = None,
        timeout: float = 60.0,
    ):
        if not api_key:
            raise BackendNotConfiguredError("LETTA_API_KEY is not set")
        self.base_url = base_url.rstrip("/")
        self.client = httpx.Client(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=httpx.Timeout(5.0, read=timeout),
            transport=transport,
        )

    def _post(self, path: str, payload: dict) -> dict:
        try:
            response = self.client.post(path, json=payload)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise BackendError(
                f"Letta returned {e.response.status_code} for {path}",
                details=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise BackendError(f"Letta request to {path} failed: {e}") from e
        except ValueError as e:
            raise BackendError(f"Letta returned invalid JSON for {path}") from e

    def create_agent(
        self,
        name: str,
        system: str,
        memory_blocks: list[dict],
        model: str,
        embedding: str,
    ) -> str:
        """Create an agent and return its id."""
        data = self._post(
            "/v1/agents/",
            {
                "name": name,
                "system": system,
                "model": model,
                "embedding": embedding,
                "memory_blocks": memory_blocks,
            },
        )
        agent_id = data.get("id")
        if not agent_id:
            raise BackendError("Letta agent creation returned no id", details=data)
        logger.info("Created Letta agent %s (%s)", agent_id, name)
        return agent_id

    def send_message(self, agent_id: str, content: str) -> tuple[str, list[ToolInvocation]]:
        """Send one user message; return the assistant text and tool calls."""
        data = self._post(
            f"/v1/agents/{agent_id}/messages",
            {"messages": [{"role": "user", "content": content}]},
        )
        return parse_messages(data.get("messages", []))

    def close(self):
        self.client.close()


def _content_text(content) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            part.get("text", "") for part in content if isinstance(part, dict)
        )
    return ""


def _arguments(raw) -> dict:
    if isinstance(raw, dict):
        return raw
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Discarding unparseable tool arguments: %r", raw)
        return {}
    return parsed if isinstance(parsed, dict) else {}


def parse_messages(messages: list[dict]) -> tuple[str, list[ToolInvocation]]:
    """Split Letta response messages into assistant text and tool invocations.

    Handles the typed format (``message_type``) and the OpenAI-style
    ``role``/``tool_calls`` format.
    """
    texts = []
    invocations = []
    for msg in messages:
        message_type = msg.get("message_type")
        if message_type == "assistant_message":
            texts.append(_content_text(msg.get("content")))
        elif message_type == "tool_call_message":
            call = msg.get("tool_call") or {}
            invocations.append(
                ToolInvocation(call.get("name", ""), _arguments(call.get("arguments")))
            )
        elif msg.get("role") == "assistant":
            for call in msg.get("tool_calls") or []:
                function = call.get("function") or {}
                invocations.append(
                    ToolInvocation(
                        function.get("name") or call.get("name", ""),
                        _arguments(function.get("arguments", call.get("arguments"))),
                    )
                )
            if msg.get("content"):
                texts.append(_content_text(msg["content"]))
    text = "\n".join(t for t in texts if t).strip()
    return text, invocations
