"""Orchestrator: picks a backend and runs one negotiation turn through the graph."""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable

from langchain_core.messages import AIMessage, HumanMessage

from soundchain.agents.backends import (
    AgentMemoryBackend,
    FastCompletionBackend,
    NegotiationBackend,
    SingleAgentBackend,
)
from soundchain.agents.negotiator import build_graph
from soundchain.agents.state import ConversationState, NegotiationContext, Stage
from soundchain.core.config import Settings, get_settings
from soundchain.tools.contract import LicenseContract

logger = logging.getLogger(__name__)

BACKEND_FACTORIES: dict[str, Callable[[Settings], NegotiationBackend]] = {
    "groq": FastCompletionBackend,
    "letta": AgentMemoryBackend,
    "single": SingleAgentBackend,
}


@dataclass(frozen=True)
class BackendFlags:
    use_letta: bool = True
    use_improved_system: bool = True
    use_groq: bool = False


@dataclass
class NegotiationResult:
    backend: str
    message: str
    conversation: ConversationState
    contract: LicenseContract | None = None
    detected_language: str | None = None
    tool_calls: list = field(default_factory=list)
    needs_more_info: bool = False
    stage: Stage | None = None
    intent: str | None = None
    tokens_used: int | None = None
    response_time_ms: int | None = None

    def to_response(self) -> dict:
        """Backend-specific JSON body of the negotiation endpoint."""
        conversation_id = self.conversation.conversation_id
        if self.backend == "single":
            return {
                "success": True,
                "message": self.message,
                "conversationId": conversation_id,
                "tokensUsed": self.tokens_used,
                "usedMultiAgent": False,
            }

        body = {
            "success": True,
            "message": self.message,
            "contract": self.contract.to_dict() if self.contract else None,
            "detectedLanguage": self.detected_language,
            "toolCalls": [c.to_dict() for c in self.tool_calls],
            "needsMoreInfo": self.needs_more_info,
            "stage": self.stage.value if self.stage else None,
            "conversationId": conversation_id,
        }
        if self.backend == "groq":
            body["responseTime"] = self.response_time_ms
            body["groqPowered"] = True
        else:
            body["agentId"] = self.conversation.agent_handle
            body["usedMultiAgent"] = True
            body["improvedSystem"] = True
        return body


class NegotiationOrchestrator:
    """Runs negotiation turns; holds no conversation state between calls."""

    def __init__(
        self,
        settings: Settings | None = None,
        backends: dict[str, NegotiationBackend] | None = None,
    ):
        self.settings = settings or get_settings()
        self._backends: dict[str, NegotiationBackend] = dict(backends or {})
        self._graphs: dict[str, object] = {}

    def is_available(self, kind: str) -> bool:
        if kind in self._backends:
            return True
        if kind == "groq":
            return self.settings.groq_configured
        if kind == "letta":
            return self.settings.letta_configured
        return kind == "single"

    def select_backend(self, flags: BackendFlags) -> str:
        """Fast path, then agent-memory, then the single-agent fallback."""
        if flags.use_groq and self.is_available("groq"):
            return "groq"
        if flags.use_letta and self.is_available("letta") and flags.use_improved_system:
            return "letta"
        return "single"

    def backend(self, kind: str) -> NegotiationBackend:
        """Backend instance for ``kind``, created on first use."""
        if kind not in self._backends:
            self._backends[kind] = BACKEND_FACTORIES[kind](self.settings)
        return self._backends[kind]

    def _graph(self, kind: str):
        if kind not in self._graphs:
            self._graphs[kind] = build_graph(self.backend(kind))
        return self._graphs[kind]

    def negotiate(
        self,
        context: NegotiationContext,
        conversation: ConversationState,
        user_message: str,
        flags: BackendFlags = BackendFlags(),
    ) -> NegotiationResult:
        """Process one buyer message; returns the reply and the updated state."""
        kind = self.select_backend(flags)
        logger.info(
            "Negotiating conversation %s with backend '%s'",
            conversation.conversation_id,
            kind,
        )
        started = time.monotonic()

        history = [
            HumanMessage(content=m["content"])
            if m["role"] == "user"
            else AIMessage(content=m["content"])
            for m in conversation.history
            if m.get("role") in ("user", "assistant")
        ]
        result = self._graph(kind).invoke(
            {
                "context": context,
                "user_message": user_message,
                "agent_handle": conversation.agent_handle,
                "messages": [*history, HumanMessage(content=user_message)],
            }
        )

        reply = result["reply"]
        stage = Stage(result["stage"]) if result.get("stage") else None
        updated = ConversationState(
            conversation_id=conversation.conversation_id,
            stage=stage or conversation.stage,
            history=[
                *conversation.history,
                {"role": "user", "content": user_message},
                {"role": "assistant", "content": reply.text},
            ],
            agent_handle=result.get("agent_handle"),
            detected_language=result.get("language"),
        )

        return NegotiationResult(
            backend=kind,
            message=reply.text,
            conversation=updated,
            contract=result.get("contract"),
            detected_language=result.get("language"),
            tool_calls=result.get("tool_calls", []),
            needs_more_info=result.get("needs_more_info", False),
            stage=stage,
            intent=result.get("intent"),
            tokens_used=reply.tokens_used,
            response_time_ms=int((time.monotonic() - started) * 1000),
        )
