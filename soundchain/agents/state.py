"""Conversation and per-turn state for the negotiation graph."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Optional, TypedDict

from langgraph.graph.message import add_messages

from soundchain.tools.terms import BaseTerms


class Stage(str, Enum):
    UNDERSTANDING = "understanding"
    PROPOSING = "proposing"
    NEGOTIATING = "negotiating"
    FINALIZING = "finalizing"


@dataclass(frozen=True)
class NegotiationContext:
    """What the prompts know about the track being licensed."""

    conversation_id: str
    track_id: str
    base_terms: BaseTerms
    producer_name: str = "Unknown Producer"
    track_title: str = "Unknown Track"
    cultural_context: str | None = None

    @classmethod
    def from_request(
        cls,
        conversation_id: str,
        track_id: str,
        base_terms: BaseTerms,
        track_metadata: dict | None = None,
    ) -> "NegotiationContext":
        metadata = track_metadata or {}
        return cls(
            conversation_id=conversation_id,
            track_id=str(track_id),
            base_terms=base_terms,
            producer_name=metadata.get("artist") or "Unknown Producer",
            track_title=metadata.get("title") or "Unknown Track",
            cultural_context=metadata.get("culturalContext"),
        )


@dataclass
class ConversationState:
    """Caller-owned state of one conversation, resubmitted on every turn."""

    conversation_id: str
    stage: Stage = Stage.UNDERSTANDING
    history: list[dict] = field(default_factory=list)  # [{role, content}]
    agent_handle: str | None = None
    detected_language: str | None = None


@dataclass(frozen=True)
class ToolInvocation:
    name: str
    arguments: dict = field(default_factory=dict)


@dataclass(frozen=True)
class ToolCall:
    tool: str
    arguments: dict
    result: dict

    @property
    def failed(self) -> bool:
        return "error" in self.result

    def to_dict(self) -> dict:
        return {"tool": self.tool, "arguments": self.arguments, "result": self.result}


@dataclass(frozen=True)
class RawReply:
    """Uniform output of a negotiation backend."""

    text: str
    tool_invocations: tuple[ToolInvocation, ...] = ()
    agent_handle: str | None = None
    tokens_used: int | None = None
    model: str | None = None


class TurnState(TypedDict, total=False):
    context: NegotiationContext
    user_message: str
    agent_handle: Optional[str]
    language: str
    reply: RawReply
    intent: str
    needs_more_info: bool
    invocations: list  # ToolInvocation
    tool_calls: list  # ToolCall
    contract: Optional[object]  # LicenseContract
    stage: Optional[str]
    messages: Annotated[list, add_messages]  # append-only
