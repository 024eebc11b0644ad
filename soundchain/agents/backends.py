"""Negotiation backends: the only code that talks to text-generation services.

Every backend turns the conversation so far into a ``RawReply``. Tool
execution, stage inference and contract generation happen afterwards in the
shared graph (``soundchain.agents.negotiator``), whichever backend ran.
"""

import json
import logging

import openai
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from soundchain.agents.letta import LettaClient
from soundchain.agents.prompts import (
    FINAL_TERMS_PROMPT,
    NEGOTIATION_EXAMPLES,
    format_transcript,
)
from soundchain.agents.state import NegotiationContext, RawReply, TurnState
from soundchain.core.config import Settings
from soundchain.core.errors import BackendError, BackendNotConfiguredError
from soundchain.core.registry import AgentRegistry, registry as default_registry
from soundchain.tools import OPENAI_TOOL_SCHEMAS
from soundchain.tools.intent import mentions_price

logger = logging.getLogger(__name__)


def to_chat_messages(messages: list) -> list[dict]:
    """Convert LangChain messages into OpenAI-style role/content dicts."""
    converted = []
    for msg in messages:
        if isinstance(msg, HumanMessage):
            role = "user"
        elif isinstance(msg, AIMessage):
            role = "assistant"
        elif isinstance(msg, SystemMessage):
            role = "system"
        else:
            continue
        converted.append({"role": role, "content": msg.content})
    return converted


def _completion_text(response) -> str:
    if not response.choices:
        return ""
    return response.choices[0].message.content or ""


class NegotiationBackend:
    """Interface shared by the three backends.

    ``mode`` tells the shared graph how to read the reply:
    ``"text"`` derives tool calls from free text, ``"tools"`` executes the
    tool invocations the service reported, ``"plain"`` skips interpretation.
    """

    kind = "base"
    mode = "plain"

    def respond(self, context: NegotiationContext, state: TurnState) -> RawReply:
        raise NotImplementedError

    def signals_negotiation(self, text: str, needs_more_info: bool) -> bool:
        """Whether a reply without tool activity still moves to 'negotiating'."""
        return False


class FastCompletionBackend(NegotiationBackend):
    """Single chat completion against Groq's OpenAI-compatible endpoint."""

    kind = "groq"
    mode = "text"

    def __init__(
        self,
        settings: Settings,
        client: openai.OpenAI | None = None,
        agents: AgentRegistry = default_registry,
    ):
        if client is None:
            if not settings.groq_configured:
                raise BackendNotConfiguredError("GROQ_API_KEY is not set")
            client = openai.OpenAI(
                api_key=settings.groq_api_key, base_url=settings.groq_base_url
            )
        self.client = client
        self.model = settings.groq_model
        self.agents = agents

    def respond(self, context: NegotiationContext, state: TurnState) -> RawReply:
        persona = self.agents.for_language("fast", state.get("language", "en"))
        messages = [{"role": "system", "content": persona.system_prompt(context)}]
        messages.extend(to_chat_messages(state.get("messages", [])))

        logger.debug("Groq completion with %d messages (%s)", len(messages), persona.agent_id)
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=persona.config.get("temperature", 0.7),
                max_tokens=persona.config.get("max_tokens", 1024),
            )
        except openai.OpenAIError as e:
            raise BackendError(f"Groq completion failed: {e}") from e

        usage = getattr(response, "usage", None)
        return RawReply(
            text=_completion_text(response),
            tokens_used=getattr(usage, "total_tokens", None),
            model=self.model,
        )

    def signals_negotiation(self, text: str, needs_more_info: bool) -> bool:
        return mentions_price(text)


class AgentMemoryBackend(NegotiationBackend):
    """Persistent Letta agent that reports tool invocations for local execution."""

    kind = "letta"
    mode = "tools"

    def __init__(
        self,
        settings: Settings,
        client: LettaClient | None = None,
        agents: AgentRegistry = default_registry,
    ):
        if client is None:
            client = LettaClient(settings.letta_api_key, settings.letta_base_url)
        self.client = client
        self.model = settings.letta_model
        self.embedding = settings.letta_embedding
        self.agents = agents

    def _create_agent(self, context: NegotiationContext, language: str) -> str:
        persona = self.agents.for_language("memory", language)
        memory_blocks = [
            {
                "label": "producer_terms",
                "value": json.dumps(context.base_terms.to_dict(), indent=2),
            },
            {
                "label": "examples",
                "value": json.dumps(NEGOTIATION_EXAMPLES, indent=2, ensure_ascii=False),
            },
            {"label": "tools", "value": json.dumps(OPENAI_TOOL_SCHEMAS, indent=2)},
            {
                "label": "state",
                "value": json.dumps(
                    {
                        "stage": "initial",
                        "userIntent": None,
                        "proposedPrice": None,
                        "agreedTerms": None,
                    }
                ),
            },
        ]
        return self.client.create_agent(
            name=f"{persona.name}_{context.conversation_id[:8]}",
            system=persona.system_prompt(context),
            memory_blocks=memory_blocks,
            model=self.model,
            embedding=self.embedding,
        )

    def respond(self, context: NegotiationContext, state: TurnState) -> RawReply:
        agent_id = state.get("agent_handle")
        if not agent_id:
            agent_id = self._create_agent(context, state.get("language", "en"))

        text, invocations = self.client.send_message(agent_id, state["user_message"])
        return RawReply(
            text=text or "No response generated",
            tool_invocations=tuple(invocations),
            agent_handle=agent_id,
            model=self.model,
        )

    def signals_negotiation(self, text: str, needs_more_info: bool) -> bool:
        return not needs_more_info


class SingleAgentBackend(NegotiationBackend):
    """One completion with a combined prompt; no language or tool handling."""

    kind = "single"
    mode = "plain"

    def __init__(
        self,
        settings: Settings,
        client: openai.OpenAI | None = None,
        agents: AgentRegistry = default_registry,
    ):
        if client is None:
            try:
                client = openai.OpenAI(api_key=settings.openai_api_key or None)
            except openai.OpenAIError as e:
                raise BackendNotConfiguredError(str(e)) from e
        self.client = client
        self.model = settings.openai_model
        self.agents = agents

    def respond(self, context: NegotiationContext, state: TurnState) -> RawReply:
        persona = self.agents.get("single")
        history = to_chat_messages(state.get("messages", []))
        system = persona.system_prompt(context, history_length=len(history) - 1)

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "system", "content": system}, *history],
                max_tokens=persona.config.get("max_tokens", 1024),
            )
        except openai.OpenAIError as e:
            raise BackendError(f"Failed to negotiate with AI agent: {e}") from e

        usage = getattr(response, "usage", None)
        return RawReply(
            text=_completion_text(response),
            tokens_used=getattr(usage, "total_tokens", None),
            model=self.model,
        )

    def extract_final_terms(self, history: list[dict]) -> dict | None:
        """Ask the model for the agreed terms of a transcript as JSON.

        Returns None when the model output is not a JSON object.
        """
        prompt = FINAL_TERMS_PROMPT.format(transcript=format_transcript(history))
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0.3,
                max_tokens=512,
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as e:
            raise BackendError(f"Final terms extraction failed: {e}") from e

        try:
            terms = json.loads(_completion_text(response) or "{}")
        except ValueError:
            logger.warning("Final terms extraction returned non-JSON output")
            return None
        return terms if isinstance(terms, dict) else None
