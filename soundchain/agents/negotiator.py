"""LangGraph graph for one negotiation turn.

detect_language -> generate -> interpret -> run_tools -> classify_stage

Only ``generate`` reaches the outside world (through the backend). The rest is
shared by every backend: tool execution always runs against the local pricing,
rights and contract tools, so a remote agent's own arithmetic is never trusted.
"""

import logging

from langchain_core.messages import AIMessage, HumanMessage
from langgraph.graph import END, START, StateGraph

from soundchain.agents.backends import NegotiationBackend
from soundchain.agents.state import Stage, ToolCall, ToolInvocation, TurnState
from soundchain.tools import canonical_tool_name
from soundchain.tools.contract import LicenseContract, generate_contract
from soundchain.tools.intent import (
    Intent,
    classify_intent,
    extract_price,
    infer_usage_rights,
    needs_more_info,
)
from soundchain.tools.language import detect_language
from soundchain.tools.pricing import calculate_license_price
from soundchain.tools.rights import validate_price, validate_usage_rights
from soundchain.tools.terms import BaseTerms, NegotiationRequest, parse_flag

logger = logging.getLogger(__name__)

PRICING_TOOLS = ("calculate_license_price",)


# ── Tool execution ───────────────────────────────────────────────


def contract_violations(arguments: dict, base_terms: BaseTerms) -> list[str]:
    """Reasons the proposed contract terms break the producer's base terms."""
    problems = []
    price = validate_price(float(arguments.get("price") or 0), base_terms.min_price)
    if not price.valid:
        problems.append(price.message)
    rights = validate_usage_rights(
        arguments.get("usageRights", arguments.get("usage_rights", [])),
        base_terms.allowed_usage_rights,
    )
    if not rights.valid:
        problems.append(rights.message)
    if parse_flag(arguments.get("exclusivity")) and not base_terms.exclusivity_available:
        problems.append("Exclusivity is not available for this track")
    return problems


def _dispatch_tool(name: str, arguments: dict, base_terms: BaseTerms):
    """Dispatch a tool call to the appropriate function."""
    if name == "calculate_license_price":
        return calculate_license_price(
            base_terms.min_price, NegotiationRequest.from_arguments(arguments)
        )
    elif name == "validate_usage_rights":
        requested = arguments.get("requestedRights") or arguments.get("usageRights") or []
        return validate_usage_rights(requested, base_terms.allowed_usage_rights)
    elif name == "validate_price":
        offered = arguments.get("offeredPrice", arguments.get("price"))
        return validate_price(float(offered), base_terms.min_price)
    elif name == "generate_contract":
        problems = contract_violations(arguments, base_terms)
        if problems:
            return {"error": "; ".join(problems)}
        return generate_contract(arguments, base_terms.min_price)
    return {"error": f"Unknown tool: {name}"}


def execute_tool(
    invocation: ToolInvocation, base_terms: BaseTerms
) -> tuple[ToolCall, LicenseContract | None]:
    """Run one invocation; failures become an inline error result."""
    name = canonical_tool_name(invocation.name)
    try:
        result = _dispatch_tool(name, invocation.arguments, base_terms)
    except (KeyError, TypeError, ValueError) as e:
        result = {"error": f"Invalid arguments for {name}: {e}"}

    contract = result if isinstance(result, LicenseContract) else None
    payload = result.to_dict() if hasattr(result, "to_dict") else result
    if "error" in payload:
        logger.warning("Tool %s failed: %s", name, payload["error"])
    return ToolCall(tool=name, arguments=invocation.arguments, result=payload), contract


# ── Free-text interpretation ─────────────────────────────────────


def infer_tool_invocations(
    reply: str, user_message: str, intent: Intent, messages: list
) -> list[ToolInvocation]:
    """Tool calls implied by a plain-text reply.

    A dollar amount in the reply means a price was proposed. When the buyer
    agrees, the price they agreed to is the one quoted in the previous
    assistant message, falling back to the reply's own amount.
    """
    earlier_replies = [m.content for m in messages if isinstance(m, AIMessage)][:-1]
    buyer_messages = [m.content for m in messages if isinstance(m, HumanMessage)]

    reply_price = extract_price(reply)
    agreed_price = None
    if intent == Intent.AGREE:
        for text in reversed(earlier_replies):
            agreed_price = extract_price(text)
            if agreed_price is not None:
                break
        if agreed_price is None:
            agreed_price = reply_price

    if reply_price is None and agreed_price is None:
        return []

    terms = {
        "usageRights": infer_usage_rights(reply, user_message, *buyer_messages),
        "exclusivity": False,
        "territory": "worldwide",
    }
    invocations = [ToolInvocation("calculate_license_price", dict(terms))]
    if agreed_price is not None:
        invocations.append(
            ToolInvocation(
                "generate_contract",
                {**terms, "price": agreed_price, "duration": None, "attribution": True},
            )
        )
    return invocations


# ── Graph ────────────────────────────────────────────────────────


def build_graph(backend: NegotiationBackend):
    """Build and compile the turn graph for one backend."""

    def detect_language_node(state: TurnState) -> dict:
        return {"language": detect_language(state["user_message"])}

    def generate(state: TurnState) -> dict:
        reply = backend.respond(state["context"], state)
        return {
            "reply": reply,
            "agent_handle": reply.agent_handle or state.get("agent_handle"),
            "messages": [AIMessage(content=reply.text)],
        }

    def interpret(state: TurnState) -> dict:
        reply = state["reply"]
        intent = classify_intent(state["user_message"])
        if backend.mode == "tools":
            invocations = list(reply.tool_invocations)
        else:
            invocations = infer_tool_invocations(
                reply.text, state["user_message"], intent, state.get("messages", [])
            )
        return {
            "intent": intent.value,
            "needs_more_info": needs_more_info(reply.text),
            "invocations": invocations,
        }

    def run_tools(state: TurnState) -> dict:
        base_terms = state["context"].base_terms
        tool_calls = []
        contract = None
        for invocation in state.get("invocations", []):
            call, produced = execute_tool(invocation, base_terms)
            tool_calls.append(call)
            if produced is not None:
                contract = produced
        return {"tool_calls": tool_calls, "contract": contract}

    def classify_stage(state: TurnState) -> dict:
        tool_calls = state.get("tool_calls", [])
        if state.get("contract") is not None:
            stage = Stage.FINALIZING
        elif any(c.tool in PRICING_TOOLS and not c.failed for c in tool_calls):
            stage = Stage.PROPOSING
        elif backend.signals_negotiation(
            state["reply"].text, state.get("needs_more_info", False)
        ):
            stage = Stage.NEGOTIATING
        else:
            stage = Stage.UNDERSTANDING
        return {"stage": stage.value}

    def after_generate(state: TurnState) -> str:
        if backend.mode == "plain":
            return END
        return "interpret"

    graph = StateGraph(TurnState)

    graph.add_node("detect_language", detect_language_node)
    graph.add_node("generate", generate)
    graph.add_node("interpret", interpret)
    graph.add_node("run_tools", run_tools)
    graph.add_node("classify_stage", classify_stage)

    graph.add_edge(START, "detect_language")
    graph.add_edge("detect_language", "generate")
    graph.add_conditional_edges("generate", after_generate)
    graph.add_edge("interpret", "run_tools")
    graph.add_edge("run_tools", "classify_stage")
    graph.add_edge("classify_stage", END)

    return graph.compile()
