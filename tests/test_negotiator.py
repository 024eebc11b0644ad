"""Tests for tool execution and the turn graph."""

import json

from langchain_core.messages import AIMessage, HumanMessage

from soundchain.agents.backends import AgentMemoryBackend, FastCompletionBackend
from soundchain.agents.negotiator import (
    build_graph,
    execute_tool,
    infer_tool_invocations,
)
from soundchain.agents.state import Stage, ToolInvocation
from soundchain.tools.contract import LicenseContract
from soundchain.tools.intent import Intent
from soundchain.tools.terms import BaseTerms


def run_turn(backend, context, user_message, history=(), agent_handle=None):
    graph = build_graph(backend)
    return graph.invoke(
        {
            "context": context,
            "user_message": user_message,
            "agent_handle": agent_handle,
            "messages": [*history, HumanMessage(content=user_message)],
        }
    )


class TestExecuteTool:
    def test_calculate_price_uses_producer_base(self, base_terms):
        call, contract = execute_tool(
            ToolInvocation("calculate_license_price", {"usageRights": ["YOUTUBE", "COMMERCIAL"]}),
            base_terms,
        )
        assert call.result["finalPrice"] == 127.5
        assert call.result["breakdown"]["basePrice"] == 50.0
        assert contract is None

    def test_alias_recorded_under_canonical_name(self, base_terms):
        call, _ = execute_tool(
            ToolInvocation("calculate_price", {"usageRights": ["YOUTUBE"]}), base_terms
        )
        assert call.tool == "calculate_license_price"
        assert not call.failed

    def test_unknown_tool(self, base_terms):
        call, contract = execute_tool(ToolInvocation("launch_rocket", {}), base_terms)
        assert call.result == {"error": "Unknown tool: launch_rocket"}
        assert call.failed
        assert contract is None

    def test_bad_arguments_become_error(self, base_terms):
        call, _ = execute_tool(ToolInvocation("validate_price", {}), base_terms)
        assert call.failed
        assert call.result["error"].startswith("Invalid arguments for validate_price")

    def test_validate_rights_against_allow_list(self, base_terms):
        call, _ = execute_tool(
            ToolInvocation("validate_usage_rights", {"requestedRights": ["film", "youtube"]}),
            base_terms,
        )
        assert call.result["valid"] is False
        assert call.result["invalidRights"] == ["FILM"]

    def test_contract_generated(self, base_terms):
        call, contract = execute_tool(
            ToolInvocation(
                "generate_contract", {"price": 127.5, "usageRights": ["YOUTUBE", "COMMERCIAL"]}
            ),
            base_terms,
        )
        assert isinstance(contract, LicenseContract)
        assert call.result["price"] == 127.5
        assert call.result["breakdown"]["finalPrice"] == 127.5

    def test_contract_below_floor_refused(self, base_terms):
        call, contract = execute_tool(
            ToolInvocation("generate_contract", {"price": 30, "usageRights": ["YOUTUBE"]}),
            base_terms,
        )
        assert contract is None
        assert "below minimum of $50" in call.result["error"]

    def test_contract_with_disallowed_right_refused(self, base_terms):
        call, contract = execute_tool(
            ToolInvocation("generate_contract", {"price": 300, "usageRights": ["FILM"]}),
            base_terms,
        )
        assert contract is None
        assert "FILM" in call.result["error"]

    def test_exclusive_contract_refused_when_unavailable(self):
        terms = BaseTerms(min_price=50, exclusivity_available=False)
        call, contract = execute_tool(
            ToolInvocation(
                "generate_contract",
                {"price": 500, "usageRights": ["STREAMING"], "exclusivity": True},
            ),
            terms,
        )
        assert contract is None
        assert "Exclusivity is not available" in call.result["error"]

    def test_string_false_exclusivity_allowed(self):
        terms = BaseTerms(min_price=50, exclusivity_available=False)
        call, contract = execute_tool(
            ToolInvocation(
                "generate_contract",
                {"price": 80, "usageRights": ["STREAMING"], "exclusivity": "false"},
            ),
            terms,
        )
        assert contract is not None
        assert contract.exclusivity is False


class TestInferToolInvocations:
    def test_quote_means_price_calculation(self):
        reply = "For monetized YouTube use the license is $127.50."
        messages = [HumanMessage(content="for youtube ads"), AIMessage(content=reply)]
        invocations = infer_tool_invocations(reply, "for youtube ads", Intent.ASK_INFO, messages)
        assert [i.name for i in invocations] == ["calculate_license_price"]
        assert invocations[0].arguments["usageRights"] == ["YOUTUBE", "COMMERCIAL"]
        assert invocations[0].arguments["exclusivity"] is False
        assert invocations[0].arguments["territory"] == "worldwide"

    def test_no_price_no_tools(self):
        messages = [HumanMessage(content="hi"), AIMessage(content="What's this for?")]
        assert infer_tool_invocations("What's this for?", "hi", Intent.ASK_INFO, messages) == []

    def test_agreement_uses_previous_quote(self):
        messages = [
            HumanMessage(content="podcast intro"),
            AIMessage(content="That would be $36."),
            HumanMessage(content="yes"),
            AIMessage(content="Great, preparing your contract."),
        ]
        invocations = infer_tool_invocations(
            "Great, preparing your contract.", "yes", Intent.AGREE, messages
        )
        contract = invocations[-1]
        assert contract.name == "generate_contract"
        assert contract.arguments["price"] == 36.0
        assert contract.arguments["usageRights"] == ["PODCAST"]

    def test_agreement_falls_back_to_reply_price(self):
        messages = [HumanMessage(content="ok"), AIMessage(content="Deal at $60.")]
        invocations = infer_tool_invocations("Deal at $60.", "ok", Intent.AGREE, messages)
        assert invocations[-1].arguments["price"] == 60.0


class TestGraphFastPath:
    def test_question_stays_understanding(self, settings, context, fake_openai):
        backend = FastCompletionBackend(settings, client=fake_openai("What's this for?"))
        result = run_turn(backend, context, "Hi, I like this beat")
        assert result["stage"] == Stage.UNDERSTANDING.value
        assert result["needs_more_info"] is True
        assert result["tool_calls"] == []
        assert result.get("contract") is None

    def test_price_talk_without_quote_is_negotiating(self, settings, context, fake_openai):
        backend = FastCompletionBackend(
            settings, client=fake_openai("Giá phụ thuộc vào mục đích sử dụng ạ.")
        )
        result = run_turn(backend, context, "Giá bao nhiêu vậy")
        assert result["language"] == "vi"
        assert result["stage"] == Stage.NEGOTIATING.value

    def test_vietnamese_persona_selected(self, settings, context, fake_openai):
        fake = fake_openai("Anh/chị dùng cho gì ạ?")
        run_turn(FastCompletionBackend(settings, client=fake), context, "Tôi muốn mua bản quyền")
        system = fake.completions.calls[0]["messages"][0]
        assert system["role"] == "system"
        assert "Giá tối thiểu: $50" in system["content"]


class TestGraphAgentMemory:
    def test_reported_tools_run_locally(self, settings, context, fake_letta):
        letta = fake_letta(
            [
                {
                    "message_type": "tool_call_message",
                    "tool_call": {
                        "name": "calculate_license_price",
                        # the agent's own arithmetic is ignored
                        "arguments": json.dumps({"usageRights": ["YOUTUBE"], "finalPrice": 1}),
                    },
                },
                {"message_type": "assistant_message", "content": "That's $90."},
            ]
        )
        backend = AgentMemoryBackend(settings, client=letta.client())
        result = run_turn(backend, context, "YouTube please")

        assert result["agent_handle"] == "agent-123"
        assert result["tool_calls"][0].result["finalPrice"] == 90.0
        assert result["stage"] == Stage.PROPOSING.value

    def test_failed_pricing_call_does_not_propose(self, settings, context, fake_letta):
        letta = fake_letta(
            [
                {"message_type": "tool_call_message", "tool_call": {"name": "nope", "arguments": "{}"}},
                {"message_type": "assistant_message", "content": "Let me check that."},
            ]
        )
        backend = AgentMemoryBackend(settings, client=letta.client())
        result = run_turn(backend, context, "hello", agent_handle="agent-9")

        assert result["tool_calls"][0].failed
        assert result["stage"] == Stage.NEGOTIATING.value
        # existing agent reused, nothing created
        assert [r.url.path for r in letta.requests] == ["/v1/agents/agent-9/messages"]
