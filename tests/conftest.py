"""Shared fixtures: fake completion clients, Letta transport, in-memory DB."""

import json
from types import SimpleNamespace

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from soundchain.agents.letta import LettaClient
from soundchain.agents.state import NegotiationContext
from soundchain.core.config import Settings
from soundchain.db.models import Base
from soundchain.tools.terms import BaseTerms


class FakeCompletions:
    """Stands in for ``client.chat.completions``; replays scripted replies."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=reply))],
            usage=SimpleNamespace(total_tokens=42),
        )


class FakeOpenAI:
    def __init__(self, *replies):
        self.completions = FakeCompletions(replies)
        self.chat = SimpleNamespace(completions=self.completions)


class FakeLetta:
    """Records requests made to a mocked Letta server."""

    def __init__(self, *turns, agent_id="agent-123"):
        self.turns = list(turns)
        self.agent_id = agent_id
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/v1/agents/":
            return httpx.Response(200, json={"id": self.agent_id})
        return httpx.Response(200, json={"messages": self.turns.pop(0)})

    def client(self) -> LettaClient:
        return LettaClient("test-key", transport=httpx.MockTransport(self.handler))

    def payload(self, index: int) -> dict:
        return json.loads(self.requests[index].content)


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def base_terms():
    return BaseTerms(
        min_price=50.0,
        allowed_usage_rights=("YOUTUBE", "COMMERCIAL", "STREAMING"),
    )


@pytest.fixture
def context(base_terms):
    return NegotiationContext.from_request(
        "conv-0001-abcdef",
        "lofi-001",
        base_terms,
        {"title": "Saigon Rain", "artist": "Minh Tran"},
    )


@pytest.fixture
def session():
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture
def fake_openai():
    return FakeOpenAI


@pytest.fixture
def fake_letta():
    return FakeLetta
