"""Persona registry: agent configurations per backend and language."""

from dataclasses import dataclass, field
from typing import Callable

from soundchain.agents import prompts
from soundchain.agents.state import NegotiationContext


@dataclass(frozen=True)
class AgentConfig:
    agent_id: str
    name: str
    language: str  # "vi" | "en" | "any"
    prompt_builder: Callable[..., str]
    config: dict = field(default_factory=dict)

    def system_prompt(self, context: NegotiationContext, **kwargs) -> str:
        return self.prompt_builder(context, **kwargs)


class AgentRegistry:
    """Simple in-memory registry of agent configurations."""

    def __init__(self):
        self._agents: dict[str, AgentConfig] = {}
        self._register_defaults()

    def _register_defaults(self):
        self.register(
            AgentConfig(
                agent_id="fast-en",
                name="English fast negotiator",
                language="en",
                prompt_builder=prompts.fast_prompt_en,
                config={"temperature": 0.7, "max_tokens": 1024},
            )
        )
        self.register(
            AgentConfig(
                agent_id="fast-vi",
                name="Vietnamese fast negotiator",
                language="vi",
                prompt_builder=prompts.fast_prompt_vi,
                config={"temperature": 0.7, "max_tokens": 1024},
            )
        )
        self.register(
            AgentConfig(
                agent_id="memory-en",
                name="en_negotiator",
                language="en",
                prompt_builder=prompts.memory_prompt_en,
                config={"role": "english_negotiator"},
            )
        )
        self.register(
            AgentConfig(
                agent_id="memory-vi",
                name="vn_negotiator",
                language="vi",
                prompt_builder=prompts.memory_prompt_vi,
                config={"role": "vietnamese_negotiator"},
            )
        )
        self.register(
            AgentConfig(
                agent_id="single",
                name="Licensing negotiator",
                language="any",
                prompt_builder=prompts.single_agent_prompt,
                config={"max_tokens": 1024},
            )
        )

    def register(self, config: AgentConfig) -> None:
        self._agents[config.agent_id] = config

    def get(self, agent_id: str) -> AgentConfig | None:
        return self._agents.get(agent_id)

    def for_language(self, family: str, language: str) -> AgentConfig:
        """Persona of a backend family ("fast", "memory") for a language.

        Unknown languages fall back to the English persona.
        """
        config = self.get(f"{family}-{language}") or self.get(f"{family}-en")
        if not config:
            raise ValueError(f"No '{family}' persona registered")
        return config

    def list_agents(self) -> list[AgentConfig]:
        return list(self._agents.values())


registry = AgentRegistry()
