"""Runtime configuration read from the environment (.env supported)."""

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    groq_api_key: str = ""
    groq_base_url: str = "https://api.groq.com/openai/v1"
    groq_model: str = "llama-3.3-70b-versatile"
    letta_api_key: str = ""
    letta_base_url: str = "https://api.letta.com"
    letta_model: str = "anthropic/claude-3-5-sonnet-20241022"
    letta_embedding: str = "google/text-embedding-004"
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    database_url: str = "sqlite:///data/soundchain.db"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        defaults = cls()
        return cls(
            groq_api_key=os.getenv("GROQ_API_KEY", ""),
            groq_base_url=os.getenv("GROQ_BASE_URL", defaults.groq_base_url),
            groq_model=os.getenv("GROQ_MODEL", defaults.groq_model),
            letta_api_key=os.getenv("LETTA_API_KEY", ""),
            letta_base_url=os.getenv("LETTA_BASE_URL", defaults.letta_base_url),
            letta_model=os.getenv("LETTA_MODEL", defaults.letta_model),
            letta_embedding=os.getenv("LETTA_EMBEDDING", defaults.letta_embedding),
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            openai_model=os.getenv("OPENAI_MODEL", defaults.openai_model),
            database_url=os.getenv("DATABASE_URL", defaults.database_url),
            log_level=os.getenv("LOG_LEVEL", defaults.log_level),
        )

    @property
    def groq_configured(self) -> bool:
        return bool(self.groq_api_key)

    @property
    def letta_configured(self) -> bool:
        return bool(self.letta_api_key)


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
