"""Request bodies of the negotiation API (camelCase, as sent by the web client)."""

from pydantic import BaseModel, ConfigDict, Field

REQUIRED_FIELDS = ("conversationId", "trackId", "userMessage", "baseTerms")


class HistoryMessage(BaseModel):
    role: str
    content: str


class NegotiateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    conversationId: str | None = None
    trackId: str | int | None = None
    trackMetadata: dict | None = None
    baseTerms: dict | None = None
    userMessage: str | None = None
    history: list[HistoryMessage] = Field(default_factory=list)
    existingAgentId: str | None = Field(default=None, alias="agentId")
    useLetta: bool = True
    useImprovedSystem: bool = True
    useGroq: bool = False

    def missing_fields(self) -> list[str]:
        """Required fields that are absent or empty."""
        missing = []
        for name in REQUIRED_FIELDS:
            value = getattr(self, name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)
        return missing
