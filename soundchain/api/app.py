"""FastAPI application exposing the negotiation endpoint."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from soundchain.agents.state import ConversationState, NegotiationContext
from soundchain.api.schemas import NegotiateRequest
from soundchain.core.errors import (
    InvalidRequestError,
    MissingFieldsError,
    SoundChainError,
)
from soundchain.core.orchestrator import BackendFlags, NegotiationOrchestrator
from soundchain.tools.terms import BaseTerms

logger = logging.getLogger(__name__)


async def missing_fields_handler(request: Request, exc: MissingFieldsError):
    logger.warning("Rejected negotiation request, missing: %s", exc.fields)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": exc.message, "details": exc.fields},
    )


async def invalid_request_handler(request: Request, exc: InvalidRequestError):
    logger.warning("Invalid negotiation request: %s", exc.message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "details": exc.message},
    )


async def negotiation_error_handler(request: Request, exc: SoundChainError):
    logger.error("Negotiation failed: %s", exc.message)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Failed to process negotiation", "details": exc.message},
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning("Invalid negotiation request: %s", exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Invalid request",
            "details": [
                {"loc": list(e.get("loc", ())), "msg": e.get("msg")}
                for e in exc.errors()
            ],
        },
    )


def create_app(orchestrator: NegotiationOrchestrator | None = None) -> FastAPI:
    """Build the API around an orchestrator (a default one reads the environment)."""
    orchestrator = orchestrator or NegotiationOrchestrator()
    app = FastAPI(title="SoundChain Negotiation API")

    app.add_exception_handler(MissingFieldsError, missing_fields_handler)
    app.add_exception_handler(InvalidRequestError, invalid_request_handler)
    app.add_exception_handler(SoundChainError, negotiation_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    @app.post("/api/negotiate")
    def negotiate(body: NegotiateRequest):
        missing = body.missing_fields()
        if missing:
            raise MissingFieldsError(missing)

        try:
            base_terms = BaseTerms.from_dict(body.baseTerms)
            context = NegotiationContext.from_request(
                body.conversationId, body.trackId, base_terms, body.trackMetadata
            )
        except (AttributeError, TypeError, ValueError) as e:
            raise InvalidRequestError(f"Invalid baseTerms or trackMetadata: {e}") from e

        conversation = ConversationState(
            conversation_id=body.conversationId,
            history=[m.model_dump() for m in body.history],
            agent_handle=body.existingAgentId,
        )
        flags = BackendFlags(
            use_letta=body.useLetta,
            use_improved_system=body.useImprovedSystem,
            use_groq=body.useGroq,
        )

        try:
            result = orchestrator.negotiate(context, conversation, body.userMessage, flags)
        except SoundChainError:
            raise
        except Exception as e:
            logger.exception("Unexpected negotiation failure")
            raise SoundChainError(str(e) or e.__class__.__name__) from e

        return result.to_response()

    @app.get("/api/negotiate")
    def negotiation_status(agentId: str | None = None):
        letta_configured = orchestrator.is_available("letta")
        if not agentId:
            return {
                "lettaConfigured": letta_configured,
                "groqConfigured": orchestrator.is_available("groq"),
                "message": "Multi-agent system status",
            }
        return {
            "agentId": agentId,
            "status": "active",
            "lettaConfigured": letta_configured,
        }

    @app.get("/api/health")
    def health():
        return {"status": "ok"}

    return app
