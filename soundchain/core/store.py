"""CRUD operations for tracks, conversations and licenses."""

from sqlalchemy.orm import Session

from soundchain.agents.state import ConversationState, Stage
from soundchain.db.models import Conversation, License, Message, Track
from soundchain.tools.contract import LicenseContract
from soundchain.tools.terms import BaseTerms


def get_track(session: Session, track_id: str) -> Track | None:
    return session.query(Track).filter_by(track_id=track_id).first()


def list_tracks(session: Session) -> list[Track]:
    return session.query(Track).order_by(Track.track_id.asc()).all()


def track_base_terms(track: Track) -> BaseTerms:
    return BaseTerms(
        min_price=track.min_price,
        allowed_usage_rights=tuple(track.allowed_usage_rights),
        exclusivity_available=track.exclusivity_available,
        territory=track.territory,
    )


def get_conversation(session: Session, conversation_id: str) -> Conversation | None:
    return session.query(Conversation).filter_by(conversation_id=conversation_id).first()


def get_or_create_conversation(
    session: Session, conversation_id: str, track: Track
) -> Conversation:
    conv = get_conversation(session, conversation_id)
    if not conv:
        conv = Conversation(
            conversation_id=conversation_id,
            track_id=track.id,
            stage=Stage.UNDERSTANDING.value,
            status="active",
        )
        session.add(conv)
        session.flush()
    return conv


def save_message(
    session: Session, conversation_id: int, role: str, content: str
) -> Message:
    msg = Message(conversation_id=conversation_id, role=role, content=content)
    session.add(msg)
    session.flush()
    return msg


def get_conversation_history(
    session: Session, conversation_id: int, limit: int | None = None
) -> list[dict]:
    """Messages of a conversation in order, as {role, content} dicts."""
    msgs = (
        session.query(Message)
        .filter_by(conversation_id=conversation_id)
        .order_by(Message.created_at.asc(), Message.id.asc())
        .all()
    )
    if limit is not None and len(msgs) > limit:
        msgs = msgs[-limit:]
    return [{"role": m.role, "content": m.content} for m in msgs]


def update_conversation_state(
    session: Session, conversation: Conversation, state: ConversationState
) -> None:
    """Copy stage, language and agent handle of a finished turn onto the row."""
    conversation.stage = Stage(state.stage).value
    if state.detected_language:
        conversation.language = state.detected_language
    if state.agent_handle:
        conversation.agent_handle = state.agent_handle
    if conversation.stage == Stage.FINALIZING.value:
        conversation.status = "finalized"
    session.flush()


def save_license(
    session: Session, conversation_id: int, contract: LicenseContract
) -> License:
    record = License(
        conversation_id=conversation_id,
        price=contract.price,
        currency=contract.currency,
        terms=contract.to_dict(),
        summary=contract.summary,
    )
    session.add(record)
    session.flush()
    return record


def list_conversations(session: Session) -> list[Conversation]:
    return session.query(Conversation).order_by(Conversation.created_at.desc()).all()


def load_conversation_state(
    session: Session, conversation: Conversation
) -> ConversationState:
    return ConversationState(
        conversation_id=conversation.conversation_id,
        stage=Stage(conversation.stage),
        history=get_conversation_history(session, conversation.id),
        agent_handle=conversation.agent_handle,
        detected_language=conversation.language,
    )
