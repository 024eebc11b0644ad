"""Intent classification and the text heuristics applied to chat turns."""

import re
from enum import Enum


class Intent(str, Enum):
    AGREE = "agree"
    REJECT = "reject"
    ASK_INFO = "ask_info"
    PROPOSE_ALT = "propose_alt"


AGREEMENT_PATTERNS = re.compile(
    r"đồng ý|được|\bok(ay)?\b|\bagree|\baccept|^\s*(yes|yeah|yep|sure)\b"
    r"|sounds good|perfect|\bdeal\b",
    re.IGNORECASE,
)

OUTRIGHT_REJECTION_PATTERNS = re.compile(
    r"^\s*(no|nope)\b(?![\s,]+(problem|worries))|không đồng ý|không được|từ chối",
    re.IGNORECASE,
)

REJECTION_PATTERNS = re.compile(
    r"too (expensive|high|much)|\bdecline|\breject|\bnot interested|đắt quá|cao quá",
    re.IGNORECASE,
)

COUNTER_PATTERNS = re.compile(
    r"how about|what about|can you do|would you take|\bcounter|\binstead\b"
    r"|giảm|bớt",
    re.IGNORECASE,
)

PRICE_PATTERN = re.compile(r"\$(\d+\.?\d*)")
PRICE_MENTION_PATTERN = re.compile(r"\$\d+|giá", re.IGNORECASE)

INTERROGATIVE_PATTERNS = re.compile(
    r"\?|\bwhat\b|\bhow\b|\bwhich\b|\bgì\b|bao nhiêu", re.IGNORECASE
)

# Keyword -> implied usage right, in the order rights are reported.
RIGHT_KEYWORDS = (
    ("YOUTUBE", re.compile(r"youtube", re.IGNORECASE)),
    ("TIKTOK", re.compile(r"tiktok", re.IGNORECASE)),
    ("PODCAST", re.compile(r"podcast", re.IGNORECASE)),
    (
        "COMMERCIAL",
        re.compile(
            r"commercial|moneti[sz]|\bads?\b|sponsor|kiếm tiền|quảng cáo|thương mại",
            re.IGNORECASE,
        ),
    ),
)

DEFAULT_RIGHT = "STREAMING"


def is_agreement(text: str) -> bool:
    """Return True if the buyer message reads as acceptance."""
    return classify_intent(text) == Intent.AGREE


def classify_intent(text: str) -> Intent:
    """Map a buyer message onto the closed set of negotiation intents.

    A counter-offer wins over everything. A leading "no" and the Vietnamese
    refusals ("không đồng ý" contains "đồng ý") win over agreement; softer
    rejection phrases only count when nothing in the message agrees.
    """
    text = (text or "").strip()
    if COUNTER_PATTERNS.search(text) or (
        PRICE_PATTERN.search(text) and not AGREEMENT_PATTERNS.search(text)
    ):
        return Intent.PROPOSE_ALT
    if OUTRIGHT_REJECTION_PATTERNS.search(text):
        return Intent.REJECT
    if AGREEMENT_PATTERNS.search(text):
        return Intent.AGREE
    if REJECTION_PATTERNS.search(text):
        return Intent.REJECT
    return Intent.ASK_INFO


def extract_price(text: str) -> float | None:
    """First dollar amount in the text, or None."""
    match = PRICE_PATTERN.search(text or "")
    if not match:
        return None
    return float(match.group(1))


def mentions_price(text: str) -> bool:
    return bool(PRICE_MENTION_PATTERN.search(text or ""))


def needs_more_info(text: str) -> bool:
    """Return True if the reply asks the buyer something."""
    return bool(INTERROGATIVE_PATTERNS.search(text or ""))


def infer_usage_rights(*texts: str) -> list[str]:
    """Usage rights implied by keywords in any of the texts.

    Falls back to STREAMING when nothing matches.
    """
    joined = "\n".join(t for t in texts if t)
    rights = [right for right, pattern in RIGHT_KEYWORDS if pattern.search(joined)]
    return rights or [DEFAULT_RIGHT]
