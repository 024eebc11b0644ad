"""Language detection for buyer messages."""

import re

VIETNAMESE_PATTERN = re.compile(
    r"[àáạảãâầấậẩẫăằắặẳẵèéẹẻẽêềếệểễìíịỉĩòóọỏõôồốộổỗơờớợởỡùúụủũưừứựửữỳýỵỷỹđ]",
    re.IGNORECASE,
)


def detect_language(text: str) -> str:
    """Return 'vi' if the text carries Vietnamese diacritics, else 'en'."""
    if text and VIETNAMESE_PATTERN.search(text):
        return "vi"
    return "en"
