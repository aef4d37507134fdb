import re

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_service_text(text: str) -> str:
    """Réduit les blancs consécutifs à un espace, trim, minuscules."""
    return _WHITESPACE_RE.sub(" ", text or "").strip().lower()
