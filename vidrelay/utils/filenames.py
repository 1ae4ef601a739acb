import re
from typing import Optional

_UNSAFE_RE = re.compile(r"[^a-zA-Z0-9_\- ]")
_SPACES_RE = re.compile(r"\s+")

def sanitize_title(title: Optional[str], default: str = "video") -> str:
    """Keep ASCII letters, digits, ``-``, ``_`` and spaces; spaces become ``_``."""
    clean = _UNSAFE_RE.sub("", title or "").strip()
    clean = _SPACES_RE.sub("_", clean)
    return clean or default

def build_filename(title: Optional[str], audio: bool = False) -> str:
    return f"{sanitize_title(title)}.{'mp3' if audio else 'mp4'}"
