"""Split free text into lower-cased word tokens that keep tech punctuation."""
from __future__ import annotations

import re

_SPLIT_RE = re.compile(r"[^a-z0-9.+#-]+")
_CURLY_APOSTROPHES = str.maketrans({"‘": "'", "’": "'"})


def tokenize(text: str | None) -> list[str]:
    """Return tokens such as ``c++``, ``node.js`` or ``c#`` from *text*."""
    if not text:
        return []
    normalized = text.lower().translate(_CURLY_APOSTROPHES)
    return [t for t in _SPLIT_RE.split(normalized) if t]
