import re
from typing import List, Optional

TOKEN_SEPARATORS = re.compile(r"[,;|&]")


def normalize_tokens(text: Optional[str]) -> List[str]:
    """Split a free-text tag field into lowercase, trimmed tokens.

    Empty or missing input gives an empty list. Order follows the input but
    callers must not depend on it.
    """
    if not text:
        return []

    tokens = []
    for raw in TOKEN_SEPARATORS.split(text.lower()):
        token = raw.strip()
        if token:
            tokens.append(token)

    return tokens
