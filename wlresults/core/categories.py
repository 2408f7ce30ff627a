"""Weight-class markers and the running scan state.

A category marker is either a single token ("55Kg", "+109kg") or a number
token followed by a separate "kg" token ("55", "Kg"). Every record found
after a marker inherits it until the next marker.
"""

import re
from dataclasses import dataclass


CATEGORIES = (
    '45', '49', '55', '59', '61', '64', '67', '71', '73', '76',
    '81', '89', '96', '102', '109', '+87', '+109',
)

_CATEGORY_ALT = '|'.join(re.escape(c) for c in CATEGORIES)
CATEGORY_RE = re.compile(rf'^({_CATEGORY_ALT})\s*kg$', re.IGNORECASE)
CATEGORY_NUM_RE = re.compile(rf'^({_CATEGORY_ALT})$')
KG_RE = re.compile(r'^kg$', re.IGNORECASE)


@dataclass
class ScanState:
    """Cursor threaded through one strategy scan."""
    category: str | None = None
    scan_start: int = 0


def match_category(tokens: list[str], i: int) -> tuple[str, int] | None:
    """Return (category, tokens spanned) if a marker starts at tokens[i]."""
    token = tokens[i]
    if CATEGORY_RE.match(token):
        return token, 1
    if (CATEGORY_NUM_RE.match(token) and i + 1 < len(tokens)
            and KG_RE.match(tokens[i + 1])):
        return token + tokens[i + 1], 2
    return None


def advance_category(tokens: list[str], i: int, state: ScanState) -> int:
    """Apply a marker at tokens[i] to state.

    Returns the index just past the marker, or i unchanged when tokens[i]
    is not a marker.
    """
    found = match_category(tokens, i)
    if found is None:
        return i
    category, width = found
    state.category = category
    state.scan_start = i + width
    return state.scan_start
