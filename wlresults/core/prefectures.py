"""The 47 prefecture names and matchers that survive PDF text reflow.

Result sheets print the short prefecture name ("沖縄", not "沖縄県").
Text extraction sometimes injects spaces inside a multi-character name
("沖 縄"), so every lookup has an exact form and a spaced form.
"""

import re


PREFECTURES = (
    '北海道', '青森', '岩手', '宮城', '秋田', '山形', '福島',
    '茨城', '栃木', '群馬', '埼玉', '千葉', '東京', '神奈川',
    '新潟', '富山', '石川', '福井', '山梨', '長野', '岐阜',
    '静岡', '愛知', '三重', '滋賀', '京都', '大阪', '兵庫',
    '奈良', '和歌山', '鳥取', '島根', '岡山', '広島', '山口',
    '徳島', '香川', '愛媛', '高知', '福岡', '佐賀', '長崎',
    '熊本', '大分', '宮崎', '鹿児島', '沖縄',
)

_PREFECTURE_SET = frozenset(PREFECTURES)
_DIRECT_RE = re.compile('|'.join(PREFECTURES))
_SPACED_RES = [
    (name, re.compile(r'\s*'.join(re.escape(ch) for ch in name)))
    for name in PREFECTURES
]

# Longest name is three characters, so a reflowed name spans at most three tokens
_MAX_PIECES = max(len(name) for name in PREFECTURES)


def find_prefecture(text: str) -> tuple[str, int, int] | None:
    """Locate a prefecture inside text.

    Returns (canonical name, start, end) for the leftmost direct occurrence
    of any name. Failing that, the first name in list order that matches
    with whitespace between its characters wins.
    """
    m = _DIRECT_RE.search(text)
    if m:
        return m.group(0), m.start(), m.end()
    for name, pattern in _SPACED_RES:
        m = pattern.search(text)
        if m:
            return name, m.start(), m.end()
    return None


def match_prefecture_tokens(tokens: list[str], i: int) -> tuple[str, int] | None:
    """Return (name, tokens spanned) when a prefecture starts at tokens[i].

    A single token must equal a name. Otherwise up to three short tokens
    whose concatenation equals a name are accepted ("沖", "縄").
    """
    token = tokens[i]
    if token in _PREFECTURE_SET:
        return token, 1
    joined = token
    for width in range(2, _MAX_PIECES + 1):
        if i + width > len(tokens):
            break
        piece = tokens[i + width - 1]
        if len(piece) > 2 or len(joined) >= _MAX_PIECES:
            break
        joined += piece
        if joined in _PREFECTURE_SET:
            return joined, width
    return None
