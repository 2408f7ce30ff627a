"""Whitespace tokenizer and token classes for extracted result-sheet text.

PDF text extraction reflows lines unpredictably, so the anchor strategies
work on a flat token list and ignore line breaks entirely. The generic grid
fallback is the only consumer of line structure (see split_lines).
"""

import re


BODYWEIGHT_RE = re.compile(r'^\d{2,3}\.\d{2}$')
BIRTH_YEAR_RE = re.compile(r'^(19|20)\d{2}$')
RECORD_NUM_RE = re.compile(r'^\d{1,3}$')
GRADE_RE = re.compile(r'^\d$')

# Iteration mark, hiragana, katakana, CJK ideographs (incl. extension A and
# compatibility), half-width katakana
CJK_RE = re.compile(
    r'[\u3005\u3040-\u30ff\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff\uff66-\uff9f]')


def tokenize(text: str) -> list[str]:
    """Split text into non-empty whitespace-delimited tokens."""
    if not text:
        return []
    return text.split()


def split_lines(text: str) -> list[list[str]]:
    """Split text into non-empty lines, each split into whitespace cells."""
    if not text:
        return []
    return [line.split() for line in text.split('\n') if line.strip()]


def has_cjk(token: str) -> bool:
    return CJK_RE.search(token) is not None


def is_bodyweight(token: str) -> bool:
    return BODYWEIGHT_RE.match(token) is not None


def is_birth_year(token: str) -> bool:
    return BIRTH_YEAR_RE.match(token) is not None
