"""Identity-field segmentation and record-number extraction.

The info span of an athlete (bib, name, prefecture, affiliation, grade)
arrives as a space-joined string. Bib and grade are positionally fixed so
they are stripped first; the name/prefecture/affiliation boundary depends on
finding a prefecture name in what remains.

Record numbers follow the anchor: three snatch attempts, three clean & jerk
attempts, then best/rank pairs for snatch, C&J and total. Only the summary
values (positions 6-11 of the whole numbers after the anchor) are kept.
"""

import re
from dataclasses import dataclass

from .models import RESULT_FIELDS
from .prefectures import find_prefecture
from .tokenizer import RECORD_NUM_RE, has_cjk


LEADING_BIB_RE = re.compile(r'^(\d+)')
TRAILING_GRADE_RE = re.compile(r'(?<!\d)\s*(\d)\s*$')
BIB_TOKEN_RE = re.compile(r'^\d{1,3}$')

# Index of snatch_best in the filtered number list; the six summary values follow
SUMMARY_OFFSET = 6


@dataclass
class InfoFields:
    bib_number: str = ''
    name: str = ''
    prefecture: str = ''
    affiliation: str = ''
    grade: str = ''


def extract_info_fields(info: str) -> InfoFields:
    """Split an info string into bib number, name, prefecture, affiliation, grade.

    '7 山田 太郎 沖縄 本部高校 1' -> bib '7', name '山田 太郎', prefecture '沖縄',
    affiliation '本部高校', grade '1'.
    """
    rest = info.strip()

    bib_number = ''
    m = LEADING_BIB_RE.match(rest)
    if m:
        bib_number = m.group(1)
        rest = rest[m.end():].strip()

    grade = ''
    m = TRAILING_GRADE_RE.search(rest)
    if m:
        grade = m.group(1)
        rest = rest[:m.start()].strip()

    found = find_prefecture(rest)
    if found is None:
        return InfoFields(bib_number=bib_number, name=rest, grade=grade)

    prefecture, start, end = found
    return InfoFields(
        bib_number=bib_number,
        name=rest[:start].strip(),
        prefecture=prefecture,
        affiliation=rest[end:].strip(),
        grade=grade,
    )


def find_info_start(tokens: list[str], start: int, end: int) -> int:
    """Find where an athlete's info span begins within tokens[start:end].

    The first CJK token marks the name. A 1-3 digit token right before it is
    a detached bib number and is included. Without any CJK token the whole
    span is kept.
    """
    for k in range(start, end):
        if has_cjk(tokens[k]):
            if k > start and BIB_TOKEN_RE.match(tokens[k - 1]):
                return k - 1
            return k
    return start


def extract_record_numbers(tokens: list[str], start: int, window: int = 30) -> list[str]:
    """Return the 1-3 digit tokens within tokens[start:start + window], in order."""
    return [t for t in tokens[start:start + window] if RECORD_NUM_RE.match(t)]


def summary_fields(numbers: list[str]) -> dict:
    """Map the filtered record numbers onto the six summary fields.

    Positions missing from the list stay None.
    """
    out = {}
    for offset, key in enumerate(RESULT_FIELDS):
        idx = SUMMARY_OFFSET + offset
        out[key] = int(numbers[idx]) if idx < len(numbers) else None
    return out
