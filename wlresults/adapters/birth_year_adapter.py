"""Adapter anchoring each athlete on a four-digit birth year (19xx/20xx)."""

from .base import BaseAdapter
from ..core.categories import ScanState, advance_category
from ..core.fields import extract_info_fields, find_info_start
from ..core.models import AthleteRecord
from ..core.tokenizer import is_birth_year, is_bodyweight


class BirthYearAdapter(BaseAdapter):
    """Find athletes by birth year, for sheets without decimal body weights.

    A body weight directly after the year is consumed with it; record
    numbers are read after whichever of the two comes last.
    """

    name = 'birth_year'

    def parse(self, tokens: list[str]) -> list[AthleteRecord]:
        athletes = []
        state = ScanState()
        i = 0
        while i < len(tokens):
            nxt = advance_category(tokens, i, state)
            if nxt != i:
                i = nxt
                continue

            if not is_birth_year(tokens[i]):
                i += 1
                continue

            info_tokens = tokens[find_info_start(tokens, state.scan_start, i):i]
            end = i + 1
            bodyweight = ''
            if end < len(tokens) and is_bodyweight(tokens[end]):
                bodyweight = tokens[end]
                end += 1

            athletes.append(self._build_record(
                tokens, state.category,
                extract_info_fields(' '.join(info_tokens)),
                birth_year=tokens[i],
                bodyweight=bodyweight,
                numbers_start=end,
            ))

            i = end
            state.scan_start = end

        return athletes
