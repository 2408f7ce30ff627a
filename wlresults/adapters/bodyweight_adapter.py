"""Adapter anchoring each athlete on the body-weight token (e.g. 54.32)."""

from .base import BaseAdapter
from ..core.categories import ScanState, advance_category
from ..core.fields import extract_info_fields, find_info_start
from ..core.models import AthleteRecord
from ..core.tokenizer import is_birth_year, is_bodyweight


class BodyweightAdapter(BaseAdapter):
    """Find athletes by their two-decimal body weight.

    Whole-number lifts never carry two decimals, so the body weight is the
    most reliable anchor when the sheet prints it. The tokens since the last
    record are the info span; a trailing birth year is split off before
    segmentation.
    """

    name = 'bodyweight'

    def parse(self, tokens: list[str]) -> list[AthleteRecord]:
        athletes = []
        state = ScanState()
        i = 0
        while i < len(tokens):
            nxt = advance_category(tokens, i, state)
            if nxt != i:
                i = nxt
                continue

            if not is_bodyweight(tokens[i]):
                i += 1
                continue

            info_tokens = tokens[find_info_start(tokens, state.scan_start, i):i]
            birth_year = ''
            if info_tokens and is_birth_year(info_tokens[-1]):
                birth_year = info_tokens[-1]
                info_tokens = info_tokens[:-1]

            athletes.append(self._build_record(
                tokens, state.category,
                extract_info_fields(' '.join(info_tokens)),
                birth_year=birth_year,
                bodyweight=tokens[i],
                numbers_start=i + 1,
            ))

            i += 1
            state.scan_start = i

        return athletes
