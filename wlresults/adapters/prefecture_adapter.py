"""Adapter anchoring each athlete on a prefecture name."""

from .base import BaseAdapter
from ..core.categories import ScanState, advance_category, match_category
from ..core.fields import BIB_TOKEN_RE, InfoFields, find_info_start
from ..core.models import AthleteRecord
from ..core.prefectures import match_prefecture_tokens
from ..core.tokenizer import GRADE_RE, has_cjk, is_birth_year, is_bodyweight


class PrefectureAdapter(BaseAdapter):
    """Find athletes by prefecture, for sheets with neither decimal weights
    nor birth years before the lifts.

    Layout assumed: [bib] name prefecture, then within a short window the
    affiliation (CJK tokens), a birth year, a grade digit and the body
    weight. The body weight closes the record and starts the record
    numbers; a record without one is kept with empty weight and lifts.
    """

    name = 'prefecture'

    def parse(self, tokens: list[str]) -> list[AthleteRecord]:
        athletes = []
        state = ScanState()
        i = 0
        while i < len(tokens):
            nxt = advance_category(tokens, i, state)
            if nxt != i:
                i = nxt
                continue

            found = match_prefecture_tokens(tokens, i)
            if found is None:
                i += 1
                continue
            prefecture, width = found

            info_tokens = tokens[find_info_start(tokens, state.scan_start, i):i]
            bib_number = ''
            if info_tokens and BIB_TOKEN_RE.match(info_tokens[0]):
                bib_number = info_tokens[0]
                info_tokens = info_tokens[1:]

            record, end = self._scan_after_anchor(
                tokens, i + width, state.category,
                InfoFields(bib_number=bib_number, name=' '.join(info_tokens),
                           prefecture=prefecture))
            athletes.append(record)

            i = end
            state.scan_start = end

        return athletes

    def _scan_after_anchor(self, tokens: list[str], start: int,
                           category: str | None, info: InfoFields):
        """Collect the fields following a prefecture anchor.

        Returns (record, index just past the last consumed token).
        """
        birth_year = ''
        bodyweight = ''
        numbers_start = None
        grade_idx = None
        affiliation = []    # (index, token)
        end = start
        stop = min(start + self.config.prefecture_window, len(tokens))

        j = start
        while j < stop:
            token = tokens[j]
            if match_category(tokens, j):
                break
            if match_prefecture_tokens(tokens, j):
                # The name (and bib) just before the next prefecture are the next athlete's
                k = self._next_info_start(tokens, start, j)
                if k < j:
                    affiliation = [(idx, t) for idx, t in affiliation if idx < k]
                    if grade_idx is not None and grade_idx >= k:
                        grade_idx = None
                        info.grade = ''
                    end = k
                break
            if self._is_next_bib(tokens, j, info.grade):
                break
            if is_bodyweight(token):
                bodyweight = token
                numbers_start = end = j + 1
                break
            if is_birth_year(token) and not birth_year:
                birth_year = token
                end = j + 1
            elif GRADE_RE.match(token) and not info.grade:
                info.grade = token
                grade_idx = j
                end = j + 1
            elif has_cjk(token):
                affiliation.append((j, token))
                end = j + 1
            j += 1

        info.affiliation = ' '.join(t for _, t in affiliation)
        record = self._build_record(tokens, category, info, birth_year,
                                    bodyweight=bodyweight, numbers_start=numbers_start)
        return record, end

    @staticmethod
    def _next_info_start(tokens: list[str], start: int, j: int) -> int:
        """Start of the CJK run (plus a bib before it) that ends at tokens[j].

        The first token after the anchor stays with the current athlete
        unless a bib separates it from the run.
        """
        k = j
        while k > start and has_cjk(tokens[k - 1]):
            k -= 1
        if k == j:
            return j
        if k == start:
            return start + 1
        if BIB_TOKEN_RE.match(tokens[k - 1]):
            return k - 1
        return k

    @staticmethod
    def _is_next_bib(tokens: list[str], j: int, grade: str) -> bool:
        """A bib number followed by a name starts the next athlete.

        A lone digit before CJK text is read as a grade until one is found.
        """
        token = tokens[j]
        if not BIB_TOKEN_RE.match(token) or j + 1 >= len(tokens):
            return False
        if not has_cjk(tokens[j + 1]):
            return False
        return bool(grade) or len(token) > 1
