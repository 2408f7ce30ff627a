"""Convert extraction output into result rows ready for the database.

A result row is a dict with keys:
    athlete_name, category, age_grade,
    snatch_best, snatch_rank, cj_best, cj_rank, total_weight, total_rank

Numbers are re-validated here regardless of where they came from: commas are
stripped, blanks and dashes become None, and anything non-finite is rejected.
"""

import math
import re

from .models import RESULT_FIELDS, SMART_HEADERS


IGNORE = 'ignore'
MAPPING_VALUES = (IGNORE, 'athlete_name', 'category', 'age_grade') + tuple(RESULT_FIELDS)

# Column mapping for a smart-extraction grid (one entry per SMART_HEADERS column)
SMART_DEFAULT_MAPPINGS = [
    'category',      # 階級
    IGNORE,          # No.
    'athlete_name',  # 氏名
    IGNORE,          # 都道府県
    IGNORE,          # 所属名
    'age_grade',     # 学年
    IGNORE,          # 生年
    IGNORE,          # 体重
    'snatch_best',   # Sベスト
    'snatch_rank',   # S順位
    'cj_best',       # CJベスト
    'cj_rank',       # CJ順位
    'total_weight',  # トータル
    'total_rank',    # T順位
]

# Column order assumed for a headerless generic grid
HEURISTIC_MAPPINGS = [
    'athlete_name', 'category', 'age_grade',
    'snatch_best', 'snatch_rank', 'cj_best', 'cj_rank',
    'total_weight', 'total_rank',
]

# Header keywords per field, matched against lowercased, space-free header text
HEADER_KEYWORDS = {
    'athlete_name': ['選手名', '氏名', '名前', '姓名', 'name'],
    'category': ['階級', '体重', 'category'],
    'age_grade': ['学年', '年齢', '年令', 'age', 'grade'],
    'snatch_best': ['スナッチ', 'snatch'],
    'snatch_rank': ['スナッチ順位', 'snatch順位', 'スナッチ順'],
    'cj_best': ['c&j', 'cj', 'クリーン', 'ジャーク', 'clean'],
    'cj_rank': ['c&j順位', 'cj順位', 'クリーン順位'],
    'total_weight': ['トータル', '合計', 'total', '総合'],
    'total_rank': ['トータル順位', '総合順位', '順位'],
}
HEADER_ROW_RE = re.compile(r'選手名|氏名|スナッチ|C&J|トータル|階級|学年|順位')
HEADER_SEARCH_ROWS = 15

_DIGITS_ONLY_RE = re.compile(r'^\d+$')


def parse_num(val):
    """Parse a weight or rank. Returns None for empty, dashes, invalid or non-finite."""
    if val is None:
        return None
    if isinstance(val, (int, float)) and not isinstance(val, bool):
        return val if math.isfinite(val) else None
    s = str(val).replace(',', '').strip()
    if s in ('', '-', '－'):
        return None
    try:
        v = float(s)
    except ValueError:
        return None
    if not math.isfinite(v):
        return None
    return int(v) if v.is_integer() else v


def _clean_text(val) -> str | None:
    s = str(val).strip() if val is not None else ''
    return s or None


def _valid_name(name: str) -> bool:
    return bool(name) and not _DIGITS_ONLY_RE.match(name)


def rows_from_records(records: list) -> list[dict]:
    """Build result rows from smart-extraction AthleteRecords."""
    rows = []
    for r in records:
        name = (r.name or '').strip()
        if not _valid_name(name):
            continue
        row = {
            'athlete_name': name,
            'category': _clean_text(r.category),
            'age_grade': _clean_text(r.grade),
        }
        for f in RESULT_FIELDS:
            row[f] = parse_num(getattr(r, f))
        rows.append(row)
    return rows


def rows_from_grid(grid: list[list[str]], mappings: list[str]) -> list[dict]:
    """Build result rows from a grid using one mapping value per column.

    Columns mapped to 'ignore' (or beyond the mapping list) are skipped.
    Rows without a usable athlete name are dropped.
    """
    for m in mappings:
        if m not in MAPPING_VALUES:
            raise ValueError(f"Unknown column mapping: {m}")

    rows = []
    for cells in grid:
        row = {'athlete_name': '', 'category': None, 'age_grade': None}
        row.update({f: None for f in RESULT_FIELDS})
        for col, mapping in enumerate(mappings):
            if mapping == IGNORE:
                continue
            raw = cells[col].strip() if col < len(cells) and cells[col] else ''
            if mapping == 'athlete_name':
                row['athlete_name'] = raw
            elif mapping in ('category', 'age_grade'):
                row[mapping] = raw or None
            else:
                row[mapping] = parse_num(raw)
        if _valid_name(row['athlete_name']):
            rows.append(row)
    return rows


def detect_column_mappings(headers: list[str]) -> list[str]:
    """Guess a mapping for each header cell from keyword matches.

    Each field takes the first unclaimed header containing one of its
    keywords; the name falls back to column 0 when nothing matches.
    """
    def norm(s: str) -> str:
        return re.sub(r'\s', '', s.lower())

    mappings = [IGNORE] * len(headers)
    for field_name, keywords in HEADER_KEYWORDS.items():
        for i, h in enumerate(headers):
            # Earlier fields keep their column
            if mappings[i] != IGNORE:
                continue
            if any(k in norm(h) for k in keywords):
                mappings[i] = field_name
                break
        else:
            if field_name == 'athlete_name' and headers:
                mappings[0] = 'athlete_name'
    return mappings


def find_header_row(grid: list[list[str]]) -> int | None:
    """Index of the first header-looking row within the first 15 rows."""
    for i, cells in enumerate(grid[:HEADER_SEARCH_ROWS]):
        filled = [c for c in cells if c]
        if len(filled) < 2:
            continue
        if HEADER_ROW_RE.search(' '.join(filled)):
            return i
    return None


def guess_mappings(grid: list[list[str]], headers: list[str]) -> tuple[list[str], int]:
    """Choose column mappings for an extraction grid.

    Returns (mappings, index of the first data row).
    """
    if headers == SMART_HEADERS:
        return list(SMART_DEFAULT_MAPPINGS), 0

    header_idx = find_header_row(grid)
    if header_idx is not None:
        return detect_column_mappings(grid[header_idx]), header_idx + 1

    width = len(grid[0]) if grid else 0
    mappings = HEURISTIC_MAPPINGS[:width] + [IGNORE] * max(0, width - len(HEURISTIC_MAPPINGS))
    return mappings, 0


def rows_from_result(result, mappings: list[str] | None = None) -> list[dict]:
    """Build result rows from an ExtractionResult.

    Smart results are converted straight from their records unless explicit
    mappings are given; grids use the given or guessed mappings.
    """
    if mappings is None and result.used_smart_extraction:
        return rows_from_records(result.rows)
    if mappings is None:
        mappings, start = guess_mappings(result.grid, result.headers)
        return rows_from_grid(result.grid[start:], mappings)
    return rows_from_grid(result.grid, mappings)
