"""Output generator for stored and freshly extracted results.

Generates two CSV types:
  - Results sheet per competition (best / rank pairs per lift)
  - Raw extraction grid with its headers, for checking a column mapping
"""

import csv
import re

from .db_builder import load_results


RESULTS_HEADERS = [
    '大会名',
    '選手名',
    '学年/年齢',
    '階級',
    'スナッチ(ベスト/順位)',
    'C&J(ベスト/順位)',
    'トータル(重量/順位)',
]
EMPTY = '—'


def _fmt_num(v) -> str:
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v)


def format_pair(value, rank) -> str:
    """Render a best/rank pair: '80 / 1', '80', '— / 1' or '—'."""
    if value is not None and rank is not None:
        return f'{_fmt_num(value)} / {_fmt_num(rank)}'
    if value is not None:
        return _fmt_num(value)
    if rank is not None:
        return f'{EMPTY} / {_fmt_num(rank)}'
    return EMPTY


def export_filename(competition_year: int | None, competition_name: str | None) -> str:
    """Build '<year>_<name>_競技結果.csv', with path-unsafe characters replaced."""
    name = re.sub(r'[/\\?*\[\]:]', '_', competition_name or '').strip() or '大会'
    if competition_year is None:
        return f'{name}_競技結果.csv'
    return f'{competition_year}_{name}_競技結果.csv'


def results_to_rows(results: list[dict]) -> list[list[str]]:
    """Convert stored result dicts into results-sheet rows."""
    rows = []
    for r in results:
        rows.append([
            r.get('competition_name') or EMPTY,
            (r.get('athlete_name') or '').strip() or EMPTY,
            r.get('age_grade') or EMPTY,
            r.get('category') or EMPTY,
            format_pair(r.get('snatch_best'), r.get('snatch_rank')),
            format_pair(r.get('cj_best'), r.get('cj_rank')),
            format_pair(r.get('total_weight'), r.get('total_rank')),
        ])
    return rows


def generate_results_csv(db_path: str, competition_id: int | None, output_path: str) -> int:
    """Write the results sheet for one competition (or all of them).

    Returns the number of data rows written.
    """
    results = load_results(db_path, competition_id)
    rows = results_to_rows(results)

    # utf-8-sig so spreadsheet apps detect the Japanese text
    with open(output_path, 'w', newline='', encoding='utf-8-sig') as f:
        writer = csv.writer(f)
        writer.writerow(RESULTS_HEADERS)
        writer.writerows(rows)

    return len(rows)


def generate_grid_csv(grid: list[list[str]], headers: list[str], output_path: str):
    """Write an extraction grid with its header row."""
    with open(output_path, 'w', newline='', encoding='utf-8-sig') as f:
        writer = csv.writer(f)
        writer.writerow(headers)
        writer.writerows(grid)
