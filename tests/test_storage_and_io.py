"""Tests for PDF reading, SQLite storage, CSV output and the CLI."""

import csv
import os
import sqlite3
import sys

import fitz
import pytest

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from wlresults import process_results
from wlresults.adapters.pdf_adapter import PdfAdapter, PdfTextError
from wlresults.core.db_builder import load_results, save_competition
from wlresults.core.extractor import extract_rows
from wlresults.core.models import CompetitionConfig, ExtractionConfig
from wlresults.core.output_generator import (
    RESULTS_HEADERS, export_filename, format_pair, generate_grid_csv,
    generate_results_csv
)
from wlresults.core.sanitizer import rows_from_result


SHEET = """55Kg
7 山田 太郎 沖縄 本部高校 1 2005 54.32 75 78 80 95 98 100 80 1 100 2 180 1
4 比嘉 翔 沖縄 那覇高校 2 2004 54.90 70 73 75 90 93 95 75 2 95 1 170 2
"""

CONFIG = CompetitionConfig(competition_year=2025, name='沖縄県高校新人大会')


def _make_pdf(path, lines):
    doc = fitz.open()
    page = doc.new_page()
    y = 72
    for line in lines:
        page.insert_text((72, y), line)
        y += 20
    doc.save(str(path))
    doc.close()
    return str(path)


@pytest.fixture(scope='module')
def saved_db(tmp_path_factory):
    """Save the sample sheet once for the storage tests."""
    tmpdir = tmp_path_factory.mktemp('db')
    db_path = str(tmpdir / 'wl_results.db')
    rows = rows_from_result(extract_rows(SHEET))
    competition_id = save_competition(db_path, CONFIG, rows)
    return db_path, competition_id


# ─── PDF adapter ────────────────────────────────────────────────────

class TestPdfAdapter:
    def test_reads_text(self, tmp_path):
        path = _make_pdf(tmp_path / 'sheet.pdf', ['Yamada 55kg 2 80 1 100 1 180 1'])
        text = PdfAdapter().parse(path)
        assert 'Yamada' in text
        assert '180' in text

    def test_missing_file(self, tmp_path):
        with pytest.raises(PdfTextError):
            PdfAdapter().parse(str(tmp_path / 'missing.pdf'))

    def test_not_a_pdf(self, tmp_path):
        path = tmp_path / 'sheet.txt'
        path.write_text('hello')
        with pytest.raises(PdfTextError):
            PdfAdapter().parse(str(path))

    def test_corrupt_bytes(self):
        with pytest.raises(PdfTextError):
            PdfAdapter().parse_bytes(b'this is not a pdf')

    def test_no_text_layer(self, tmp_path):
        path = _make_pdf(tmp_path / 'blank.pdf', [])
        with pytest.raises(PdfTextError):
            PdfAdapter().parse(path)

    def test_size_limit(self, tmp_path):
        path = _make_pdf(tmp_path / 'sheet.pdf', ['Yamada'])
        with pytest.raises(PdfTextError):
            PdfAdapter(ExtractionConfig(max_file_size_mb=0)).parse(path)


# ─── Database ───────────────────────────────────────────────────────

class TestDatabase:
    def test_results_count(self, saved_db):
        db_path, competition_id = saved_db
        conn = sqlite3.connect(db_path)
        cur = conn.cursor()
        cur.execute("SELECT COUNT(*) FROM results WHERE competition_id = ?",
                    (competition_id,))
        count = cur.fetchone()[0]
        conn.close()
        assert count == 2

    def test_competition_row(self, saved_db):
        db_path, competition_id = saved_db
        conn = sqlite3.connect(db_path)
        cur = conn.cursor()
        cur.execute("SELECT competition_year, name FROM competitions WHERE id = ?",
                    (competition_id,))
        row = cur.fetchone()
        conn.close()
        assert row == (2025, '沖縄県高校新人大会')

    def test_load_results(self, saved_db):
        db_path, competition_id = saved_db
        results = load_results(db_path, competition_id)
        assert [r['athlete_name'] for r in results] == ['山田 太郎', '比嘉 翔']
        first = results[0]
        assert first['competition_name'] == '沖縄県高校新人大会'
        assert first['category'] == '55Kg'
        assert first['age_grade'] == '1'
        assert first['total_weight'] == 180
        assert first['total_rank'] == 1

    def test_second_competition_appends(self, tmp_path):
        db_path = str(tmp_path / 'wl.db')
        rows = [{'athlete_name': ' 山田 ', 'category': ' ', 'age_grade': None}]
        first = save_competition(db_path, CONFIG, rows)
        second = save_competition(db_path, CONFIG, rows)
        assert second != first
        results = load_results(db_path)
        assert len(results) == 2
        assert results[0]['athlete_name'] == '山田'
        assert results[0]['category'] is None
        assert results[0]['snatch_best'] is None

    def test_rejects_blank_name(self, tmp_path):
        with pytest.raises(ValueError):
            save_competition(str(tmp_path / 'wl.db'),
                             CompetitionConfig(competition_year=2025, name='  '),
                             [{'athlete_name': '山田'}])

    def test_rejects_no_rows(self, tmp_path):
        with pytest.raises(ValueError):
            save_competition(str(tmp_path / 'wl.db'), CONFIG, [])

    def test_load_results_closes_connection_on_error(self, tmp_path, monkeypatch):
        closed = []

        class TrackingConnection(sqlite3.Connection):
            def close(self):
                closed.append(True)
                super().close()

        real_connect = sqlite3.connect
        monkeypatch.setattr(
            'wlresults.core.db_builder.sqlite3.connect',
            lambda path: real_connect(path, factory=TrackingConnection))

        # No tables yet, so the query fails
        db_path = str(tmp_path / 'empty.db')
        with pytest.raises(sqlite3.OperationalError):
            load_results(db_path)
        assert closed == [True]


# ─── Outputs ────────────────────────────────────────────────────────

class TestOutputs:
    def test_format_pair(self):
        assert format_pair(80, 1) == '80 / 1'
        assert format_pair(80.0, None) == '80'
        assert format_pair(None, 3.0) == '— / 3'
        assert format_pair(None, None) == '—'
        assert format_pair(80.5, 2) == '80.5 / 2'

    def test_export_filename(self):
        assert export_filename(2025, '新人大会') == '2025_新人大会_競技結果.csv'
        assert export_filename(2025, 'a/b:c') == '2025_a_b_c_競技結果.csv'
        assert export_filename(None, '') == '大会_競技結果.csv'

    def test_results_csv(self, saved_db, tmp_path):
        db_path, competition_id = saved_db
        output = str(tmp_path / 'results.csv')
        count = generate_results_csv(db_path, competition_id, output)
        assert count == 2
        with open(output, encoding='utf-8-sig', newline='') as f:
            rows = list(csv.reader(f))
        assert rows[0] == RESULTS_HEADERS
        assert rows[1] == ['沖縄県高校新人大会', '山田 太郎', '1', '55Kg',
                           '80 / 1', '100 / 2', '180 / 1']

    def test_grid_csv(self, tmp_path):
        output = str(tmp_path / 'grid.csv')
        result = extract_rows("a b c\nd")
        generate_grid_csv(result.grid, result.headers, output)
        with open(output, encoding='utf-8-sig', newline='') as f:
            rows = list(csv.reader(f))
        assert rows == [['column 1', 'column 2', 'column 3'],
                        ['a', 'b', 'c'], ['d', '', '']]


# ─── CLI ────────────────────────────────────────────────────────────

class TestCli:
    def test_smart_sheet(self, tmp_path, monkeypatch):
        monkeypatch.setattr(PdfAdapter, 'parse', lambda self, path: SHEET)
        out = tmp_path / 'out'
        code = process_results.main([
            '--pdf', 'sheet.pdf', '--year', '2025',
            '--competition', '新人大会', '--output', str(out),
        ])
        assert code == 0
        assert (out / 'extracted_grid.csv').exists()
        assert (out / '2025_新人大会_競技結果.csv').exists()
        assert len(load_results(str(out / 'wl_results.db'))) == 2

    def test_generic_pdf(self, tmp_path):
        pdf = _make_pdf(tmp_path / 'sheet.pdf', ['Yamada 55kg 2 80 1 100 1 180 1'])
        out = tmp_path / 'out'
        db_path = tmp_path / 'central.db'
        code = process_results.main([
            '--pdf', pdf, '--competition', 'Open', '--year', '2024',
            '--output', str(out), '--db', str(db_path),
        ])
        assert code == 0
        results = load_results(str(db_path))
        assert results[0]['athlete_name'] == 'Yamada'

    def test_dry_run(self, tmp_path, monkeypatch):
        monkeypatch.setattr(PdfAdapter, 'parse', lambda self, path: SHEET)
        out = tmp_path / 'out'
        code = process_results.main([
            '--pdf', 'sheet.pdf', '--competition', '新人大会',
            '--output', str(out), '--dry-run',
        ])
        assert code == 0
        assert (out / 'extracted_grid.csv').exists()
        assert not (out / 'wl_results.db').exists()

    def test_bad_column_mapping(self, tmp_path, monkeypatch):
        monkeypatch.setattr(PdfAdapter, 'parse', lambda self, path: SHEET)
        code = process_results.main([
            '--pdf', 'sheet.pdf', '--competition', '新人大会',
            '--output', str(tmp_path), '--columns', 'athlete_name,surname',
        ])
        assert code == 1

    def test_missing_pdf(self, tmp_path):
        code = process_results.main([
            '--pdf', str(tmp_path / 'missing.pdf'), '--competition', 'Open',
            '--output', str(tmp_path),
        ])
        assert code == 1
