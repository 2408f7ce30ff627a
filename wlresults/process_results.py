#!/usr/bin/env python3
"""CLI entry point for importing a weightlifting result-sheet PDF.

Usage:
    python process_results.py --pdf results.pdf --year 2025 \\
        --competition "全国高等学校選抜大会" --output ./output/
"""

import argparse
import datetime
import os
import sys

# Add parent directory to path for imports (skip when frozen by PyInstaller)
if not getattr(sys, 'frozen', False):
    sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from wlresults.core.models import CompetitionConfig, ExtractionConfig
from wlresults.core.extractor import extract_rows, print_extraction_report
from wlresults.core.sanitizer import rows_from_result
from wlresults.core.db_builder import save_competition
from wlresults.core.output_generator import (
    export_filename, generate_grid_csv, generate_results_csv
)
from wlresults.adapters.pdf_adapter import PdfAdapter, PdfTextError


def main(argv=None):
    parser = argparse.ArgumentParser(description='Import a weightlifting result-sheet PDF')
    parser.add_argument('--pdf', required=True, help='Result-sheet PDF')
    parser.add_argument('--competition', required=True, help='Competition name')
    parser.add_argument('--year', type=int, default=datetime.datetime.now().year,
                        help='Competition year (default: current year)')
    parser.add_argument('--output', required=True, help='Output directory for generated files')
    parser.add_argument('--db', default=None,
                        help='Path to the SQLite database (default: {output}/wl_results.db)')
    parser.add_argument('--columns', default=None,
                        help='Comma-separated column mapping overriding the detected one, '
                             'e.g. "athlete_name,ignore,category,snatch_best"')
    parser.add_argument('--window', type=int, default=30,
                        help='Tokens scanned for record numbers after each athlete (default 30)')
    parser.add_argument('--dry-run', action='store_true',
                        help='Extract and write the grid CSV without saving to the database')

    args = parser.parse_args(argv)

    extraction_config = ExtractionConfig(window=args.window)
    config = CompetitionConfig(competition_year=args.year, name=args.competition)

    print(f"Reading {args.pdf}...")
    try:
        text = PdfAdapter(extraction_config).parse(args.pdf)
    except PdfTextError as e:
        print(f"Error: {e}")
        return 1

    result = extract_rows(text, extraction_config)
    print_extraction_report(result)
    if not result.success:
        return 1

    os.makedirs(args.output, exist_ok=True)
    grid_path = os.path.join(args.output, 'extracted_grid.csv')
    generate_grid_csv(result.grid, result.headers, grid_path)
    print(f"Generated {grid_path}")

    mappings = None
    if args.columns:
        mappings = [c.strip() for c in args.columns.split(',')]
    try:
        rows = rows_from_result(result, mappings)
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    print(f"Sanitized {len(rows)} result rows")

    if args.dry_run:
        print("\nDry run, nothing saved.")
        return 0

    db_path = args.db if args.db else os.path.join(args.output, 'wl_results.db')
    print(f"Saving to {db_path}...")
    try:
        competition_id = save_competition(db_path, config, rows)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    csv_path = os.path.join(args.output, export_filename(config.competition_year, config.name))
    count = generate_results_csv(db_path, competition_id, csv_path)
    print(f"Generated {csv_path} ({count} rows)")

    print("\nDone!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
