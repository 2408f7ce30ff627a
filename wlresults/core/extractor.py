"""Turn extracted result-sheet text into athlete rows.

Strategies run in a fixed priority order over the same token list:
  1. body-weight anchor  (54.32)
  2. birth-year anchor   (2005)
  3. prefecture anchor   (沖縄)
The first strategy producing at least one record wins. When none does, the
text is returned as a padded whitespace grid with positional headers.

extract_rows never raises: a failing strategy counts as producing nothing.
"""

from .models import SMART_HEADERS, ExtractionConfig, ExtractionResult
from .tokenizer import tokenize
from ..adapters.birth_year_adapter import BirthYearAdapter
from ..adapters.bodyweight_adapter import BodyweightAdapter
from ..adapters.grid_adapter import GridAdapter
from ..adapters.prefecture_adapter import PrefectureAdapter


def build_strategies(config: ExtractionConfig | None = None) -> list:
    """Anchor adapters in priority order."""
    config = config or ExtractionConfig()
    return [
        BodyweightAdapter(config),
        BirthYearAdapter(config),
        PrefectureAdapter(config),
    ]


def _run_strategy(adapter, tokens: list[str]) -> list:
    try:
        return adapter.parse(tokens)
    except Exception as e:
        print(f"Warning: {adapter.name} extraction failed: {e}")
        return []


def smart_extract(text: str, config: ExtractionConfig | None = None) -> tuple[list, str | None]:
    """Run the anchor strategies.

    Returns (records, name of the winning strategy), or ([], None).
    """
    tokens = tokenize(text)
    if not tokens:
        return [], None
    for adapter in build_strategies(config):
        rows = _run_strategy(adapter, tokens)
        if rows:
            return rows, adapter.name
    return [], None


def extract_rows(text: str, config: ExtractionConfig | None = None) -> ExtractionResult:
    """Extract athlete rows from document text.

    Returns an ExtractionResult whose rows are labeled AthleteRecords when an
    anchor strategy matched, otherwise an unlabeled grid. An empty grid means
    there was nothing to extract.
    """
    try:
        rows, _ = smart_extract(text or '', config)
    except Exception as e:
        print(f"Warning: smart extraction failed: {e}")
        rows = []

    if rows:
        return ExtractionResult(
            rows=rows,
            used_smart_extraction=True,
            headers=list(SMART_HEADERS),
            grid=[r.to_cells() for r in rows],
        )

    grid, headers = GridAdapter().parse(text or '')
    return ExtractionResult(rows=[], used_smart_extraction=False,
                            headers=headers, grid=grid)


def print_extraction_report(result: ExtractionResult):
    """Print a summary of an extraction to stdout."""
    if not result.success:
        print("No data rows detected in the text")
        return

    if result.used_smart_extraction:
        categories = []
        for r in result.rows:
            if r.category and r.category not in categories:
                categories.append(r.category)
        print(f"Smart extraction: {len(result.rows)} athletes "
              f"in {len(categories)} categories")
        if categories:
            print(f"  Categories: {', '.join(categories)}")
        missing = sum(1 for r in result.rows if r.total_weight is None)
        if missing:
            print(f"  {missing} athletes without a total (check the column mapping)")
    else:
        print(f"No anchors matched; generic grid of {len(result.grid)} rows "
              f"x {len(result.headers)} columns")
