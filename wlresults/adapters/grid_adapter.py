"""Adapter for sheets no anchor strategy understands.

Each non-empty line becomes a row of whitespace-separated cells, padded to
the widest row. Headers are positional ("column 1", "column 2", ...), so the
caller has to map columns to fields itself (see sanitizer.guess_mappings).
"""

from ..core.tokenizer import split_lines


class GridAdapter:
    """Split text into a padded line/cell grid."""

    name = 'grid'

    def parse(self, text: str) -> tuple[list[list[str]], list[str]]:
        """Return (grid, headers); both empty when text has no content."""
        rows = split_lines(text)
        if not rows:
            return [], []

        width = max(len(r) for r in rows)
        grid = [r + [''] * (width - len(r)) for r in rows]
        headers = [f'column {n}' for n in range(1, width + 1)]
        return grid, headers
