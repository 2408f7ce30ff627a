"""Abstract base adapter for anchor-based athlete extraction."""

from abc import ABC, abstractmethod

from ..core.fields import InfoFields, extract_record_numbers, summary_fields
from ..core.models import AthleteRecord, ExtractionConfig


class BaseAdapter(ABC):
    """One anchor strategy: a full left-to-right scan of the token list."""

    name = 'base'

    def __init__(self, config: ExtractionConfig | None = None):
        self.config = config or ExtractionConfig()

    @abstractmethod
    def parse(self, tokens: list[str]) -> list[AthleteRecord]:
        """Scan tokens and return one AthleteRecord per anchor, in token order.

        Returns an empty list when the anchor never occurs.
        """
        pass

    def _build_record(self, tokens: list[str], category: str | None,
                      info: InfoFields, birth_year: str, bodyweight: str,
                      numbers_start: int | None) -> AthleteRecord:
        """Assemble a record; numbers_start None means no record numbers."""
        if numbers_start is None:
            numbers = []
        else:
            numbers = extract_record_numbers(tokens, numbers_start, self.config.window)
        return AthleteRecord(
            category=category,
            bib_number=info.bib_number,
            name=info.name,
            prefecture=info.prefecture,
            affiliation=info.affiliation,
            grade=info.grade,
            birth_year=birth_year,
            bodyweight=bodyweight,
            **summary_fields(numbers),
        )
