"""Data models for the weightlifting result extractor."""

from dataclasses import dataclass, field


# Fixed columns of a smart-extraction grid, in record order
SMART_HEADERS = [
    "階級", "No.", "氏名", "都道府県", "所属名", "学年",
    "生年", "体重", "Sベスト", "S順位", "CJベスト", "CJ順位",
    "トータル", "T順位",
]

RESULT_FIELDS = [
    'snatch_best', 'snatch_rank', 'cj_best', 'cj_rank',
    'total_weight', 'total_rank',
]


@dataclass
class ExtractionConfig:
    """Tunables for the text extractor and the PDF reader."""
    window: int = 30              # tokens examined for record numbers after an anchor
    prefecture_window: int = 10   # tokens examined after a prefecture anchor
    max_file_size_mb: int = 10    # PDFs larger than this are rejected


@dataclass
class CompetitionConfig:
    """A competition the extracted results are filed under."""
    competition_year: int         # 2025
    name: str                     # "全国高等学校ウエイトリフティング競技選抜大会"


@dataclass(frozen=True)
class AthleteRecord:
    """One athlete row reconstructed from the token stream."""
    category: str | None = None
    bib_number: str = ''
    name: str = ''
    prefecture: str = ''
    affiliation: str = ''
    grade: str = ''
    birth_year: str = ''
    bodyweight: str = ''
    snatch_best: int | None = None
    snatch_rank: int | None = None
    cj_best: int | None = None
    cj_rank: int | None = None
    total_weight: int | None = None
    total_rank: int | None = None

    def to_cells(self) -> list[str]:
        """Render the record as a row matching SMART_HEADERS."""
        numbers = ['' if getattr(self, f) is None else str(getattr(self, f))
                   for f in RESULT_FIELDS]
        return [
            self.category or '',
            self.bib_number,
            self.name,
            self.prefecture,
            self.affiliation,
            self.grade,
            self.birth_year,
            self.bodyweight,
        ] + numbers


@dataclass
class ExtractionResult:
    """Outcome of extract_rows: labeled records, or an unlabeled grid."""
    rows: list = field(default_factory=list)     # list[AthleteRecord]
    used_smart_extraction: bool = False
    headers: list = field(default_factory=list)  # list[str]
    grid: list = field(default_factory=list)     # list[list[str]]

    @property
    def success(self) -> bool:
        return bool(self.grid)
