"""Record types shared by the reconciliation processors.

Everything here is created once and never mutated afterwards. The only
mutable type is RunStatistics, which is owned by a single matching run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

RawRow = Dict[str, Any]


class LayoutTag(str, Enum):
    """Column-naming convention of a promoter file."""

    PORT = 'PORT'
    CREDFORYOU = 'CREDFORYOU'
    CIA_DO_CREDITO = 'CIA DO CRÉDITO'
    GENERIC = 'GENÉRICO'

    @classmethod
    def parse(cls, value: str) -> 'LayoutTag':
        """Resolve a tag from its value or member name (case-insensitive)."""
        wanted = value.strip().upper()
        for tag in cls:
            if wanted in (tag.value.upper(), tag.name):
                return tag
        raise ValueError(
            f"Unknown layout '{value}'. Expected one of: "
            f"{', '.join(tag.value for tag in cls)}"
        )


class FileRole(str, Enum):
    MASTER = 'MASTER'
    PROMOTER = 'PROMOTER'


class MatchKind(str, Enum):
    ID_EXACT = 'ID_EXACT'
    NAME_EXACT = 'NAME_EXACT'
    NAME_FUZZY = 'NAME_FUZZY'
    NONE = 'NONE'


class SettlementStatus(str, Enum):
    RELEASED = 'LIBERADO'
    NO_COMMISSION = 'SEM COMISSÃO'


AGENCY_INSS = 'INSS'
AGENCY_OTHER = '-'


@dataclass(frozen=True)
class SourceFile:
    """One uploaded file plus the per-file choices made for it.

    A different sheet, header row or layout is expressed by building a new
    SourceFile (``dataclasses.replace``), never by editing this one.
    """

    name: str
    role: FileRole
    rows: Tuple[RawRow, ...]
    columns: Tuple[str, ...]
    sheet_name: Optional[str] = None
    header_row: int = 0
    layout: Optional[LayoutTag] = None


@dataclass(frozen=True)
class CanonicalRecord:
    """Layout-independent shape of one promoter row."""

    client_name: str
    client_name_key: str
    tax_id: str
    bank: str
    agency_flag: str
    gross_amount: float
    commission_percent: float
    commission_amount: float
    product: str
    agent_user: str
    issue_date: str
    source_file: str
    layout: LayoutTag


@dataclass(frozen=True)
class MasterEntry:
    """One row of the authoritative representative registry."""

    representative_name: str
    client_name: str
    client_name_key: str
    tax_id: str
    source_file: str


@dataclass(frozen=True)
class MatchResult:
    record: CanonicalRecord
    kind: MatchKind
    master: Optional[MasterEntry] = None
    score: Optional[float] = None

    @property
    def status(self) -> SettlementStatus:
        """Settlement status; depends on the commission only, never on the match."""
        if self.record.commission_amount > 0:
            return SettlementStatus.RELEASED
        return SettlementStatus.NO_COMMISSION

    @property
    def matched(self) -> bool:
        return self.kind is not MatchKind.NONE


@dataclass
class RunStatistics:
    """Outcome counters of one matching run."""

    total_rows: int = 0
    matched_id: int = 0
    matched_name_exact: int = 0
    matched_name_fuzzy: int = 0
    unmatched: int = 0

    def record(self, kind: MatchKind) -> None:
        self.total_rows += 1
        if kind is MatchKind.ID_EXACT:
            self.matched_id += 1
        elif kind is MatchKind.NAME_EXACT:
            self.matched_name_exact += 1
        elif kind is MatchKind.NAME_FUZZY:
            self.matched_name_fuzzy += 1
        else:
            self.unmatched += 1

    def merge(self, other: 'RunStatistics') -> 'RunStatistics':
        """Combine the counters of two partial runs into a new instance."""
        return RunStatistics(
            total_rows=self.total_rows + other.total_rows,
            matched_id=self.matched_id + other.matched_id,
            matched_name_exact=self.matched_name_exact + other.matched_name_exact,
            matched_name_fuzzy=self.matched_name_fuzzy + other.matched_name_fuzzy,
            unmatched=self.unmatched + other.unmatched,
        )

    @property
    def matched(self) -> int:
        return self.matched_id + self.matched_name_exact + self.matched_name_fuzzy

    def to_dict(self) -> Dict[str, int]:
        return {
            'total_rows': self.total_rows,
            'matched_id': self.matched_id,
            'matched_name_exact': self.matched_name_exact,
            'matched_name_fuzzy': self.matched_name_fuzzy,
            'unmatched': self.unmatched,
        }


@dataclass
class DedupPartition:
    """Rows split into first occurrences and later repeats of the same key."""

    kept: List[RawRow] = field(default_factory=list)
    removed: List[RawRow] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.kept) + len(self.removed)

    @property
    def kept_count(self) -> int:
        return len(self.kept)

    @property
    def removed_count(self) -> int:
        return len(self.removed)
