"""Data models for bank transactions, matchable records and match results."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class RecordKind(Enum):
    """Kind of financial record a transaction can be reconciled against."""

    INVOICE = "invoice"
    INCOME = "income"
    EXPENSE = "expense"

    @classmethod
    def expected_for_amount(cls, amount: Optional[Decimal]) -> "RecordKind":
        """Money in pairs with income, everything else with expenses."""
        if amount is not None and amount > 0:
            return cls.INCOME
        return cls.EXPENSE

    @classmethod
    def parse(cls, value: Any) -> Optional["RecordKind"]:
        """Lenient lookup by value; returns None for unknown kinds."""
        if isinstance(value, cls):
            return value
        if value is None:
            return None
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


class ConfidenceLevel(Enum):
    """Discrete confidence bucket used for display."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class MatchStatus(Enum):
    """Status of a batch match decision."""

    CONFIRMED = "confirmed"
    SUGGESTED = "suggested"


class ReconciliationStatus(Enum):
    """Reconciliation lifecycle of a single bank transaction."""

    UNMATCHED = "unmatched"
    SUGGESTED = "suggested"
    MATCHED = "matched"


@dataclass
class BankTransaction:
    """
    A bank statement line as imported by the bank sync.

    The engine only reads transactions, it never writes to them.
    """

    id: str

    # Signed amount: positive is money in, negative is money out
    amount: Decimal

    date: Optional[date] = None
    description: str = ""
    bank_name: Optional[str] = None

    # Project/package grouping (e.g. a tour package folder)
    group_id: Optional[str] = None

    raw_data: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def direction(self) -> str:
        """'in' for credits, 'out' for debits."""
        return "in" if self.amount > 0 else "out"


@dataclass
class MatchableRecord:
    """An invoice, income or expense entry that a transaction may settle."""

    id: str
    kind: RecordKind

    # Conventionally the unsigned magnitude
    amount: Optional[Decimal] = None
    date: Optional[date] = None
    vendor_or_client: Optional[str] = None
    invoice_number: Optional[str] = None
    description: Optional[str] = None
    group_id: Optional[str] = None

    raw_data: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def match_text(self) -> str:
        """Vendor and description joined, used for text similarity."""
        return f"{self.vendor_or_client or ''} {self.description or ''}".strip()


@dataclass
class MatchSuggestion:
    """A ranked candidate record for one transaction, for human review."""

    record_id: str
    record_kind: RecordKind
    confidence: float  # 0.0 to 1.0
    confidence_level: ConfidenceLevel
    reasons: list[str]
    record: MatchableRecord

    @property
    def confidence_percent(self) -> int:
        return round(self.confidence * 100)


@dataclass
class SuggestionStats:
    """Counts of transactions by the level of their best suggestion."""

    total: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0


@dataclass
class Match:
    """A committed transaction/record pairing as held by the match store."""

    transaction_id: str
    record_id: str
    status: MatchStatus = MatchStatus.CONFIRMED
    confidence: float = 0.0
    reason: str = ""
    record_kind: Optional[RecordKind] = None

    @property
    def is_confirmed(self) -> bool:
        return self.status == MatchStatus.CONFIRMED

    def to_row(self) -> dict[str, Any]:
        """Flat row for the store's bulk insert."""
        return {
            "transaction_id": self.transaction_id,
            "record_id": self.record_id,
            "status": self.status.value,
            "confidence": self.confidence,
            "reason": self.reason,
        }


LOW_CONFIDENCE_SUFFIX = " (low confidence)"


@dataclass
class MatchDecision:
    """Outcome of the batch reconciler for one transaction."""

    transaction_id: str
    record_id: str
    record_kind: RecordKind
    status: MatchStatus

    # Additive point scale, 0 to 100
    confidence: float
    reasons: list[str] = field(default_factory=list)

    @property
    def reason(self) -> str:
        text = ", ".join(self.reasons)
        if self.status == MatchStatus.SUGGESTED:
            text += LOW_CONFIDENCE_SUFFIX
        return text

    def to_match(self) -> Match:
        return Match(
            transaction_id=self.transaction_id,
            record_id=self.record_id,
            status=self.status,
            confidence=self.confidence,
            reason=self.reason,
            record_kind=self.record_kind,
        )


@dataclass
class ReconcileResult:
    """Summary of a batch reconciliation run."""

    total_processed: int = 0
    matched: int = 0
    suggested: int = 0
    failed: int = 0
    matches: list[MatchDecision] = field(default_factory=list)

    dry_run: bool = False
    insert_error: Optional[str] = None
    processing_time_seconds: float = 0.0

    @property
    def confirmed(self) -> list[MatchDecision]:
        return [m for m in self.matches if m.status == MatchStatus.CONFIRMED]

    @property
    def suggestions(self) -> list[MatchDecision]:
        return [m for m in self.matches if m.status == MatchStatus.SUGGESTED]

    def status_for(self, transaction_id: str) -> ReconciliationStatus:
        """
        Lifecycle status of a transaction after this run.

        Confirmed pairs whose insert failed are not reported as matched.
        """
        for decision in self.matches:
            if decision.transaction_id != transaction_id:
                continue
            if decision.status == MatchStatus.CONFIRMED:
                if self.failed:
                    return ReconciliationStatus.UNMATCHED
                return ReconciliationStatus.MATCHED
            return ReconciliationStatus.SUGGESTED
        return ReconciliationStatus.UNMATCHED
