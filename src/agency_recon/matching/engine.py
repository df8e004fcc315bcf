"""
Batch reconciliation engine.

Pairs unmatched bank transactions with unmatched income/expense records
using the additive point strategy. High scoring pairs are confirmed and
written to the match store; middling ones are reported as suggestions.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Optional
import logging

from ..config import ReconConfig
from ..models.records import (
    BankTransaction,
    Match,
    MatchableRecord,
    MatchDecision,
    MatchStatus,
    RecordKind,
    ReconcileResult,
)
from ..storage.base import MatchStore
from ..utils.exceptions import ConfigurationError, StoreError
from .strategies import AdditivePointStrategy, ScoreBreakdown, ScoringStrategy

logger = logging.getLogger(__name__)


class ReconciliationEngine:
    """
    Greedy batch reconciler.

    Transactions are processed in input order. Each one takes its best
    scoring record of the expected kind; once confirmed, that record
    leaves the pool so no later transaction in the same run can claim
    it. This is a per-transaction greedy pick, not a globally optimal
    assignment, and results depend on input order.

    Runs are not isolated from each other. Two concurrent runs can read
    the same unmatched record and both confirm it; callers must
    serialise runs (e.g. with a job lock).
    """

    def __init__(
        self,
        config: Optional[ReconConfig] = None,
        store: Optional[MatchStore] = None,
        strategy: Optional[ScoringStrategy] = None,
    ):
        """
        Initialize the reconciliation engine.

        Args:
            config: Application configuration
            store: Store used by run() and for writing confirmed matches
            strategy: Scoring strategy on a 0-100 scale (additive points by default)
        """
        self.config = config or ReconConfig()
        self.store = store
        self.strategy = strategy or AdditivePointStrategy()

    def run(
        self,
        min_confidence: Optional[float] = None,
        dry_run: Optional[bool] = None,
        group_id: Optional[str] = None,
    ) -> ReconcileResult:
        """
        Load unmatched data from the store, reconcile and persist.

        Load failures propagate to the caller as StoreError.

        Args:
            min_confidence: Points needed to auto-confirm (config default if None)
            dry_run: Compute without writing (config default if None)
            group_id: Only reconcile transactions of this group

        Returns:
            Reconciliation result
        """
        if self.store is None:
            raise ConfigurationError("ReconciliationEngine.run() requires a store")

        transactions = self.store.load_transactions(group_id)
        # One read covers both the transaction and the record exclusions
        existing_matches = self.store.load_matches()
        records = self.store.load_records(
            kinds=(RecordKind.INCOME, RecordKind.EXPENSE)
        )

        return self.reconcile(
            transactions,
            records,
            existing_matches=existing_matches,
            min_confidence=min_confidence,
            dry_run=dry_run,
            group_id=group_id,
        )

    def reconcile(
        self,
        transactions: Sequence[BankTransaction],
        records: Sequence[MatchableRecord],
        existing_matches: Iterable[Match] = (),
        min_confidence: Optional[float] = None,
        dry_run: Optional[bool] = None,
        group_id: Optional[str] = None,
    ) -> ReconcileResult:
        """
        Reconcile transactions against records.

        Args:
            transactions: Bank transactions
            records: Candidate records
            existing_matches: Already committed pairings to exclude
            min_confidence: Points needed to auto-confirm (config default if None)
            dry_run: Compute without writing (config default if None)
            group_id: Only reconcile transactions of this group

        Returns:
            Reconciliation result with counts and every decision made
        """
        batch = self.config.batch
        if min_confidence is None:
            min_confidence = batch.min_confidence
        if dry_run is None:
            dry_run = batch.dry_run
        suggest_threshold = batch.suggest_threshold

        if not dry_run and self.store is None:
            raise ConfigurationError(
                "A store is required to persist matches; use dry_run=True"
            )

        start_time = datetime.now()
        result = ReconcileResult(dry_run=dry_run)

        matched_txn_ids: set[str] = set()
        matched_record_ids: set[str] = set()
        for match in existing_matches:
            if match.is_confirmed:
                matched_txn_ids.add(match.transaction_id)
                matched_record_ids.add(match.record_id)

        unmatched_txns = [
            t
            for t in transactions
            if t.id not in matched_txn_ids
            and (group_id is None or t.group_id == group_id)
        ]
        pool = [r for r in records if r.id not in matched_record_ids]

        result.total_processed = len(unmatched_txns)
        logger.info(
            f"Starting batch reconciliation: {len(unmatched_txns)} transactions, "
            f"{len(pool)} records, min confidence {min_confidence}"
        )

        confirmed: list[MatchDecision] = []

        for txn in unmatched_txns:
            best = self._find_best_record(txn, pool)
            if best is None:
                logger.debug(f"Transaction {txn.id}: no candidate")
                continue

            pool_index, record, breakdown = best

            if breakdown.score >= min_confidence:
                decision = self._decision(txn, record, breakdown, MatchStatus.CONFIRMED)
                confirmed.append(decision)
                result.matches.append(decision)
                result.matched += 1
                del pool[pool_index]
            elif breakdown.score >= suggest_threshold:
                decision = self._decision(txn, record, breakdown, MatchStatus.SUGGESTED)
                result.matches.append(decision)
                result.suggested += 1
            else:
                logger.debug(
                    f"Transaction {txn.id}: best record {record.id} "
                    f"scored {breakdown.score:.0f}, below suggestion threshold"
                )
                continue

            logger.debug(
                f"Transaction {txn.id} -> {record.id}: {decision.status.value} "
                f"({breakdown.score:.0f} pts: {', '.join(breakdown.reasons)})"
            )

        if confirmed and not dry_run:
            self._persist(confirmed, result)

        result.processing_time_seconds = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"Batch reconciliation complete in {result.processing_time_seconds:.2f}s: "
            f"{result.matched} matched, {result.suggested} suggested, "
            f"{result.failed} failed"
        )
        return result

    def _find_best_record(
        self,
        txn: BankTransaction,
        pool: Sequence[MatchableRecord],
    ) -> Optional[tuple[int, MatchableRecord, ScoreBreakdown]]:
        """
        Find the highest scoring record of the expected kind.

        Ties keep the earliest record; records scoring 0 are never picked.

        Returns:
            (index in pool, record, breakdown) or None
        """
        expected_kind = RecordKind.expected_for_amount(txn.amount)

        best: Optional[tuple[int, MatchableRecord, ScoreBreakdown]] = None
        best_score = 0.0

        for index, record in enumerate(pool):
            if record.kind != expected_kind:
                continue

            breakdown = self.strategy.score(txn, record)
            if breakdown is None:
                continue

            if breakdown.score > best_score:
                best = (index, record, breakdown)
                best_score = breakdown.score

        return best

    @staticmethod
    def _decision(
        txn: BankTransaction,
        record: MatchableRecord,
        breakdown: ScoreBreakdown,
        status: MatchStatus,
    ) -> MatchDecision:
        return MatchDecision(
            transaction_id=txn.id,
            record_id=record.id,
            record_kind=record.kind,
            status=status,
            confidence=breakdown.score,
            reasons=list(breakdown.reasons),
        )

    def _persist(self, confirmed: list[MatchDecision], result: ReconcileResult) -> None:
        """
        Bulk insert confirmed pairs.

        Any insert failure fails the whole batch: the store may have
        written some rows, but they are all reported as failed.
        """
        try:
            self.store.insert_matches([d.to_match() for d in confirmed])
        except StoreError as e:
            logger.error(f"Error creating {len(confirmed)} matches: {e}")
            result.failed = len(confirmed)
            result.matched = 0
            result.insert_error = str(e)
            return

        logger.info(f"Persisted {len(confirmed)} confirmed matches")
