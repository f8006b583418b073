"""
Scan workflow management.

One scan is processed at a time. A decoded boleto is either committed right
away or parked while the operator names an unknown bank or beneficiary.
While a decision is outstanding the workflow ignores new scans; there is no
queue. Every terminal outcome returns the workflow to IDLE.

    IDLE --scan--> decoded --+--> commit (government / all known)
                             +--> AWAITING_BANK_NAME --confirm--> register bank, commit
                             |                       --dismiss--> discard
                             +--> AWAITING_BENEFICIARY_NAME --confirm--> name it, commit
                                                            --dismiss--> commit unnamed

A commit is skipped when the history already holds the same barcode digits
or digitable line.
"""

import logging
import uuid
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum

from ..decoder import decode
from ..history.store import HistoryStore
from ..registry import BankRegistry, BeneficiaryMemory
from ..schemas.boleto import BoletoRecord, HistoryRecord, RawScan
from ..schemas.dedupe import compose_beneficiary, find_duplicate
from ..state_store import StorageError

logger = logging.getLogger(__name__)

DEFAULT_TRANSIENT_LIMIT = 10


class WorkflowState(str, Enum):
    """Where the workflow stands between scans."""

    IDLE = "IDLE"  # Accepting scans
    AWAITING_BANK_NAME = "AWAITING_BANK_NAME"  # Unknown bank code
    AWAITING_BENEFICIARY_NAME = "AWAITING_BENEFICIARY_NAME"  # Unnamed beneficiary


class ScanOutcome(str, Enum):
    """What happened to a scan or decision."""

    NOT_BOLETO = "NOT_BOLETO"  # Shown transiently, never stored
    COMMITTED = "COMMITTED"  # Written to history
    DUPLICATE = "DUPLICATE"  # Already in history, not written
    PENDING = "PENDING"  # Waiting for an operator decision
    DISCARDED = "DISCARDED"  # Operator cancelled the bank registration
    IGNORED = "IGNORED"  # Arrived while a decision was outstanding
    FAILED = "FAILED"  # Registration refused or storage error


class DecisionAction(str, Enum):
    """Operator's answer to a pending question."""

    CONFIRM = "CONFIRM"  # Save the supplied name
    DISMISS = "DISMISS"  # Cancel (bank) / skip (beneficiary)


class WorkflowStateError(Exception):
    """Raised when a decision arrives while nothing is pending."""

    pass


@dataclass(frozen=True)
class OperatorDecision:
    """Decision message that resumes a suspended workflow."""

    action: DecisionAction
    name: str = ""

    @classmethod
    def confirm(cls, name: str) -> "OperatorDecision":
        return cls(DecisionAction.CONFIRM, name)

    @classmethod
    def dismiss(cls) -> "OperatorDecision":
        return cls(DecisionAction.DISMISS)

    @property
    def confirmed_name(self) -> str | None:
        """Stripped name when confirming with a non-blank name, else None."""
        if self.action != DecisionAction.CONFIRM:
            return None
        return self.name.strip() or None


@dataclass
class PendingScan:
    """A decoded boleto parked until the operator decides."""

    scan: RawScan
    boleto: BoletoRecord
    code: str  # Bank code or beneficiary code being asked about


@dataclass(frozen=True)
class TransientResult:
    """Entry of the on-screen result list (never persisted)."""

    id: str
    payload: str
    symbology: str
    display: str
    timestamp: str
    is_boleto: bool
    boleto: BoletoRecord | None = None


@dataclass
class ScanResult:
    """Result of feeding a scan or a decision into the workflow."""

    outcome: ScanOutcome
    state: WorkflowState
    boleto: BoletoRecord | None = None
    record: HistoryRecord | None = None
    message: str = ""
    pending_code: str | None = None


def _new_id() -> str:
    return uuid.uuid4().hex


class ScanWorkflow:
    """
    Manages the scan classification workflow.

    Responsibilities:
    - Decode incoming scans
    - Gate on known banks and beneficiaries
    - Suspend for operator decisions
    - Suppress duplicates and commit to history
    """

    def __init__(
        self,
        banks: BankRegistry,
        beneficiaries: BeneficiaryMemory,
        history: HistoryStore,
        transient_limit: int = DEFAULT_TRANSIENT_LIMIT,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Initialize with injected repositories.

        Args:
            banks: Bank registry
            beneficiaries: Beneficiary memory
            history: Scan history
            transient_limit: Size of the on-screen result list
            clock: Returns "now" (defaults to UTC wall clock)
        """
        self.banks = banks
        self.beneficiaries = beneficiaries
        self.history = history
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._state = WorkflowState.IDLE
        self._pending: PendingScan | None = None
        self._recent: deque[TransientResult] = deque(maxlen=transient_limit)

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def is_scanning(self) -> bool:
        """Scanning is paused whenever a decision is outstanding."""
        return self._state == WorkflowState.IDLE

    @property
    def pending(self) -> PendingScan | None:
        return self._pending

    @property
    def recent(self) -> list[TransientResult]:
        """On-screen results, newest first."""
        return list(self._recent)

    def handle_scan(self, scan: RawScan) -> ScanResult:
        """
        Process one scanner event.

        Args:
            scan: Raw scanner payload and symbology

        Returns:
            ScanResult describing what happened
        """
        if not self.is_scanning:
            logger.debug(f"Scan ignored while in {self._state.value}")
            return ScanResult(ScanOutcome.IGNORED, self._state)

        now = self._clock()
        decoded = decode(scan.payload, read_at=now)
        boleto = decoded.record
        self._show(scan, boleto, now)

        if boleto is None:
            return ScanResult(ScanOutcome.NOT_BOLETO, self._state, message="Not a boleto")

        try:
            if boleto.is_government:
                return self._commit(scan, boleto)

            if not self.banks.is_known(boleto.bank_code):
                logger.info(f"Unknown bank code {boleto.bank_code}, asking operator")
                return self._suspend(WorkflowState.AWAITING_BANK_NAME, scan, boleto, boleto.bank_code)

            if boleto.beneficiary_code:
                name = self.beneficiaries.name_of(boleto.beneficiary_code)
                if not name:
                    logger.info(f"Unnamed beneficiary {boleto.beneficiary_code}, asking operator")
                    return self._suspend(
                        WorkflowState.AWAITING_BENEFICIARY_NAME, scan, boleto, boleto.beneficiary_code
                    )
                boleto.beneficiary_name = name

            return self._commit(scan, boleto)
        except StorageError as e:
            return self._storage_failure(e, boleto)

    def resolve(self, decision: OperatorDecision) -> ScanResult:
        """
        Apply the operator's decision to the pending scan and resume scanning.

        Raises:
            WorkflowStateError: If no decision is outstanding
        """
        pending = self._pending
        if pending is None:
            raise WorkflowStateError("No scan is waiting for a decision")

        try:
            if self._state == WorkflowState.AWAITING_BANK_NAME:
                return self._resolve_bank(pending, decision)
            return self._resolve_beneficiary(pending, decision)
        except StorageError as e:
            return self._storage_failure(e, pending.boleto)
        finally:
            self._resume()

    def _resolve_bank(self, pending: PendingScan, decision: OperatorDecision) -> ScanResult:
        name = decision.confirmed_name
        if name is None:
            logger.info(f"Bank {pending.code} not registered, scan discarded")
            return ScanResult(
                ScanOutcome.DISCARDED,
                WorkflowState.IDLE,
                boleto=pending.boleto,
                message="Scan discarded",
            )

        registration = self.banks.register(pending.code, name)
        if not registration.success:
            logger.warning(f"Bank registration failed for {pending.code}: {registration.message}")
            return ScanResult(
                ScanOutcome.FAILED,
                WorkflowState.IDLE,
                boleto=pending.boleto,
                message=registration.message,
            )

        result = self._commit(pending.scan, pending.boleto)
        result.message = f"{registration.message}. {result.message}"
        return result

    def _resolve_beneficiary(self, pending: PendingScan, decision: OperatorDecision) -> ScanResult:
        name = decision.confirmed_name
        if name is not None:
            try:
                self.beneficiaries.upsert(pending.code, name)
                pending.boleto.beneficiary_name = name
            except StorageError as e:
                logger.error(f"Failed to save beneficiary {pending.code}: {e}")
        else:
            logger.info(f"Beneficiary {pending.code} left unnamed")

        return self._commit(pending.scan, pending.boleto)

    def _commit(self, scan: RawScan, boleto: BoletoRecord) -> ScanResult:
        duplicate = find_duplicate(boleto, self.history.list())
        if duplicate is not None:
            logger.info(f"Duplicate boleto not saved to history (matches {duplicate.id})")
            return ScanResult(
                ScanOutcome.DUPLICATE,
                WorkflowState.IDLE,
                boleto=boleto,
                record=duplicate,
                message="Boleto already in history",
            )

        bank_name = self.banks.name_of(boleto.bank_code) if boleto.bank_code else None
        record = HistoryRecord(
            id=_new_id(),
            raw_data=scan.payload,
            raw_type=scan.symbology,
            timestamp=self._clock().isoformat(),
            is_boleto=True,
            boleto=replace(boleto),
            beneficiary=compose_beneficiary(bank_name, boleto.beneficiary_code),
            bank_name=bank_name,
        )
        self.history.prepend(record)
        logger.info(f"Committed boleto {record.id}: {boleto.summary()}")
        return ScanResult(
            ScanOutcome.COMMITTED,
            WorkflowState.IDLE,
            boleto=boleto,
            record=record,
            message="Boleto saved to history",
        )

    def _suspend(
        self, state: WorkflowState, scan: RawScan, boleto: BoletoRecord, code: str
    ) -> ScanResult:
        self._state = state
        self._pending = PendingScan(scan=scan, boleto=boleto, code=code)
        return ScanResult(ScanOutcome.PENDING, state, boleto=boleto, pending_code=code)

    def _resume(self) -> None:
        self._state = WorkflowState.IDLE
        self._pending = None

    def _storage_failure(self, error: StorageError, boleto: BoletoRecord | None) -> ScanResult:
        logger.error(f"Storage failure while processing scan: {error}")
        self._resume()
        return ScanResult(
            ScanOutcome.FAILED,
            WorkflowState.IDLE,
            boleto=boleto,
            message=f"Could not save scan: {error}",
        )

    def _show(self, scan: RawScan, boleto: BoletoRecord | None, now: datetime) -> None:
        self._recent.appendleft(
            TransientResult(
                id=_new_id(),
                payload=scan.payload,
                symbology=scan.symbology,
                display=boleto.summary() if boleto else scan.payload,
                timestamp=now.isoformat(),
                is_boleto=boleto is not None,
                boleto=boleto,
            )
        )
