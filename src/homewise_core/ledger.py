"""Reserve withdrawals and the charge clearing lifecycle.

Ledger-backed reserves only release money through a ``LedgerEntry``: a
dated, annotated, positive withdrawal that is never edited afterwards.
Charges move through a fixed set of status transitions; anything else is
rejected.

Example:
    entry = record_withdrawal(
        reserve, 2400, date="2025-03-01", note="Home insurance", obligation_id="ob1"
    )
    reserve = apply_withdrawal(reserve, entry)
"""

import hashlib
from typing import Any, Optional

import structlog

from .exceptions import ChargeTransitionError, LedgerPolicyError
from .models import Bucket, BucketConstraint, BucketType, Charge, ChargeStatus, LedgerEntry
from .numeric import safe_number

logger = structlog.get_logger()

CHARGE_TRANSITIONS: dict[ChargeStatus, frozenset[ChargeStatus]] = {
    ChargeStatus.UNMATCHED: frozenset({ChargeStatus.MATCHED_UNFUNDED, ChargeStatus.IGNORED}),
    ChargeStatus.MATCHED_UNFUNDED: frozenset({ChargeStatus.FUNDED}),
    ChargeStatus.FUNDED: frozenset({ChargeStatus.CLEARED}),
    ChargeStatus.CLEARED: frozenset(),
    ChargeStatus.IGNORED: frozenset(),
}


def requires_ledger(bucket: Bucket) -> bool:
    """Whether withdrawals from ``bucket`` must be recorded in the ledger."""
    return (
        bucket.type == BucketType.LEDGER_RESERVE
        or bucket.constraints == BucketConstraint.LEDGER_REQUIRED
    )


def _entry_id(
    bucket_id: str, date: str, amount: float, obligation_id: Optional[str], note: str
) -> str:
    payload = "|".join([bucket_id, date, repr(amount), obligation_id or "", note])
    return hashlib.sha256(payload.encode()).hexdigest()[:32]


def record_withdrawal(
    bucket: Bucket,
    amount: Any,
    *,
    date: str,
    note: str,
    obligation_id: Optional[str] = None,
    entry_id: Optional[str] = None,
) -> LedgerEntry:
    """Create the ledger entry for a withdrawal from a ledger-backed bucket.

    Without an explicit ``entry_id`` the id is derived from the entry's
    fields, so recording the same withdrawal twice yields equal entries.

    Raises:
        LedgerPolicyError: If the bucket is not ledger-backed, the amount is
            not positive, or the date or note is blank.
    """
    if not requires_ledger(bucket):
        raise LedgerPolicyError(
            f"Bucket {bucket.name!r} does not take ledger withdrawals",
            field="bucket_id",
            value=bucket.id,
            constraint="Bucket must be a ledger reserve or require a ledger",
        )

    value = safe_number(amount)
    if value <= 0:
        raise LedgerPolicyError(
            "Withdrawal amount must be positive",
            field="amount",
            value=amount,
            constraint="amount > 0",
        )
    if not date or not date.strip():
        raise LedgerPolicyError(
            "Withdrawal date is required",
            field="date",
            constraint="ISO date, YYYY-MM-DD",
        )
    if not note or not note.strip():
        raise LedgerPolicyError(
            "Every reserve withdrawal needs a note",
            field="note",
            constraint="Non-empty note",
        )

    date = date.strip()
    note = note.strip()
    entry = LedgerEntry(
        id=entry_id or _entry_id(bucket.id, date, value, obligation_id, note),
        bucket_id=bucket.id,
        date=date,
        amount=value,
        obligation_id=obligation_id,
        note=note,
    )

    logger.info(
        "ledger_withdrawal_recorded",
        entry_id=entry.id,
        bucket_id=bucket.id,
        amount=value,
        obligation_id=obligation_id,
    )
    return entry


def apply_withdrawal(bucket: Bucket, entry: LedgerEntry) -> Bucket:
    """New bucket with the entry's amount deducted from the balance.

    Raises:
        LedgerPolicyError: If the entry belongs to a different bucket.
    """
    if entry.bucket_id != bucket.id:
        raise LedgerPolicyError(
            "Ledger entry does not belong to this bucket",
            field="bucket_id",
            value=entry.bucket_id,
            constraint=f"Must equal {bucket.id!r}",
        )
    return bucket.model_copy(update={"balance": bucket.balance - entry.amount})


def can_transition(current: ChargeStatus, requested: ChargeStatus) -> bool:
    """Whether a charge may move from ``current`` to ``requested``."""
    return requested in CHARGE_TRANSITIONS.get(current, frozenset())


def transition_charge(
    charge: Charge,
    status: ChargeStatus,
    bucket_id: Optional[str] = None,
) -> Charge:
    """New charge in ``status``; matching also assigns the bucket.

    Raises:
        ChargeTransitionError: If the transition is not allowed, or a match
            has no bucket to match to.
    """
    try:
        status = ChargeStatus(status)
    except ValueError:
        raise ChargeTransitionError(
            f"Unknown charge status: {status!r}",
            current=charge.status.value,
            requested=str(status),
        ) from None
    if not can_transition(charge.status, status):
        raise ChargeTransitionError(
            f"Charge {charge.id!r} cannot move from {charge.status.value} to {status.value}",
            current=charge.status.value,
            requested=status.value,
        )

    update: dict[str, Any] = {"status": status}
    if status == ChargeStatus.MATCHED_UNFUNDED:
        target = bucket_id or charge.bucket_id
        if not target:
            raise ChargeTransitionError(
                f"Charge {charge.id!r} needs a bucket to be matched",
                current=charge.status.value,
                requested=status.value,
            )
        update["bucket_id"] = target

    logger.debug(
        "charge_transition",
        charge_id=charge.id,
        from_status=charge.status.value,
        to_status=status.value,
    )
    return charge.model_copy(update=update)


__all__ = [
    "CHARGE_TRANSITIONS",
    "requires_ledger",
    "record_withdrawal",
    "apply_withdrawal",
    "can_transition",
    "transition_charge",
]
