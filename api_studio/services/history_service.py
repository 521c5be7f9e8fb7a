"""
History service for persisting execution records.

The history ledger lives in memory; this service mirrors it into the
``history`` table so it survives restarts.
"""

from sqlalchemy.orm import Session

from .. import config
from ..models.history import History
from ..schemas.history import ExecutionRecord
from .history_ledger import HistoryLedger


def save_history(
    db: Session,
    record: ExecutionRecord,
    capacity: int = config.HISTORY_CAPACITY,
) -> History:
    """
    Save an execution record and drop rows beyond ``capacity``.

    Args:
        db: Database session
        record: The record appended to the ledger
        capacity: Number of most recent rows to keep

    Returns:
        The created history row
    """
    history = History(
        record_id=record.id,
        method=record.method,
        url=record.url,
        status=str(record.status),
        executed_at=record.timestamp.replace(tzinfo=None),
        payload=record.model_dump(mode="json"),
    )
    db.add(history)
    db.flush()

    stale_ids = [
        row_id for (row_id,) in (
            db.query(History.id)
            .order_by(History.id.desc())
            .offset(capacity)
            .all()
        )
    ]
    if stale_ids:
        db.query(History).filter(History.id.in_(stale_ids)).delete(synchronize_session=False)

    db.commit()
    db.refresh(history)
    return history


def load_history(db: Session, capacity: int = config.HISTORY_CAPACITY) -> list[ExecutionRecord]:
    """Most recent records, newest first."""
    rows = (
        db.query(History)
        .order_by(History.id.desc())
        .limit(capacity)
        .all()
    )
    return [ExecutionRecord.model_validate(row.payload) for row in rows]


def restore_ledger(db: Session, capacity: int = config.HISTORY_CAPACITY) -> HistoryLedger:
    """Build a ledger from stored history."""
    return HistoryLedger(capacity=capacity, records=load_history(db, capacity))


def clear_history(db: Session) -> None:
    """Delete all stored history."""
    db.query(History).delete()
    db.commit()
