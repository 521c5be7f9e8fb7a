"""
History model for storing execution records.

Each settled send that the engine records is stored as one row. The full
record is kept as JSON; a few columns are duplicated for ordering and
trimming.
"""

from datetime import datetime

from sqlalchemy import String, Text, JSON
from sqlalchemy.orm import Mapped, mapped_column

from ..database import Base


class History(Base):
    """
    SQLAlchemy model for execution history.

    Attributes:
        id: Row identifier, increasing with insertion order
        record_id: ``ExecutionRecord.id``
        method: HTTP method used
        url: Target URL (after variable substitution)
        status: Status code as text, or the error sentinel
        executed_at: When the send settled
        payload: The serialized ``ExecutionRecord``
    """
    __tablename__ = "history"

    id: Mapped[int] = mapped_column(primary_key=True)
    record_id: Mapped[str] = mapped_column(String(32), unique=True, index=True)
    method: Mapped[str] = mapped_column(String(10))
    url: Mapped[str] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(10))
    executed_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    payload: Mapped[dict] = mapped_column(JSON)
