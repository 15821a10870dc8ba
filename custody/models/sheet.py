# custody/models/sheet.py

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Numeric, String, Text
from sqlalchemy.orm import relationship

from custody.core.constants import SheetStatus
from custody.db.base import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Sheet(Base):
    __tablename__ = "sheets"

    # generated by the client when the draft is created
    id = Column(String(255), primary_key=True)

    custody_number = Column(String(255), nullable=False)
    custody_amount = Column(Numeric(10, 2), nullable=False)

    # plain string, not a FK: sheets outlive their owner's account
    employee_id = Column(String(255), index=True, nullable=False)

    status = Column(String(50), nullable=False, default=SheetStatus.OPEN.value)
    notes = Column(Text, nullable=True)

    # SQLite keeps no offset: values come back naive (UTC); PostgreSQL keeps it
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    last_modified = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    lines = relationship(
        "ExpenseLine",
        back_populates="sheet",
        order_by="ExpenseLine.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
