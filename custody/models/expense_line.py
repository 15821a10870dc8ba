from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from custody.db.base import Base


def _utcnow():
    return datetime.now(timezone.utc)


class ExpenseLine(Base):
    __tablename__ = "expense_lines"

    id = Column(String(255), primary_key=True)

    sheet_id = Column(
        String(255),
        ForeignKey("sheets.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    # submission order inside the sheet
    position = Column(Integer, nullable=False, default=0)

    date = Column(Date, nullable=False)
    company = Column(String(255), nullable=False)
    tax_number = Column(String(255), nullable=True)
    invoice_number = Column(String(255), nullable=True)
    description = Column(Text, nullable=False)
    reason = Column(String(255), nullable=False)

    amount = Column(Numeric(10, 2), nullable=False)
    bank_fees = Column(Numeric(10, 2), nullable=True)

    buyer_name = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    sheet = relationship("Sheet", back_populates="lines")
