# custody/schemas/sheet.py

from datetime import date, datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from custody.core.constants import ExpenseReason, SheetStatus, normalize_reason


def _to_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc)
    return value


class ExpenseLineSchema(BaseModel):
    id: str = Field(min_length=1)
    sheet_id: Optional[str] = None
    date: date
    company: str
    tax_number: Optional[str] = None
    invoice_number: Optional[str] = None
    description: str
    reason: ExpenseReason
    amount: float = Field(allow_inf_nan=False)
    bank_fees: Optional[float] = Field(default=None, allow_inf_nan=False)
    buyer_name: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("date", mode="before")
    @classmethod
    def plain_date(cls, value):
        # "2024-05-01T00:00:00.000Z" -> "2024-05-01"
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        if isinstance(value, datetime):
            return value.date()
        return value

    @field_validator("reason", mode="before")
    @classmethod
    def reason_identifier(cls, value):
        return normalize_reason(value)

    @field_validator("created_at")
    @classmethod
    def utc_created_at(cls, value):
        return _to_utc(value)

    class Config:
        from_attributes = True


class SheetSchema(BaseModel):
    id: str = Field(min_length=1)
    custody_number: str
    custody_amount: float = Field(ge=0, allow_inf_nan=False)
    employee_id: str
    status: SheetStatus = SheetStatus.OPEN
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    last_modified: Optional[datetime] = None
    lines: List[ExpenseLineSchema] = []

    @field_validator("created_at", "last_modified")
    @classmethod
    def utc_timestamps(cls, value):
        return _to_utc(value)

    class Config:
        from_attributes = True
