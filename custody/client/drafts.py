# custody/client/drafts.py
"""Local editing of sheets before they are saved as a whole document."""

import random
import string
import uuid
from datetime import date, datetime, timezone
from typing import List, Optional

from custody.core.constants import ExpenseReason, SheetStatus
from custody.schemas.sheet import ExpenseLineSchema, SheetSchema


def new_line_id() -> str:
    return "".join(random.choices(string.ascii_lowercase + string.digits, k=9))


def create_new_sheet(number: str, amount: float, employee_id: str) -> SheetSchema:
    now = datetime.now(timezone.utc)
    return SheetSchema(
        id=f"CUST-{uuid.uuid4().hex[:8]}",
        custody_number=number,
        custody_amount=amount,
        employee_id=employee_id,
        status=SheetStatus.OPEN,
        lines=[],
        created_at=now,
        last_modified=now,
    )


def new_line(
    sheet: SheetSchema,
    company: str,
    description: str,
    reason: ExpenseReason,
    amount: float,
    line_date: Optional[date] = None,
    **fields,
) -> ExpenseLineSchema:
    return ExpenseLineSchema(
        id=new_line_id(),
        sheet_id=sheet.id,
        date=line_date or date.today(),
        company=company,
        description=description,
        reason=reason,
        amount=amount,
        created_at=datetime.now(timezone.utc),
        **fields,
    )


def add_line(sheet: SheetSchema, line: ExpenseLineSchema) -> SheetSchema:
    return sheet.model_copy(update={"lines": [*sheet.lines, line]})


def update_line(sheet: SheetSchema, line: ExpenseLineSchema) -> SheetSchema:
    return sheet.model_copy(
        update={"lines": [line if l.id == line.id else l for l in sheet.lines]}
    )


def delete_line(sheet: SheetSchema, line_id: str) -> SheetSchema:
    return sheet.model_copy(update={"lines": [l for l in sheet.lines if l.id != line_id]})


def filter_lines(sheet: SheetSchema, reason: Optional[ExpenseReason] = None) -> List[ExpenseLineSchema]:
    if reason is None:
        return list(sheet.lines)
    return [line for line in sheet.lines if line.reason == reason]


def search_sheets(sheets: List[SheetSchema], term: str) -> List[SheetSchema]:
    term = (term or "").lower()
    return [sheet for sheet in sheets if term in sheet.custody_number.lower()]
