from typing import List

from pydantic import BaseModel

from custody.core.constants import ExpenseReason


class CategoryBreakdown(BaseModel):
    reason: ExpenseReason
    label: str
    amount: float
    percent: float


class LedgerSummary(BaseModel):
    custody_amount: float
    total_spent: float
    remaining: float
    progress: float
    breakdown: List[CategoryBreakdown] = []
