# custody/services/ledger_service.py
"""
Derived figures for a custody sheet.

Nothing here is persisted: every figure is recomputed from the sheet's
current lines. Works on ``SheetSchema`` / ``ExpenseLineSchema`` as well as
the ORM rows, anything exposing ``custody_amount``, ``lines``, ``amount``,
``bank_fees`` and ``reason``.
"""

from typing import List

from custody.core.constants import ExpenseReason
from custody.schemas.ledger import CategoryBreakdown, LedgerSummary


def line_total(line) -> float:
    return float(line.amount or 0) + float(line.bank_fees or 0)


def total_spent(sheet) -> float:
    return sum(line_total(line) for line in sheet.lines)


def remaining(sheet) -> float:
    # negative when the employee overspent the custody
    return float(sheet.custody_amount or 0) - total_spent(sheet)


def progress(sheet) -> float:
    custody_amount = float(sheet.custody_amount or 0)
    if custody_amount <= 0:
        return 0.0
    return total_spent(sheet) / custody_amount * 100


def category_breakdown(sheet) -> List[CategoryBreakdown]:
    totals = {}
    for line in sheet.lines:
        reason = ExpenseReason(line.reason)
        totals[reason] = totals.get(reason, 0.0) + line_total(line)

    spent = sum(totals.values())
    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)

    return [
        CategoryBreakdown(
            reason=reason,
            label=reason.label,
            amount=amount,
            percent=(amount / spent * 100) if spent > 0 else 0.0,
        )
        for reason, amount in ordered
    ]


def summarize(sheet) -> LedgerSummary:
    spent = total_spent(sheet)
    return LedgerSummary(
        custody_amount=float(sheet.custody_amount or 0),
        total_spent=spent,
        remaining=float(sheet.custody_amount or 0) - spent,
        progress=progress(sheet),
        breakdown=category_breakdown(sheet),
    )
