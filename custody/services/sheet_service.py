# custody/services/sheet_service.py

import logging
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from custody.core import messages
from custody.core.roles import is_manager
from custody.models.expense_line import ExpenseLine
from custody.models.sheet import Sheet
from custody.models.user import User
from custody.schemas.sheet import SheetSchema

logger = logging.getLogger(__name__)


def list_sheets(db: Session, current_user: User):
    try:
        query = db.query(Sheet).options(joinedload(Sheet.lines))

        if not is_manager(current_user.role):
            query = query.filter(Sheet.employee_id == current_user.id)

        return query.order_by(Sheet.last_modified.desc()).all()
    except SQLAlchemyError:
        logger.exception("Error fetching sheets for user=%s", current_user.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=messages.SHEETS_FETCH_FAILED,
        )


def _check_owner(existing: Sheet, payload: SheetSchema, current_user: User):
    if is_manager(current_user.role):
        return

    if payload.employee_id != current_user.id or (
        existing is not None and existing.employee_id != current_user.id
    ):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=messages.NOT_AUTHORIZED,
        )


def upsert_sheet(db: Session, payload: SheetSchema, current_user: User) -> SheetSchema:
    """
    Insert or overwrite the sheet row, then replace its whole line set.

    Runs as one transaction: on failure neither the sheet row nor the
    lines change. Concurrent saves of the same sheet are last-commit-wins.
    """
    now = datetime.now(timezone.utc)
    payload = payload.model_copy(
        update={
            "created_at": payload.created_at or now,
            "last_modified": payload.last_modified or now,
        }
    )

    existing = db.get(Sheet, payload.id)
    _check_owner(existing, payload, current_user)

    try:
        sheet = existing
        if sheet is None:
            sheet = Sheet(id=payload.id, created_at=payload.created_at)
            db.add(sheet)

        # created_at is kept from the first save
        sheet.custody_number = payload.custody_number
        sheet.custody_amount = payload.custody_amount
        sheet.employee_id = payload.employee_id
        sheet.status = payload.status.value
        sheet.notes = payload.notes
        sheet.last_modified = payload.last_modified
        db.flush()

        db.query(ExpenseLine).filter(ExpenseLine.sheet_id == sheet.id).delete(
            synchronize_session=False
        )

        db.add_all(
            [
                ExpenseLine(
                    id=line.id,
                    sheet_id=sheet.id,
                    position=position,
                    date=line.date,
                    company=line.company,
                    tax_number=line.tax_number,
                    invoice_number=line.invoice_number,
                    description=line.description,
                    reason=line.reason.value,
                    amount=line.amount,
                    bank_fees=line.bank_fees,
                    buyer_name=line.buyer_name,
                    notes=line.notes,
                    created_at=line.created_at or now,
                )
                for position, line in enumerate(payload.lines)
            ]
        )

        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error saving sheet id=%s", payload.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=messages.SHEET_SAVE_FAILED,
        )

    logger.info(
        "Sheet saved id=%s lines=%d by=%s",
        payload.id,
        len(payload.lines),
        current_user.id,
    )

    return payload.model_copy(
        update={
            "lines": [
                line.model_copy(update={"sheet_id": payload.id})
                for line in payload.lines
            ]
        }
    )


def delete_sheet(db: Session, sheet_id: str) -> None:
    try:
        # expense_lines go with the ON DELETE CASCADE constraint
        deleted = (
            db.query(Sheet)
            .filter(Sheet.id == sheet_id)
            .delete(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error deleting sheet id=%s", sheet_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=messages.SHEET_DELETE_FAILED,
        )

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=messages.SHEET_NOT_FOUND,
        )

    logger.info("Sheet deleted id=%s", sheet_id)
