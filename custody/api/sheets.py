# custody/api/sheets.py

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from custody.api.auth import get_current_user
from custody.core import messages
from custody.core.permissions import require_roles
from custody.core.roles import MANAGER_ROLES
from custody.db.session import get_db
from custody.models.user import User
from custody.schemas.sheet import SheetSchema
from custody.schemas.user import MessageResponse
from custody.services import sheet_service

router = APIRouter(tags=["Sheets"])


# --------------------------------------------------
# LIST (ROLE SCOPED)
# --------------------------------------------------
@router.get("", response_model=List[SheetSchema])
def list_sheets(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return sheet_service.list_sheets(db, current_user)


# --------------------------------------------------
# SAVE (UPSERT + REPLACE LINES)
# --------------------------------------------------
@router.post("", response_model=SheetSchema)
def save_sheet(
    payload: SheetSchema,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return sheet_service.upsert_sheet(db, payload, current_user)


# --------------------------------------------------
# DELETE (ADMIN / TEAM LEAD)
# --------------------------------------------------
@router.delete("/{sheet_id}", response_model=MessageResponse)
def delete_sheet(
    sheet_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(MANAGER_ROLES)),
):
    sheet_service.delete_sheet(db, sheet_id)
    return {"message": messages.SHEET_DELETED}
