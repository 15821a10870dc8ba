from fastapi import APIRouter

from custody.core.constants import ExpenseReason, SHEET_STATUSES
from custody.core.roles import ROLES

router = APIRouter(prefix="/reference-data", tags=["Reference Data"])


@router.get("")
def get_reference_data():
    return {
        "reasons": [
            {"id": reason.value, "label": reason.label, "color": reason.color}
            for reason in ExpenseReason
        ],
        "statuses": SHEET_STATUSES,
        "roles": ROLES,
    }
