# custody/core/constants.py
import enum


class SheetStatus(str, enum.Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class ExpenseReason(str, enum.Enum):
    PROJECTS = "PROJECTS"
    ADMINISTRATION = "ADMINISTRATION"
    BRANCHES = "BRANCHES"
    LOGISTICS = "LOGISTICS"
    MOVEMENT = "MOVEMENT"
    SERVICES = "SERVICES"
    WAREHOUSES = "WAREHOUSES"
    MISC = "MISC"
    COMMUNICATION = "COMMUNICATION"
    FOOD = "FOOD"
    ACCOMMODATION = "ACCOMMODATION"
    TECHNICAL = "TECHNICAL"
    OTHER = "OTHER"

    @property
    def label(self) -> str:
        return REASON_LABELS[self]

    @property
    def color(self) -> str:
        return REASON_COLORS[self]


REASON_LABELS = {
    ExpenseReason.PROJECTS: "مصاريف المشاريع",
    ExpenseReason.ADMINISTRATION: "مصاريف الإدارة وأقسامها",
    ExpenseReason.BRANCHES: "مصاريف الفروع",
    ExpenseReason.LOGISTICS: "مصاريف الخدمات اللوجستية",
    ExpenseReason.MOVEMENT: "مصاريف حركة الشركة",
    ExpenseReason.SERVICES: "مصاريف الخدمات",
    ExpenseReason.WAREHOUSES: "مصاريف المستودعات",
    ExpenseReason.MISC: "مصاريف متنوعة",
    ExpenseReason.COMMUNICATION: "مصاريف قسم الاتصال",
    ExpenseReason.FOOD: "مصاريف مأكل ومشرب",
    ExpenseReason.ACCOMMODATION: "مصاريف السكن",
    ExpenseReason.TECHNICAL: "مصاريف فنية",
    ExpenseReason.OTHER: "آخر",
}

REASON_COLORS = {
    ExpenseReason.PROJECTS: "blue",
    ExpenseReason.ADMINISTRATION: "purple",
    ExpenseReason.BRANCHES: "teal",
    ExpenseReason.LOGISTICS: "orange",
    ExpenseReason.MOVEMENT: "indigo",
    ExpenseReason.SERVICES: "cyan",
    ExpenseReason.WAREHOUSES: "amber",
    ExpenseReason.MISC: "slate",
    ExpenseReason.COMMUNICATION: "fuchsia",
    ExpenseReason.FOOD: "rose",
    ExpenseReason.ACCOMMODATION: "sky",
    ExpenseReason.TECHNICAL: "lime",
    ExpenseReason.OTHER: "zinc",
}

SHEET_STATUSES = [status.value for status in SheetStatus]

_REASONS_BY_LABEL = {label: reason for reason, label in REASON_LABELS.items()}


def normalize_reason(value):
    # older clients send the display label instead of the identifier
    if isinstance(value, str):
        value = value.strip()
        return _REASONS_BY_LABEL.get(value, value)
    return value
