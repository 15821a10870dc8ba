# custody/services/export_service.py

import csv
import io
from datetime import date

from custody.core.constants import ExpenseReason
from custody.services.ledger_service import line_total, remaining, total_spent

# Excel needs the BOM to open Arabic text as UTF-8
BOM = "\ufeff"

SUMMARY_HEADER = ["رقم العهدة", "مبلغ العهدة", "الإجمالي المنصرف", "المتبقي"]

LINES_HEADER = [
    "التاريخ",
    "الشركة",
    "الرقم الضريبي",
    "رقم الفاتورة",
    "البيان",
    "سبب الصرف",
    "المبلغ",
    "مصروفات بنكية",
    "الإجمالي",
    "اسم المشتري",
    "ملاحظات",
]


def _number(value):
    # 200.0 -> 200 so whole amounts read like the UI shows them
    value = round(float(value or 0), 2)
    return int(value) if value.is_integer() else value


def export_sheet_csv(sheet) -> str:
    buffer = io.StringIO()
    buffer.write(BOM)

    # text cells quoted (with "" escaping), numbers written bare
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")

    writer.writerow(SUMMARY_HEADER)
    writer.writerow(
        [
            sheet.custody_number,
            _number(sheet.custody_amount),
            _number(total_spent(sheet)),
            _number(remaining(sheet)),
        ]
    )
    writer.writerow([])
    writer.writerow(LINES_HEADER)

    for line in sheet.lines:
        writer.writerow(
            [
                str(line.date),
                line.company or "",
                line.tax_number or "",
                line.invoice_number or "",
                line.description or "",
                ExpenseReason(line.reason).label,
                _number(line.amount),
                _number(line.bank_fees),
                _number(line_total(line)),
                line.buyer_name or "",
                line.notes or "",
            ]
        )

    return buffer.getvalue()


def export_filename(sheet, today: date = None) -> str:
    today = today or date.today()
    return f"custody_sheet_{sheet.custody_number}_{today.isoformat()}.csv"


def write_sheet_csv(sheet, path) -> None:
    with open(path, "w", encoding="utf-8", newline="") as fh:
        fh.write(export_sheet_csv(sheet))
