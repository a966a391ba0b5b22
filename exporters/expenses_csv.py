import csv
import io

from utils.formatting import format_us_date

HEADERS = ["Date", "Description", "Category", "Payer", "Amount", "Split With"]


def generate_expenses_csv(trip: dict) -> str:
    """Expenses as CSV, with a closing total row when there is anything to total."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(HEADERS)

    expenses = trip.get("expenses") or []
    for expense in expenses:
        split_with = expense.get("splitWith") or expense.get("split_with") or []
        if isinstance(split_with, list):
            split_with = ", ".join(split_with)
        writer.writerow([
            format_us_date(expense.get("date")),
            expense.get("description") or "",
            expense.get("category") or "",
            expense.get("payer") or "",
            f"{float(expense.get('amount') or 0):.2f}",
            split_with,
        ])

    if not expenses:
        return buffer.getvalue().rstrip("\n")

    total = sum(float(e.get("amount") or 0) for e in expenses)
    buffer.write("\n")
    buffer.write(f"Total,,,,${total:.2f},")
    return buffer.getvalue()
