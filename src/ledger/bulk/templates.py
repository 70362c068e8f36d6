"""CSV column layouts and downloadable templates."""

import csv
import io

from ledger.shared.timestamps import utc_now

LOT_COLUMNS = ["item_name", "category", "quantity", "unit_cost", "currency", "notes", "bought_at"]
SALE_COLUMNS = ["item_name", "quantity_sold", "sale_price", "currency", "notes", "sold_at"]


def write_csv(columns, rows) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=columns, lineterminator="\n")
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue()


def iso_date(value) -> str:
    return value.date().isoformat() if value else ""


def lots_csv_template() -> str:
    sample = {
        "item_name": "Example Item",
        "category": "Other",
        "quantity": "10",
        "unit_cost": "5",
        "currency": "WL",
        "notes": "Optional notes",
        "bought_at": iso_date(utc_now()),
    }
    return write_csv(LOT_COLUMNS, [sample])


def sales_csv_template() -> str:
    sample = {
        "item_name": "Example Item",
        "quantity_sold": "5",
        "sale_price": "50",
        "currency": "WL",
        "notes": "Optional notes",
        "sold_at": iso_date(utc_now()),
    }
    return write_csv(SALE_COLUMNS, [sample])
