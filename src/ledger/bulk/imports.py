"""CSV imports. Every row goes through the same gateway calls as a single write.

Currency values other than WL, DL and BGL are replaced with WL rather than
rejected. A replacement is logged and counted only for rows that import.
"""

import csv
import io
from dataclasses import dataclass, field

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from ledger import gateway
from ledger.category.category import Category
from ledger.domain import logger
from ledger.item.management import find_item_by_name
from ledger.shared.currency import coerce_currency
from ledger.shared.numbers import require_non_negative, require_quantity
from ledger.shared.timestamps import as_utc


@dataclass
class RowError:
    row: int
    message: str


@dataclass
class ImportReport:
    imported: int = 0
    failed: int = 0
    coerced_currencies: int = 0
    errors: list[RowError] = field(default_factory=list)


def _describe(exc):
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        return "; ".join(f"{key}: {', '.join(map(str, value))}" for key, value in messages.items())
    return str(exc)


def _rows(text):
    # Row numbers count the header as line 1
    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
    for number, row in enumerate(reader, start=2):
        yield number, {(k or "").strip(): (v or "").strip() for k, v in row.items()}


def _count_coercion(owner_id, row_number, value, coerced, report):
    if coerced:
        report.coerced_currencies += 1
        logger.warning("csv_currency_coerced", owner_id=str(owner_id), row=row_number, given=value)


def _item_for_lot_row(owner_id, row):
    item = find_item_by_name(owner_id, row.get("item_name"))
    if item is not None:
        return str(item.id)
    category = current_domain.repository_for(Category).find_by_name(owner_id, row.get("category"))
    return gateway.create_item(owner_id, row.get("item_name"), category_id=category.id if category else None)


def _timestamp(value, field):
    if not value:
        return None
    try:
        return as_utc(value)
    except ValueError:
        raise ValidationError({field: [f'"{value}" is not an ISO date']}) from None


def _lot_values(row):
    """Check a lot row completely before anything is written for it."""
    currency, coerced = coerce_currency(row.get("currency"))
    values = {
        "quantity": require_quantity(row.get("quantity")),
        "unit_cost": require_non_negative(row.get("unit_cost") or "0", "unit_cost"),
        "currency_unit": currency,
        "bought_at": _timestamp(row.get("bought_at"), "bought_at"),
        "notes": row.get("notes") or None,
    }
    return values, coerced


def import_lots_csv(owner_id, text) -> ImportReport:
    """Create a lot per row, creating missing items on the way.

    A row is validated in full before its item is created, so a rejected row
    leaves nothing behind.
    """
    report = ImportReport()
    for number, row in _rows(text):
        try:
            values, coerced = _lot_values(row)
            item_id = _item_for_lot_row(owner_id, row)
            gateway.add_lot(owner_id, item_id, **values)
        except (ValidationError, ObjectNotFoundError, ValueError) as exc:
            report.failed += 1
            report.errors.append(RowError(row=number, message=_describe(exc)))
            continue
        report.imported += 1
        _count_coercion(owner_id, number, row.get("currency"), coerced, report)

    logger.info("csv_lots_imported", owner_id=str(owner_id), imported=report.imported, failed=report.failed)
    return report


def import_sales_csv(owner_id, text) -> ImportReport:
    """Record a sale per row. Rows naming an unknown item fail."""
    report = ImportReport()
    for number, row in _rows(text):
        currency, coerced = coerce_currency(row.get("currency"))
        try:
            item = find_item_by_name(owner_id, row.get("item_name"))
            if item is None:
                raise ValidationError({"item_name": [f'Unknown item "{row.get("item_name")}"']})
            gateway.record_sale(
                owner_id,
                str(item.id),
                quantity=row.get("quantity_sold"),
                amount_gained=row.get("sale_price"),
                currency_unit=currency,
                sold_at=_timestamp(row.get("sold_at"), "sold_at"),
                notes=row.get("notes") or None,
            )
        except (ValidationError, ObjectNotFoundError, ValueError) as exc:
            report.failed += 1
            report.errors.append(RowError(row=number, message=_describe(exc)))
            continue
        report.imported += 1
        _count_coercion(owner_id, number, row.get("currency"), coerced, report)

    logger.info("csv_sales_imported", owner_id=str(owner_id), imported=report.imported, failed=report.failed)
    return report
