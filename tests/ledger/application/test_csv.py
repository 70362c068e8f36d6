"""Application tests for CSV import, export and templates."""

import csv
import io

from ledger import gateway
from ledger.bulk.exports import export_lots_csv, export_sales_csv
from ledger.bulk.imports import import_lots_csv, import_sales_csv
from ledger.bulk.templates import LOT_COLUMNS, SALE_COLUMNS, lots_csv_template, sales_csv_template
from ledger.item.management import find_item_by_name
from ledger.lot.queries import lots_for_item
from ledger.sale.queries import list_sales


def _rows(text):
    return list(csv.DictReader(io.StringIO(text)))


LOTS_CSV = """item_name,category,quantity,unit_cost,currency,notes,bought_at
Magic Egg,Eggs,10,1.5,WL,first,2024-01-01
Magic Egg,Eggs,5,2,gems,,2024-02-01
Dirt,Unknown Category,3,0.1,DL,,
Broken,Eggs,2.5,1,WL,,
"""


class TestTemplates:
    def test_headers(self):
        assert list(_rows(lots_csv_template())[0]) == LOT_COLUMNS
        assert list(_rows(sales_csv_template())[0]) == SALE_COLUMNS


class TestImportLots:
    def test_rows_go_through_lot_creation(self, owner_id):
        eggs = gateway.create_category(owner_id, "eggs")

        report = import_lots_csv(owner_id, LOTS_CSV)

        assert report.imported == 3
        assert report.failed == 1
        assert report.coerced_currencies == 1
        assert report.errors[0].row == 5
        egg = find_item_by_name(owner_id, "magic egg")
        assert egg.default_category_id == eggs
        lots = lots_for_item(owner_id, egg.id)
        assert [lot.currency_unit for lot in lots] == ["WL", "WL"]
        assert find_item_by_name(owner_id, "Dirt") is not None

    def test_rejected_row_creates_no_item(self, owner_id):
        text = (
            "item_name,category,quantity,unit_cost,currency,notes,bought_at\n"
            "Ghost,,3,-1,WL,,\n"
            "Phantom,,3,1,WL,,01/02/2024\n"
            "Shade,,3,abc,WL,,\n"
        )

        report = import_lots_csv(owner_id, text)

        assert report.imported == 0
        assert report.failed == 3
        assert [e.row for e in report.errors] == [2, 3, 4]
        assert "bought_at" in report.errors[1].message
        for name in ("Ghost", "Phantom", "Shade"):
            assert find_item_by_name(owner_id, name) is None

    def test_currency_coercion_counts_imported_rows_only(self, owner_id):
        text = (
            "item_name,category,quantity,unit_cost,currency,notes,bought_at\n"
            "Magic Egg,,2.5,1,gems,,\n"
            "Magic Egg,,2,1,gems,,\n"
        )

        report = import_lots_csv(owner_id, text)

        assert report.imported == 1
        assert report.coerced_currencies == 1


class TestImportSales:
    def test_unknown_item_fails_row(self, owner_id):
        item_id = gateway.create_item(owner_id, "Magic Egg")
        gateway.add_lot(owner_id, item_id, 10, "1", "WL")
        text = (
            "item_name,quantity_sold,sale_price,currency,notes,sold_at\n"
            "magic egg,2,5,WL,,2024-03-01\n"
            "Nothing,1,1,WL,,\n"
            "Magic Egg,50,5,WL,,\n"
            "Magic Egg,1,3,xyz,,\n"
        )

        report = import_sales_csv(owner_id, text)

        assert report.imported == 2
        assert report.failed == 2
        assert report.coerced_currencies == 1
        assert [e.row for e in report.errors] == [3, 4]
        assert len(list_sales(owner_id)) == 2

    def test_currency_coercion_counts_imported_rows_only(self, owner_id):
        item_id = gateway.create_item(owner_id, "Magic Egg")
        gateway.add_lot(owner_id, item_id, 3, "1", "WL")
        text = (
            "item_name,quantity_sold,sale_price,currency,notes,sold_at\n"
            "Magic Egg,50,5,xyz,,\n"
            "Magic Egg,1,5,xyz,,not-a-date\n"
            "Magic Egg,1,5,xyz,,\n"
        )

        report = import_sales_csv(owner_id, text)

        assert report.imported == 1
        assert report.failed == 2
        assert report.coerced_currencies == 1
        assert [s.currency_unit for s in list_sales(owner_id)] == ["WL"]


class TestExports:
    def test_round_trip_shape(self, owner_id):
        item_id = gateway.create_item(owner_id, "Magic Egg")
        gateway.add_lot(owner_id, item_id, 10, "1.5", "WL", bought_at="2024-01-02T10:00:00", notes="n")
        gateway.record_sale(owner_id, item_id, 2, "5", "WL", sold_at="2024-01-03")

        (lot_row,) = _rows(export_lots_csv(owner_id))
        assert lot_row == {
            "item_name": "Magic Egg",
            "category": "Other",
            "quantity": "10",
            "unit_cost": "1.5",
            "currency": "WL",
            "notes": "n",
            "bought_at": "2024-01-02",
        }
        (sale_row,) = _rows(export_sales_csv(owner_id))
        assert sale_row["item_name"] == "Magic Egg"
        assert sale_row["sale_price"] == "5"
        assert sale_row["sold_at"] == "2024-01-03"
