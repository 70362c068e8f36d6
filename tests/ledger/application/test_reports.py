"""Application tests for low-stock and performance reports."""

from decimal import Decimal

from ledger import gateway
from ledger.reports.low_stock import low_stock_items
from ledger.reports.performance import CurrencyAmount, category_performance, item_performance


class TestLowStock:
    def test_global_and_item_thresholds(self, owner_id):
        low = gateway.create_item(owner_id, "Low")
        plenty = gateway.create_item(owner_id, "Plenty")
        custom = gateway.create_item(owner_id, "Custom", low_stock_threshold=20)
        gone = gateway.create_item(owner_id, "Gone")
        gateway.add_lot(owner_id, low, 3, "1", "WL")
        gateway.add_lot(owner_id, plenty, 30, "1", "WL")
        gateway.add_lot(owner_id, custom, 15, "1", "WL")
        gateway.add_lot(owner_id, gone, 2, "1", "WL")
        gateway.record_sale(owner_id, gone, 2, "5", "WL")

        rows = low_stock_items(owner_id)

        assert [(r.item_name, r.remaining_qty, r.threshold) for r in rows] == [("Low", 3, 5), ("Custom", 15, 20)]
        assert rows[0].category_name == "Other"

    def test_threshold_from_settings(self, owner_id, custom_settings):
        custom_settings(low_stock_threshold=50)
        item_id = gateway.create_item(owner_id, "Plenty")
        gateway.add_lot(owner_id, item_id, 30, "1", "WL")
        assert [r.item_name for r in low_stock_items(owner_id)] == ["Plenty"]



class TestPerformance:
    def test_item_figures_are_split_by_sale_currency(self, owner_id):
        item_id = gateway.create_item(owner_id, "Magic Egg")
        gateway.add_lot(owner_id, item_id, 10, "2", "WL")
        gateway.record_sale(owner_id, item_id, 4, "20", "WL")
        gateway.record_sale(owner_id, item_id, 1, "7", "DL")

        (row,) = item_performance(owner_id)
        assert [f.currency_unit for f in row.figures] == ["WL", "DL"]

        wl = row.figures_for("WL")
        assert wl.revenue == Decimal("20")
        assert wl.cogs == Decimal("8")
        assert wl.profit == Decimal("12")
        assert wl.margin_pct == Decimal("60")
        assert wl.units_sold == 4

        dl = row.figures_for("DL")
        assert dl.revenue == Decimal("7")
        assert dl.cogs == 0
        assert dl.profit == 0
        assert dl.margin_pct == 0
        assert dl.undefined_profit_sales == 1

        assert row.undefined_profit_sales == 1
        assert row.units_sold == 5
        assert row.remaining_qty == 5
        assert row.remaining_value == Decimal("10")
        assert row.value_currency == "WL"

    def test_items_are_listed_by_name(self, owner_id):
        for name in ("Zebra", "apple", "Mango"):
            gateway.create_item(owner_id, name)
        assert [r.item_name for r in item_performance(owner_id)] == ["apple", "Mango", "Zebra"]

    def test_stock_bought_in_several_currencies_is_not_valued(self, owner_id):
        item_id = gateway.create_item(owner_id, "Magic Egg")
        gateway.add_lot(owner_id, item_id, 5, "1", "WL")
        gateway.add_lot(owner_id, item_id, 5, "1", "BGL")

        (row,) = item_performance(owner_id)
        assert row.remaining_qty == 10
        assert row.remaining_value is None
        assert row.value_currency is None

        (other,) = category_performance(owner_id)
        assert other.remaining_value == ()
        assert other.unvalued_items == 1

    def test_category_keeps_currencies_apart(self, owner_id):
        worlds = gateway.create_item(owner_id, "World Seed")
        gems = gateway.create_item(owner_id, "Gem Seed")
        gateway.add_lot(owner_id, worlds, 10, "1", "WL")
        gateway.add_lot(owner_id, gems, 10, "1", "BGL")
        gateway.record_sale(owner_id, worlds, 1, "100", "WL")
        gateway.record_sale(owner_id, gems, 1, "1", "BGL")

        (other,) = category_performance(owner_id)

        assert [f.currency_unit for f in other.figures] == ["WL", "BGL"]
        assert other.figures_for("WL").revenue == Decimal("100")
        assert other.figures_for("WL").profit == Decimal("99")
        assert other.figures_for("WL").margin_pct == Decimal("99")
        assert other.figures_for("BGL").revenue == Decimal("1")
        assert other.figures_for("BGL").profit == 0
        assert other.figures_for("BGL").margin_pct == 0
        assert other.remaining_value == (CurrencyAmount("WL", Decimal("9")), CurrencyAmount("BGL", Decimal("9")))

    def test_grouped_by_current_category(self, owner_id):
        eggs = gateway.create_category(owner_id, "Eggs")
        first = gateway.create_item(owner_id, "Magic Egg", category_id=eggs)
        second = gateway.create_item(owner_id, "Golden Egg", category_id=eggs)
        gateway.create_item(owner_id, "Dirt")
        gateway.add_lot(owner_id, first, 10, "1", "WL")
        gateway.add_lot(owner_id, second, 10, "1", "WL")
        gateway.record_sale(owner_id, first, 5, "10", "WL")
        gateway.record_sale(owner_id, second, 5, "20", "WL")

        rows = {r.category_name: r for r in category_performance(owner_id)}
        assert rows["Eggs"].item_count == 2
        assert rows["Eggs"].figures_for("WL").revenue == Decimal("30")
        assert rows["Eggs"].figures_for("WL").profit == Decimal("20")
        assert rows["Eggs"].units_sold == 10
        assert rows["Other"].item_count == 1
        assert rows["Other"].figures == ()
