"""Costing strategy selection: one policy per deployment."""

import os

from ledger.settings import ledger_setting

_strategy_instance = None


def get_costing_strategy():
    """Return the configured costing strategy (singleton).

    Uses lifetime-average costing by default. Set COSTING_STRATEGY=fifo to
    consume lots oldest first instead.
    """
    global _strategy_instance
    if _strategy_instance is None:
        strategy = os.environ.get("COSTING_STRATEGY", "lifetime-average")
        allow_unstocked = bool(ledger_setting("allow_sales_without_purchases"))
        if strategy == "lifetime-average":
            from ledger.costing.lifetime_average import LifetimeAverageCosting

            _strategy_instance = LifetimeAverageCosting(allow_unstocked_sales=allow_unstocked)
        elif strategy == "fifo":
            from ledger.costing.lot_consumption import LotConsumptionCosting

            _strategy_instance = LotConsumptionCosting(allow_unstocked_sales=allow_unstocked)
        else:
            raise ValueError(f"Unknown costing strategy: {strategy}")
    return _strategy_instance


def reset_costing_strategy():
    """Reset the strategy singleton (useful for testing)."""
    global _strategy_instance
    _strategy_instance = None
