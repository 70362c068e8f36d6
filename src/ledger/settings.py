"""Ledger policy settings, read from the ``[custom]`` section of domain.toml."""

from protean.utils.globals import current_domain

DEFAULTS = {
    "allow_sales_without_purchases": True,
    "low_stock_threshold": 5,
}


def ledger_setting(name, default=None):
    """Return a ``[custom]`` setting for the active domain, or its default."""
    custom = current_domain.config.get("custom") or {}
    if name in custom:
        return custom[name]
    if default is not None:
        return default
    return DEFAULTS.get(name)
