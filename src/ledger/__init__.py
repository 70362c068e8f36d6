"""LockLedger: inventory costing and profit ledger for WL/DL/BGL trading."""
