"""Inventory, reconciliation and execution core."""
