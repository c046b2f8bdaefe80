"""Shared API adapters (middleware and exception handlers)."""
