"""Persisted notifications and their Redis push."""
