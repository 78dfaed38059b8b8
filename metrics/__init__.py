"""Equity accumulation and percentage conversion."""
