"""Structured event writers for simulation runs."""
