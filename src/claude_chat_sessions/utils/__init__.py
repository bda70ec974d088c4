"""Helpers shared across the engine."""
