"""Utility services wrapping external systems."""
