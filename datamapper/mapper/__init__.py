"""Mapping engine."""
