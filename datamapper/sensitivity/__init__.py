"""Sensitive field classification."""
