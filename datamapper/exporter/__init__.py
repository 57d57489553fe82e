"""Payload export."""
