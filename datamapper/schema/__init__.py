"""Configuration, value and report models."""
