"""Configuration parsing and document loading."""
