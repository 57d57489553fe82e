"""Value transforms."""
