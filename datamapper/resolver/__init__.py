"""Path resolution over parsed documents."""
