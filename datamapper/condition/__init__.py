"""Rule guard evaluation."""
