"""Error classification."""
