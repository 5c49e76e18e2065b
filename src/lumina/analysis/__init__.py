"""Source analysis."""
