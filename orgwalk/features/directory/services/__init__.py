"""Directory services."""
