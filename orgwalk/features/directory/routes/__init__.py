"""Directory route handlers."""
