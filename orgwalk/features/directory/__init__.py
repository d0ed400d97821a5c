"""Directory feature: people lookup, search and org traversal."""
