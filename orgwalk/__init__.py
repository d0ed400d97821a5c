"""Client and traversal engine for an organizational directory service."""
