"""Database and remote service clients."""
