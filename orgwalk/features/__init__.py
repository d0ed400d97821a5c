"""Application features."""
