"""Repository protocols for the directory feature."""

from .directory_repository import DirectoryRepository

__all__ = ["DirectoryRepository"]
