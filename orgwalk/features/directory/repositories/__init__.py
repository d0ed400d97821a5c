"""Directory repositories."""

from .http_directory_repository import HttpDirectoryRepository
from .protocols import DirectoryRepository

__all__ = ["DirectoryRepository", "HttpDirectoryRepository"]
