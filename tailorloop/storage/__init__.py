"""Persistence for the user profile and saved applications."""

from tailorloop.storage.cache import LocalCacheFile
from tailorloop.storage.models import Application, LocalCache, Profile
from tailorloop.storage.repository import StorageRepository
from tailorloop.storage.store import ProfileStore

__all__ = [
    "Application",
    "LocalCache",
    "LocalCacheFile",
    "Profile",
    "ProfileStore",
    "StorageRepository",
]
