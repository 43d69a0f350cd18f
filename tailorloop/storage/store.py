"""Profile store synchronizing the SQLite record and the local cache."""

from __future__ import annotations

import logging
from typing import Protocol

from tailorloop.config.settings import Settings, get_settings
from tailorloop.storage.cache import LocalCacheFile
from tailorloop.storage.models import LocalCache, Profile
from tailorloop.storage.repository import StorageRepository

logger = logging.getLogger(__name__)


class RemoteProfileBackend(Protocol):
    async def get_profile(self) -> Profile | None: ...

    async def save_profile(self, profile: Profile) -> None: ...


class LocalProfileBackend(Protocol):
    def read(self) -> LocalCache: ...

    def save_profile(self, profile: Profile) -> None: ...

    def save_stage_prompts(self, stage_prompts: dict[str, str]) -> None: ...


class ProfileStore:
    """Load and save the profile.

    ``load`` prefers the remote record when it exists and is non-empty,
    otherwise the local cache. ``save`` writes both.
    """

    def __init__(
        self,
        repository: RemoteProfileBackend | None = None,
        cache: LocalProfileBackend | None = None,
        settings: Settings | None = None,
    ):
        if repository is None or cache is None:
            settings = settings or get_settings()
        self.repository = repository or StorageRepository(settings.db_path)
        self.cache = cache or LocalCacheFile(settings.cache_path)

    async def load(self) -> Profile:
        remote = await self.repository.get_profile()
        if remote is not None and not remote.is_empty:
            return remote
        logger.debug("No stored profile record; using local cache")
        return self.cache.read().profile

    async def save(self, profile: Profile) -> None:
        self.cache.save_profile(profile)
        await self.repository.save_profile(profile)
        logger.info("Profile saved")

    def load_stage_prompts(self) -> dict[str, str]:
        """Stage prompt overrides kept in the local cache."""
        return dict(self.cache.read().stage_prompts)

    def save_stage_prompts(self, stage_prompts: dict[str, str]) -> None:
        self.cache.save_stage_prompts(stage_prompts)
