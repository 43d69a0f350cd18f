"""Local JSON cache mirroring the user-editable profile fields."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from tailorloop.storage.models import LocalCache, Profile

logger = logging.getLogger(__name__)


class LocalCacheFile:
    """Read and write the local cache file."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def read(self) -> LocalCache:
        """Load the cache; a missing or unreadable file yields an empty cache."""
        if not self.path.exists():
            return LocalCache()
        try:
            return LocalCache.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable local cache {self.path}: {e}")
            return LocalCache()

    def write(self, cache: LocalCache) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(cache.model_dump_json(indent=2), encoding="utf-8")

    def save_profile(self, profile: Profile) -> None:
        cache = self.read()
        self.write(cache.model_copy(update={"profile": profile}))

    def save_stage_prompts(self, stage_prompts: dict[str, str]) -> None:
        cache = self.read()
        self.write(cache.model_copy(update={"stage_prompts": dict(stage_prompts)}))
