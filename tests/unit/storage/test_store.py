"""Tests for the profile store and local cache."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from tailorloop.storage.cache import LocalCacheFile
from tailorloop.storage.models import LocalCache, Profile
from tailorloop.storage.store import ProfileStore


@pytest.fixture
def cache(tmp_path):
    return LocalCacheFile(tmp_path / "cache" / "local_cache.json")


@pytest.fixture
def remote():
    mock = MagicMock()
    mock.get_profile = AsyncMock(return_value=None)
    mock.save_profile = AsyncMock()
    return mock


class TestLocalCacheFile:
    def test_missing_file_reads_empty(self, cache):
        assert cache.read() == LocalCache()

    def test_corrupt_file_reads_empty(self, cache):
        cache.path.parent.mkdir(parents=True)
        cache.path.write_text("{not json", encoding="utf-8")
        assert cache.read() == LocalCache()

    def test_profile_and_prompts_saved_independently(self, cache):
        cache.save_stage_prompts({"ats": "Strict."})
        cache.save_profile(Profile(instructions="Be brief."))

        data = cache.read()
        assert data.profile.instructions == "Be brief."
        assert data.stage_prompts == {"ats": "Strict."}


class TestProfileStore:
    @pytest.mark.asyncio
    async def test_remote_profile_wins(self, remote, cache):
        cache.save_profile(Profile(instructions="local"))
        remote.get_profile.return_value = Profile(instructions="remote")

        profile = await ProfileStore(repository=remote, cache=cache).load()

        assert profile.instructions == "remote"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("stored", [None, Profile(), Profile(instructions="  ")])
    async def test_missing_or_empty_remote_falls_back_to_cache(self, remote, cache, stored):
        cache.save_profile(Profile(instructions="local"))
        remote.get_profile.return_value = stored

        profile = await ProfileStore(repository=remote, cache=cache).load()

        assert profile.instructions == "local"

    @pytest.mark.asyncio
    async def test_save_writes_both(self, remote, cache):
        profile = Profile(resume_template="tpl")

        await ProfileStore(repository=remote, cache=cache).save(profile)

        remote.save_profile.assert_awaited_once_with(profile)
        assert cache.read().profile == profile

    def test_stage_prompts_round_trip_through_cache(self, remote, cache):
        store = ProfileStore(repository=remote, cache=cache)
        store.save_stage_prompts({"behavioral": "Focus on teamwork."})
        assert store.load_stage_prompts() == {"behavioral": "Focus on teamwork."}
