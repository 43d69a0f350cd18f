"""Tests for the StorageRepository database layer."""

from datetime import datetime, timedelta

import pytest

from tailorloop.storage.models import Application, Profile
from tailorloop.storage.repository import StorageRepository


@pytest.fixture
async def repo(tmp_path):
    repository = StorageRepository(tmp_path / "nested" / "store.db")
    await repository.initialize()
    yield repository
    await repository.close()


class TestInitialization:
    @pytest.mark.asyncio
    async def test_creates_database_file(self, tmp_path):
        db_path = tmp_path / "store.db"
        repository = StorageRepository(db_path)
        await repository.initialize()
        assert db_path.exists()
        await repository.close()

    @pytest.mark.asyncio
    async def test_initialize_is_repeatable(self, tmp_path):
        db_path = tmp_path / "store.db"
        for _ in range(2):
            repository = StorageRepository(db_path)
            await repository.initialize()
            await repository.close()

    @pytest.mark.asyncio
    async def test_applications_schema(self, repo):
        async with repo._get_connection() as conn:
            cursor = await conn.execute("PRAGMA table_info(applications)")
            columns = [col[1] for col in await cursor.fetchall()]

        for name in ("company", "status", "resume_latex", "ats_score", "created_at"):
            assert name in columns


class TestProfile:
    @pytest.mark.asyncio
    async def test_missing_profile(self, repo):
        assert await repo.get_profile() is None

    @pytest.mark.asyncio
    async def test_save_and_overwrite(self, repo):
        await repo.save_profile(Profile(resume_template="v1", instructions="i"))
        await repo.save_profile(Profile(resume_template="v2"))

        profile = await repo.get_profile()
        assert profile.resume_template == "v2"
        assert profile.instructions == ""

        async with repo._get_connection() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM profile")
            (count,) = await cursor.fetchone()
        assert count == 1


class TestApplications:
    @pytest.mark.asyncio
    async def test_create_assigns_id_and_defaults(self, repo):
        saved = await repo.create_application(Application(company="Acme"))
        assert saved.id is not None
        assert saved.status == "Applied"

        loaded = await repo.get_application(saved.id)
        assert loaded.company == "Acme"
        assert loaded.ats_score is None

    @pytest.mark.asyncio
    async def test_list_newest_first(self, repo):
        now = datetime.now()
        await repo.create_application(Application(company="Old", created_at=now - timedelta(days=1)))
        await repo.create_application(Application(company="New", created_at=now))

        companies = [a.company for a in await repo.list_applications()]
        assert companies == ["New", "Old"]
        assert len(await repo.list_applications(limit=1)) == 1

    @pytest.mark.asyncio
    async def test_update(self, repo):
        saved = await repo.create_application(Application(company="Acme"))

        updated = await repo.update_application(saved.id, status="Interview", ats_score=77.0)

        assert updated.status == "Interview"
        assert updated.ats_score == 77.0

    @pytest.mark.asyncio
    async def test_update_unknown_field(self, repo):
        saved = await repo.create_application(Application(company="Acme"))
        with pytest.raises(ValueError):
            await repo.update_application(saved.id, id=5)

    @pytest.mark.asyncio
    async def test_update_missing(self, repo):
        assert await repo.update_application(999, status="Rejected") is None

    @pytest.mark.asyncio
    async def test_delete(self, repo):
        saved = await repo.create_application(Application(company="Acme"))
        assert await repo.delete_application(saved.id) is True
        assert await repo.delete_application(saved.id) is False
        assert await repo.get_application(saved.id) is None
