import pytest
from unittest.mock import AsyncMock
from sqlalchemy.exc import OperationalError
from core.exceptions import StorageError
from imports.option_store import OptionStore


class TestOptionStore:

    @pytest.mark.asyncio
    async def test_missing_option_is_none(self, option_store):
        assert await option_store.get("ImportStatus.importStatus_1") is None

    @pytest.mark.asyncio
    async def test_set_then_get(self, option_store):
        await option_store.set("ImportStatus.importStatus_1", '{"siteId": 1}')

        assert await option_store.get("ImportStatus.importStatus_1") == '{"siteId": 1}'

    @pytest.mark.asyncio
    async def test_set_overwrites(self, option_store):
        await option_store.set("key", "first")
        await option_store.set("key", "second")

        assert await option_store.get("key", bypass_cache=True) == "second"

    @pytest.mark.asyncio
    async def test_bypass_cache_sees_other_writers(self, db_session, option_store):
        await option_store.set("key", "first")

        other_writer = OptionStore(db_session)
        await other_writer.set("key", "second")

        assert await option_store.get("key") == "first"
        assert await option_store.get("key", bypass_cache=True) == "second"

    @pytest.mark.asyncio
    async def test_delete(self, option_store):
        await option_store.set("key", "value")

        await option_store.delete("key")

        assert await option_store.get("key") is None
        assert await option_store.get("key", bypass_cache=True) is None

    @pytest.mark.asyncio
    async def test_delete_missing_is_noop(self, option_store):
        await option_store.delete("missing")

    @pytest.mark.asyncio
    async def test_list_by_prefix(self, option_store):
        await option_store.set("ImportStatus.importStatus_2", "b")
        await option_store.set("ImportStatus.importStatus_1", "a")
        await option_store.set("ImportStatus.importedDateRange_1", "2024-01-01,")

        values = await option_store.list_by_prefix("ImportStatus.importStatus_")

        assert values == ["a", "b"]

    @pytest.mark.asyncio
    async def test_list_by_prefix_escapes_wildcards(self, option_store):
        await option_store.set("prefix_1", "match")
        await option_store.set("prefixX1", "no match")

        assert await option_store.list_by_prefix("prefix_") == ["match"]

    @pytest.mark.asyncio
    async def test_read_failure_raises_storage_error(self):
        session = AsyncMock()
        session.execute.side_effect = OperationalError("SELECT", {}, Exception("db down"))

        with pytest.raises(StorageError) as exc_info:
            await OptionStore(session).get("key")

        assert exc_info.value.context == {"operation": "get", "key": "key"}

    @pytest.mark.asyncio
    async def test_write_failure_rolls_back(self):
        session = AsyncMock()
        session.execute.side_effect = OperationalError("UPDATE", {}, Exception("db down"))

        with pytest.raises(StorageError):
            await OptionStore(session).set("key", "value")

        session.rollback.assert_awaited_once()
