"""
String key/value storage over the options table
"""

from typing import Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import select, insert, update, delete
from models.option import Option
from core.exceptions import StorageError
import logging

logger = logging.getLogger(__name__)


class OptionStore:
    """
    Async key/value store with a per-instance read cache.

    Writes go straight to the database and commit immediately, so two keys
    written one after the other are durable independently of each other.
    Readers that must not see a stale value pass bypass_cache=True.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self._cache: Dict[str, Optional[str]] = {}

    async def get(self, name: str, bypass_cache: bool = False) -> Optional[str]:
        """Return the option value, or None when the option does not exist"""
        if not bypass_cache and name in self._cache:
            return self._cache[name]

        try:
            result = await self.db.execute(
                select(Option.option_value).where(Option.option_name == name)
            )
            value = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StorageError(
                "Failed to read option",
                context={"operation": "get", "key": name},
                original_exception=e
            )

        self._cache[name] = value
        return value

    async def set(self, name: str, value: str):
        """Create or overwrite an option"""
        try:
            result = await self.db.execute(
                update(Option)
                .where(Option.option_name == name)
                .values(option_value=value)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                await self.db.execute(
                    insert(Option).values(option_name=name, option_value=value)
                )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StorageError(
                "Failed to write option",
                context={"operation": "set", "key": name},
                original_exception=e
            )

        self._cache[name] = value

    async def delete(self, name: str):
        try:
            await self.db.execute(
                delete(Option)
                .where(Option.option_name == name)
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StorageError(
                "Failed to delete option",
                context={"operation": "delete", "key": name},
                original_exception=e
            )

        self._cache.pop(name, None)

    async def list_by_prefix(self, prefix: str) -> List[str]:
        """Return values of all options whose name starts with prefix, ordered by name"""
        try:
            result = await self.db.execute(
                select(Option.option_value)
                .where(Option.option_name.startswith(prefix, autoescape=True))
                .order_by(Option.option_name)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StorageError(
                "Failed to list options",
                context={"operation": "list", "key": prefix},
                original_exception=e
            )
