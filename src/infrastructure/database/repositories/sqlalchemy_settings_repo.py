"""SQLAlchemy implementation of the settings store."""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import PersistenceError
from infrastructure.database.models import SettingModel


class SQLAlchemySettingsRepository:
    """SQLAlchemy implementation of ISettingsRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, key: str) -> str | None:
        values = await self.get_many([key])
        return values.get(key)

    async def get_many(self, keys: list[str]) -> dict[str, str]:
        if not keys:
            return {}

        stmt = select(SettingModel).where(SettingModel.key.in_(keys))
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to read settings: {e}") from e
        return {model.key: model.value for model in result.scalars()}

    async def set(self, key: str, value: str) -> None:
        try:
            model = await self._session.get(SettingModel, key)
            if model is None:
                self._session.add(SettingModel(key=key, value=value))
            else:
                model.value = value
                model.updated_at = datetime.now()
            await self._session.flush()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to write setting {key}: {e}") from e
