"""Generic CRUD helpers shared by the services."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from intake.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class CRUDBase(Generic[ModelType]):
    """Insert and lookup operations for one model."""

    def __init__(self, model: type[ModelType]):
        self.model = model

    async def get_by(self, db: AsyncSession, **filters: Any) -> ModelType | None:
        """Get a single record matching all ``column=value`` filters."""
        query = select(self.model)
        for key, value in filters.items():
            query = query.where(getattr(self.model, key) == value)
        result = await db.execute(query)
        return result.scalar_one_or_none()  # type: ignore[no-any-return]

    async def create(self, db: AsyncSession, *, obj_in: dict[str, Any]) -> ModelType:
        """Insert a record and load server-generated columns."""
        db_obj = self.model(**obj_in)
        db.add(db_obj)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj
