from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence, Type

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from services.database import Base, get_db
from models.employee import Employee
from models.manager import Manager
from utils.exceptions import EntityNotFound

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Kind -> mapped class
# -----------------------------------------------------------------------------
MODELS: Dict[str, Type[Base]] = {
    "employee": Employee,
    "manager": Manager,
}


def model_for(kind: str) -> Type[Base]:
    try:
        return MODELS[kind]
    except KeyError:
        raise KeyError(f"Unknown entity kind {kind!r}") from None


# -----------------------------------------------------------------------------
# Entity store
# -----------------------------------------------------------------------------
class EntityStore:
    """
    Read-mostly access to employees and managers for one request.
    Lookups that find nothing raise EntityNotFound; handlers never assemble
    a missing entity.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def find_by_id(self, kind: str, entity_id: Any, *, include: Sequence[str] = ()):
        """`include` names relationships to load up front, e.g. a manager's employees."""
        model = model_for(kind)
        stmt = select(model).where(model.id == entity_id)
        for name in include:
            stmt = stmt.options(selectinload(getattr(model, name)))
        result = await self.db.execute(stmt)
        entity = result.unique().scalar_one_or_none()
        if entity is None:
            raise EntityNotFound(kind, entity_id)
        return entity

    async def find_all(self, kind: str) -> List[Any]:
        model = model_for(kind)
        result = await self.db.execute(select(model).order_by(model.id))
        return list(result.unique().scalars().all())

    async def find_related(self, kind: str, foreign_key: str, entity_id: Any) -> List[Any]:
        model = model_for(kind)
        column = getattr(model, foreign_key)
        result = await self.db.execute(
            select(model).where(column == entity_id).order_by(model.id)
        )
        return list(result.unique().scalars().all())

    async def find_manager_of(self, employee_id: int) -> Manager:
        employee = await self.find_by_id("employee", employee_id)
        if employee.manager is None:
            raise EntityNotFound("manager", None)
        return employee.manager

    async def add(self, entity: Base):
        self.db.add(entity)
        await self.db.commit()
        kind = next(k for k, m in MODELS.items() if isinstance(entity, m))
        logger.info("Created %s %s", kind, entity.id)
        # Reload so eager relationships are populated for assembly
        self.db.expunge(entity)
        return await self.find_by_id(kind, entity.id)


async def get_store(db: AsyncSession = Depends(get_db)) -> EntityStore:
    return EntityStore(db)
