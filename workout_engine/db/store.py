"""Persistent-store collaborator: thin CRUD/query facade over an AsyncSession."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Sequence
from typing import Any, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from workout_engine.core.exceptions import StoreError
from workout_engine.db.base import Base

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=Base)


class WorkoutStore:
    """
    create / delete / save / fetch / fetch_count over the ORM.

    Every failure surfaces as StoreError. On a failed save the ORM transaction is rolled
    back so the session stays usable; callers re-read rows by id afterwards.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    def create(self, entity: M) -> M:
        self.db.add(entity)
        return entity

    async def delete(self, entity: Base) -> None:
        await self.db.delete(entity)

    async def save(self) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            logger.exception("Store save failed: %s", e)
            await self.db.rollback()
            raise StoreError(str(e)) from e

    async def get(self, model: type[M], entity_id: uuid.UUID) -> M | None:
        """Load one row by primary key, re-reading its column state from the database."""
        try:
            return await self.db.get(model, entity_id, populate_existing=True)
        except SQLAlchemyError as e:
            logger.exception("Store get %s(%s) failed: %s", model.__name__, entity_id, e)
            await self.db.rollback()
            raise StoreError(str(e)) from e

    async def fetch(
        self,
        model: type[M],
        *criteria: Any,
        order_by: Iterable[Any] = (),
        limit: int | None = None,
    ) -> Sequence[M]:
        stmt = select(model).where(*criteria)
        order_by = tuple(order_by)
        if order_by:
            stmt = stmt.order_by(*order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            logger.exception("Store fetch %s failed: %s", model.__name__, e)
            await self.db.rollback()
            raise StoreError(str(e)) from e
        return result.scalars().all()

    async def fetch_count(self, model: type[M], *criteria: Any) -> int:
        stmt = select(func.count()).select_from(model).where(*criteria)
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            logger.exception("Store count %s failed: %s", model.__name__, e)
            await self.db.rollback()
            raise StoreError(str(e)) from e
        return int(result.scalar() or 0)
