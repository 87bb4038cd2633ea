"""
Thin query/mutation client over the feed tables.

Every feature talks to the database through this class: filtered and ordered
selects, single-row inserts, updates and deletes. There are no server-side
joins; callers fetch related rows separately and join them in Python.
"""
from typing import Any, Dict, Iterable, List, Optional, Type
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy import select, update, func, asc, desc
import logging

from socialfeed.db.base import Base
from socialfeed.models.post import Post
from socialfeed.models.like import PostLike
from socialfeed.models.comment import Comment
from socialfeed.utils.exceptions import DataAccessError, DuplicateRowError

logger = logging.getLogger(__name__)


class DataClient:
    def __init__(self, db: AsyncSession):
        self.db = db

    def _conditions(self, model: Type[Base], filters: Optional[Dict[str, Any]]) -> list:
        return [getattr(model, column) == value for column, value in (filters or {}).items()]

    async def _fail(self, action: str, model: Type[Base], error: SQLAlchemyError):
        await self.db.rollback()
        logger.error(f"Error during {action} on {model.__tablename__}: {error}")
        if isinstance(error, IntegrityError):
            raise DuplicateRowError(f"{action} on {model.__tablename__} violated a constraint") from error
        raise DataAccessError(f"{action} on {model.__tablename__} failed") from error

    async def select(
        self,
        model: Type[Base],
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        ascending: bool = True
    ) -> List[Any]:
        """Select rows matching equality filters, optionally ordered by one column"""
        stmt = select(model).where(*self._conditions(model, filters))
        if order_by:
            column = getattr(model, order_by)
            stmt = stmt.order_by(asc(column) if ascending else desc(column))

        try:
            result = await self.db.execute(stmt.execution_options(populate_existing=True))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            await self._fail("select", model, e)

    async def select_in(self, model: Type[Base], column: str, values: Iterable[Any]) -> List[Any]:
        """Select rows whose column is one of values"""
        values = list(values)
        if not values:
            return []

        stmt = select(model).where(getattr(model, column).in_(values))
        try:
            result = await self.db.execute(stmt.execution_options(populate_existing=True))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            await self._fail("select", model, e)

    async def get(self, model: Type[Base], **keys) -> Optional[Any]:
        stmt = select(model).where(*self._conditions(model, keys))
        try:
            result = await self.db.execute(stmt.execution_options(populate_existing=True))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            await self._fail("select", model, e)

    async def count(self, model: Type[Base], **filters) -> int:
        stmt = select(func.count()).select_from(model).where(*self._conditions(model, filters))
        try:
            result = await self.db.execute(stmt)
            return result.scalar_one()
        except SQLAlchemyError as e:
            await self._fail("count", model, e)

    async def insert(self, model: Type[Base], commit: bool = True, **values) -> Any:
        row = model(**values)
        try:
            self.db.add(row)
            await self.db.flush()
            if commit:
                await self.db.commit()
            await self.db.refresh(row)
            return row
        except SQLAlchemyError as e:
            await self._fail("insert", model, e)

    async def update(self, model: Type[Base], values: Dict[str, Any], commit: bool = True, **keys) -> Optional[Any]:
        """Update the single row matching keys; returns None when no row matches"""
        row = await self.get(model, **keys)
        if row is None:
            return None

        try:
            for field, value in values.items():
                setattr(row, field, value)
            await self.db.flush()
            if commit:
                await self.db.commit()
            await self.db.refresh(row)
            return row
        except SQLAlchemyError as e:
            await self._fail("update", model, e)

    async def delete(self, model: Type[Base], commit: bool = True, **keys) -> int:
        """Delete matching rows through the ORM so relationship cascades run"""
        rows = await self.select(model, filters=keys)
        try:
            for row in rows:
                await self.db.delete(row)
            await self.db.flush()
            if commit:
                await self.db.commit()
            return len(rows)
        except SQLAlchemyError as e:
            await self._fail("delete", model, e)

    async def recount_likes(self, post_id: str) -> int:
        """Recompute posts.likes_count from post_likes and commit"""
        likes = select(func.count()).select_from(PostLike).where(
            PostLike.post_id == post_id
        ).scalar_subquery()
        return await self._recount(post_id, likes_count=likes)

    async def recount_comments(self, post_id: str) -> int:
        """Recompute posts.comments_count from comments and commit"""
        comments = select(func.count()).select_from(Comment).where(
            Comment.post_id == post_id
        ).scalar_subquery()
        return await self._recount(post_id, comments_count=comments)

    async def _recount(self, post_id: str, **counter) -> int:
        (column, subquery), = counter.items()
        try:
            await self.db.execute(
                update(Post).where(Post.id == post_id).values({column: subquery})
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
            result = await self.db.execute(select(getattr(Post, column)).where(Post.id == post_id))
            return result.scalar_one_or_none() or 0
        except SQLAlchemyError as e:
            await self._fail("recount", Post, e)
