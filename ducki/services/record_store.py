"""
Record access layer - every read and write scoped to one authenticated user

Features:
- select / get / count / insert / update / delete over any owned model
- Owner predicate added to every statement (never trusted to the caller)
- Each write runs in a savepoint; a failed write leaves the rest of the session intact
- transaction() groups several calls into one commit
- Database errors surface as RecordStoreError carrying the raw driver message
"""
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, Union
from sqlalchemy import select, delete, func, and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from ducki.core.exceptions import AccessDeniedError, RecordStoreError
from ducki.models.user import Profile
from ducki.models.item import Item
from ducki.models.outfit import Outfit, OutfitItem, OutfitMedia
import logging

logger = logging.getLogger(__name__)

OrderBy = Sequence[Union[str, Tuple[str, str]]]

# Keys that tie a row to its owner; updates may not move rows between owners
OWNERSHIP_FIELDS = frozenset({"id", "user_id", "outfit_id", "item_id"})


def _error_message(error: SQLAlchemyError) -> str:
    original = getattr(error, "orig", None)
    return str(original) if original is not None else str(error)


class RecordStore:
    """Row store bound to a database session and the calling user's id"""

    def __init__(self, db: AsyncSession, user_id: int):
        self.db = db
        self.user_id = user_id
        self._in_transaction = False

    # Scoping

    def _owner_clause(self, model: Type[Any]):
        """Predicate limiting model rows to the caller"""
        if model is Profile:
            return Profile.id == self.user_id
        if model is OutfitItem:
            owned_outfits = select(Outfit.id).where(Outfit.user_id == self.user_id)
            return OutfitItem.outfit_id.in_(owned_outfits)
        if hasattr(model, "user_id"):
            return model.user_id == self.user_id
        raise AccessDeniedError(f"{model.__name__} rows cannot be scoped to a user")

    def _where(self, model: Type[Any], filters: Optional[Dict[str, Any]]):
        conditions = [self._owner_clause(model)]
        for field, value in (filters or {}).items():
            column = getattr(model, field)
            if isinstance(value, (list, tuple, set)):
                conditions.append(column.in_(list(value)))
            else:
                conditions.append(column == value)
        return and_(*conditions)

    async def _check_insert_owner(self, model: Type[Any], values: Dict[str, Any]) -> None:
        if model is Profile:
            if values.setdefault("id", self.user_id) != self.user_id:
                raise AccessDeniedError()
            return
        if model is OutfitItem:
            outfits = await self.count(Outfit, id=values.get("outfit_id"))
            items = await self.count(Item, id=values.get("item_id"))
            if not outfits or not items:
                raise AccessDeniedError()
            return
        if not hasattr(model, "user_id"):
            raise AccessDeniedError(f"{model.__name__} rows cannot be scoped to a user")
        if values.setdefault("user_id", self.user_id) != self.user_id:
            raise AccessDeniedError()
        if model is OutfitMedia and not await self.count(Outfit, id=values.get("outfit_id")):
            raise AccessDeniedError()

    # Session handling

    async def _commit(self) -> None:
        if self._in_transaction:
            return
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise RecordStoreError(_error_message(e)) from e

    def _fail(self, operation: str, model: Type[Any], error: SQLAlchemyError):
        message = _error_message(error)
        logger.error(f"{operation} failed for {model.__name__} (user {self.user_id}): {message}")
        raise RecordStoreError(message) from error

    @asynccontextmanager
    async def transaction(self):
        """
        Run several store calls as one unit

        Everything inside commits together; any exception rolls all of it back.
        Nested use joins the outer transaction.
        """
        if self._in_transaction:
            yield self
            return

        self._in_transaction = True
        try:
            yield self
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise RecordStoreError(_error_message(e)) from e
        except Exception:
            await self.db.rollback()
            raise
        finally:
            self._in_transaction = False

    # Queries

    async def select(
        self,
        model: Type[Any],
        *,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[OrderBy] = None
    ) -> List[Any]:
        """
        Get the caller's rows of a model

        Args:
            model: Mapped class
            filters: Column equality filters; list/tuple values mean IN
            order_by: Column names or (column, "asc"/"desc") tuples

        Returns:
            List of model instances
        """
        query = select(model).where(self._where(model, filters))
        for field in order_by or ():
            if isinstance(field, tuple):
                field_name, direction = field
                query = query.order_by(getattr(getattr(model, field_name), direction)())
            else:
                query = query.order_by(getattr(model, field))

        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            self._fail("Select", model, e)
        return list(result.scalars().all())

    async def get(self, model: Type[Any], **filters) -> Optional[Any]:
        """Get a single row, or None when missing or owned by someone else"""
        try:
            result = await self.db.execute(select(model).where(self._where(model, filters)))
        except SQLAlchemyError as e:
            self._fail("Get", model, e)
        return result.scalars().first()

    async def count(self, model: Type[Any], **filters) -> int:
        query = select(func.count()).select_from(model).where(self._where(model, filters))
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            self._fail("Count", model, e)
        return result.scalar() or 0

    # Mutations

    async def insert(self, model: Type[Any], **values) -> Any:
        """
        Insert one row owned by the caller

        Raises:
            AccessDeniedError: values name another owner or a row the caller does not own
            RecordStoreError: the database rejected the row
        """
        await self._check_insert_owner(model, values)
        instance = model(**values)
        try:
            async with self.db.begin_nested():
                self.db.add(instance)
                await self.db.flush()
        except SQLAlchemyError as e:
            self._fail("Insert", model, e)
        await self._commit()
        return instance

    async def update(self, model: Type[Any], patch: Dict[str, Any], **filters) -> List[Any]:
        """
        Apply patch to the caller's matching rows

        Returns:
            Updated rows (empty list when nothing matched)

        Raises:
            AccessDeniedError: patch touches an id or owner column
        """
        moved = OWNERSHIP_FIELDS.intersection(patch)
        if moved:
            raise AccessDeniedError(f"{model.__name__}.{sorted(moved)[0]} cannot be changed")

        rows = await self.select(model, filters=filters)
        try:
            async with self.db.begin_nested():
                for row in rows:
                    for field, value in patch.items():
                        setattr(row, field, value)
                await self.db.flush()
        except SQLAlchemyError as e:
            self._fail("Update", model, e)
        await self._commit()
        return rows

    async def delete(self, model: Type[Any], **filters) -> int:
        """
        Delete the caller's matching rows

        Returns:
            Number of rows removed (zero is not an error)
        """
        query = (
            delete(model)
            .where(self._where(model, filters))
            .execution_options(synchronize_session=False)
        )
        try:
            async with self.db.begin_nested():
                result = await self.db.execute(query)
        except SQLAlchemyError as e:
            self._fail("Delete", model, e)
        await self._commit()
        return result.rowcount or 0
