"""Repository data-access object for combinations and their translated names."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession, AsyncSessionTransaction

from src.database.models.combination import Combination, CombinationName

logger = logging.getLogger(__name__)

_SORT_COLUMNS: dict[str, Any] = {
    "id": Combination.id,
    "name": CombinationName.name,
    "reference": Combination.reference,
    "impact_on_price": Combination.price_impact,
    "quantity": Combination.quantity,
    "is_default": Combination.is_default,
}

_TRUE_STRINGS = {"1", "true", "yes", "on"}


def _as_bool(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _select_for_product(product_id: int, language_id: int) -> sa.Select:
    """Combinations of a product joined with their name in *language_id*."""
    return (
        sa.select(Combination, CombinationName.name)
        .outerjoin(
            CombinationName,
            sa.and_(
                CombinationName.combination_id == Combination.id,
                CombinationName.language_id == language_id,
            ),
        )
        .where(Combination.product_id == product_id)
    )


def _apply_filters(stmt: sa.Select, filters: Mapping[str, object]) -> sa.Select:
    """Narrow *stmt* by the supported filters. Unknown keys are ignored."""
    for key, value in filters.items():
        if value is None or value == "":
            continue
        if key == "name":
            stmt = stmt.where(CombinationName.name.ilike(f"%{value}%"))
        elif key == "reference":
            stmt = stmt.where(Combination.reference.ilike(f"%{value}%"))
        elif key == "is_default":
            stmt = stmt.where(Combination.is_default.is_(_as_bool(value)))
        else:
            logger.debug("Ignoring unsupported combination filter %r", key)
    return stmt


def _apply_ordering(stmt: sa.Select, order_by: str, order_way: str) -> sa.Select:
    column = _SORT_COLUMNS.get(order_by, Combination.id)
    primary = column.desc() if order_way == "desc" else column.asc()
    # id as tie-breaker keeps pages stable when the sort column has duplicates
    if column is Combination.id:
        return stmt.order_by(primary)
    return stmt.order_by(primary, Combination.id.asc())


class CombinationRepo:
    """Async data-access layer for :class:`Combination` rows."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    def savepoint(self) -> AsyncSessionTransaction:
        """Return a nested transaction; a failure inside it rolls back only its writes."""
        return self._session.begin_nested()

    async def get_by_id(self, combination_id: int) -> Combination | None:
        """Return a Combination by primary key, or ``None``."""
        return await self._session.get(Combination, combination_id)

    async def count_for_product(
        self,
        *,
        product_id: int,
        language_id: int,
        filters: Mapping[str, object],
    ) -> int:
        """Count the product's combinations matching *filters*."""
        stmt = _apply_filters(_select_for_product(product_id, language_id), filters)
        count_stmt = sa.select(sa.func.count()).select_from(stmt.subquery())
        result = await self._session.execute(count_stmt)
        return int(result.scalar_one())

    async def list_for_product(
        self,
        *,
        product_id: int,
        language_id: int,
        filters: Mapping[str, object],
        order_by: str,
        order_way: str,
        limit: int,
        offset: int,
    ) -> list[tuple[Combination, str | None]]:
        """Return one page of ``(combination, localized_name)`` pairs."""
        stmt = _apply_filters(_select_for_product(product_id, language_id), filters)
        stmt = _apply_ordering(stmt, order_by, order_way).limit(limit).offset(offset)
        result = await self._session.execute(stmt)
        return [(row[0], row[1]) for row in result.all()]

    async def update(self, combination_id: int, **kwargs: object) -> Combination | None:
        """Update columns on a Combination. Returns the updated row or ``None``."""
        combination = await self._session.get(Combination, combination_id)
        if combination is None:
            return None
        for key, value in kwargs.items():
            setattr(combination, key, value)
        await self._session.flush()
        return combination

    async def clear_default(self, product_id: int, *, except_id: int) -> None:
        """Unset the default flag on every other combination of the product."""
        stmt = (
            sa.update(Combination)
            .where(
                Combination.product_id == product_id,
                Combination.id != except_id,
                Combination.is_default.is_(True),
            )
            .values(is_default=False)
        )
        await self._session.execute(stmt)
