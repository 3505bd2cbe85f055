"""Gateways backed by the catalog database through :class:`CombinationRepo`."""

from __future__ import annotations

import logging
from decimal import Decimal

from src.database.models.combination import Combination
from src.database.repos.combination_repo import CombinationRepo
from src.errors import CombinationError, CombinationNotFoundError, CombinationUpdateError
from src.forms.combination_item import CombinationItemForm
from src.gateways.base import FormGateway, FormHandle, QueryGateway
from src.gateways.models import (
    CombinationListResult,
    CombinationRow,
    ListQuery,
    UpdateFailed,
    UpdateInvalid,
    UpdateOutcome,
    UpdateValid,
)

logger = logging.getLogger(__name__)

DEFAULT_REQUIRED_MESSAGE = (
    "A product must keep a default combination: set another combination as default instead."
)

# form field -> Combination column
_COLUMN_FOR_FIELD = {
    "reference": "reference",
    "impact_on_price": "price_impact",
    "quantity": "quantity",
    "is_default": "is_default",
}


def format_price_impact(value: Decimal | None) -> Decimal:
    """Drop the storage scale: ``Decimal("5.500000")`` -> ``Decimal("5.5")``."""
    if value is None:
        return Decimal("0")
    if value == value.to_integral_value():
        return value.quantize(Decimal(1))
    return value.normalize()


class SqlCombinationQueryGateway(QueryGateway):
    """Reads combination pages from the catalog database."""

    def __init__(self, repo: CombinationRepo) -> None:
        self._repo = repo

    async def execute(self, query: ListQuery) -> CombinationListResult:
        total = await self._repo.count_for_product(
            product_id=query.product_id,
            language_id=query.language_id,
            filters=query.filters,
        )
        rows = await self._repo.list_for_product(
            product_id=query.product_id,
            language_id=query.language_id,
            filters=query.filters,
            order_by=query.order_by,
            order_way=query.order_way,
            limit=query.limit,
            offset=query.offset,
        )
        return CombinationListResult(
            total_count=total,
            items=tuple(
                CombinationRow(
                    id=combination.id,
                    name=name or "",
                    reference=combination.reference,
                    price_impact=format_price_impact(combination.price_impact),
                    quantity=combination.quantity,
                    is_default=combination.is_default,
                )
                for combination, name in rows
            ),
        )


class SqlCombinationFormGateway(FormGateway):
    """Binds inline-edit forms to stored combinations and applies them."""

    def __init__(self, repo: CombinationRepo) -> None:
        self._repo = repo

    async def build_form_for(self, combination_id: int, *, method: str = "PATCH") -> FormHandle:
        combination = await self._repo.get_by_id(combination_id)
        if combination is None:
            raise CombinationNotFoundError(combination_id)
        return CombinationItemForm(
            combination_id,
            method=method,
            initial={
                "reference": combination.reference,
                "impact_on_price": format_price_impact(combination.price_impact),
                "quantity": combination.quantity,
                "is_default": combination.is_default,
            },
        )

    async def update_for(self, combination_id: int, form: FormHandle) -> UpdateOutcome:
        if not form.is_valid():
            return UpdateInvalid(errors=tuple(form.collect_errors()))

        combination = await self._repo.get_by_id(combination_id)
        if combination is None:
            raise CombinationNotFoundError(combination_id)

        changes = {_COLUMN_FOR_FIELD[name]: value for name, value in form.data.items()}
        if combination.is_default and changes.get("is_default") is False:
            return UpdateInvalid(errors=(DEFAULT_REQUIRED_MESSAGE,))

        try:
            async with self._repo.savepoint():
                await self._apply(combination, changes)
        except CombinationError as exc:
            logger.warning(
                "Combination update not applied: %s",
                exc,
                extra={"combination_id": combination_id},
            )
            return UpdateFailed.from_exception(exc)

        return UpdateValid()

    async def _apply(self, combination: Combination, changes: dict[str, object]) -> None:
        if changes.get("is_default") is True and not combination.is_default:
            await self._repo.clear_default(combination.product_id, except_id=combination.id)
        updated = await self._repo.update(combination.id, **changes)
        if updated is None:
            raise CombinationUpdateError(
                f"Combination {combination.id} could not be updated",
                code=CombinationUpdateError.FAILED_TO_UPDATE,
            )
