"""Shape query results into the combination list JSON contract."""

from __future__ import annotations

from src.api.schemas.combinations import CombinationListItem, CombinationListResponse
from src.gateways.models import CombinationListResult, CombinationRow


def _format_row(row: CombinationRow) -> CombinationListItem:
    # isSelected is client-side selection state and always starts unchecked
    return CombinationListItem(
        id=row.id,
        is_selected=False,
        name=row.name,
        reference=row.reference,
        impact_on_price=str(row.price_impact),
        quantity=row.quantity,
        is_default=row.is_default,
    )


def build_combination_list_response(result: CombinationListResult) -> CombinationListResponse:
    """Return ``{combinations, total}`` for *result*, keeping the query's row order."""
    return CombinationListResponse(
        combinations=[_format_row(row) for row in result.items],
        total=result.total_count,
    )
