"""Value objects exchanged with the query and form gateways."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

COMBINATIONS_LIST_LIMIT = 10
COMBINATIONS_PAGINATION_OPTIONS: tuple[int, ...] = (COMBINATIONS_LIST_LIMIT, 20, 50, 100)

SORTABLE_FIELDS = ("id", "name", "reference", "impact_on_price", "quantity", "is_default")
FILTERABLE_FIELDS = ("name", "reference", "is_default")

FilterValue = Union[str, int, float, bool]


class ListQuery(BaseModel):
    """Read request for one page of a product's combinations."""

    model_config = ConfigDict(frozen=True)

    product_id: int = Field(gt=0)
    language_id: int = Field(gt=0)
    limit: int = COMBINATIONS_LIST_LIMIT
    offset: int = Field(default=0, ge=0)
    order_by: str = "id"
    order_way: Literal["asc", "desc"] = "asc"
    filters: dict[str, FilterValue] = Field(default_factory=dict)

    @field_validator("limit")
    @classmethod
    def _limit_in_pagination_options(cls, value: int) -> int:
        if value not in COMBINATIONS_PAGINATION_OPTIONS:
            allowed = ", ".join(str(v) for v in COMBINATIONS_PAGINATION_OPTIONS)
            msg = f"limit must be one of: {allowed}"
            raise ValueError(msg)
        return value

    @field_validator("order_by")
    @classmethod
    def _order_by_sortable(cls, value: str) -> str:
        if value not in SORTABLE_FIELDS:
            msg = f"orderBy must be one of: {', '.join(SORTABLE_FIELDS)}"
            raise ValueError(msg)
        return value


@dataclass(frozen=True)
class CombinationRow:
    """One combination as returned by the query gateway."""

    id: int
    name: str
    reference: str
    price_impact: Decimal
    quantity: int
    is_default: bool


@dataclass(frozen=True)
class CombinationListResult:
    """A page of combinations plus the total matching the filters."""

    total_count: int
    items: tuple[CombinationRow, ...] = ()


# ---------------------------------------------------------------------------
# Update outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UpdateValid:
    """The submitted changes were applied."""


@dataclass(frozen=True)
class UpdateInvalid:
    """The submission failed structural or business validation."""

    errors: tuple[str, ...] = ()


@dataclass(frozen=True)
class UpdateFailed:
    """Applying the update failed unexpectedly."""

    kind: str
    code: int
    message: str

    @classmethod
    def from_exception(cls, exc: BaseException) -> UpdateFailed:
        """Describe *exc* by its class name, ``code`` attribute and message."""
        code = getattr(exc, "code", 0)
        if not isinstance(code, int):
            code = 0
        message = getattr(exc, "message", None)
        if not isinstance(message, str):
            message = str(exc)
        return cls(kind=type(exc).__name__, code=code, message=message)


UpdateOutcome = Union[UpdateValid, UpdateInvalid, UpdateFailed]
