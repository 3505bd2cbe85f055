from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from src.forms.views import FormView


class CombinationListItem(BaseModel):
    """One editable row of the combination list."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    is_selected: bool = Field(default=False, alias="isSelected")
    name: str
    reference: str
    impact_on_price: str = Field(alias="impactOnPrice")  # decimal rendered as text
    quantity: int
    is_default: bool = Field(alias="isDefault")


class CombinationListResponse(BaseModel):
    """Response for the combination list endpoint."""

    combinations: list[CombinationListItem] = []
    total: int


class ErrorEnvelope(BaseModel):
    """Error body of the inline-edit endpoint (400 and 500)."""

    errors: list[str]


class CombinationListShell(BaseModel):
    """Everything the product page needs to embed the combination list."""

    limit_choices: list[int]
    default_limit: int
    filter_form: FormView
    item_form: FormView
