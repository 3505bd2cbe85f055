from __future__ import annotations

from src.forms.views import FormFieldView, FormView
from src.gateways.models import (
    COMBINATIONS_LIST_LIMIT,
    COMBINATIONS_PAGINATION_OPTIONS,
    FILTERABLE_FIELDS,
    SORTABLE_FIELDS,
)

FORM_NAME = "combination_list"

_FILTER_WIDGETS = {
    "name": ("Combination", "text"),
    "reference": ("Reference", "text"),
    "is_default": ("Default", "checkbox"),
}


def create_filter_form_view() -> FormView:
    """Describe the filter/sort/pagination form placed above the combination list."""
    fields = [
        FormFieldView(name=f"filters[{name}]", label=_FILTER_WIDGETS[name][0], type=_FILTER_WIDGETS[name][1])
        for name in FILTERABLE_FIELDS
    ]
    fields += [
        FormFieldView(
            name="orderBy",
            label="Sort by",
            type="choice",
            value="id",
            choices=list(SORTABLE_FIELDS),
        ),
        FormFieldView(
            name="orderWay",
            label="Sort direction",
            type="choice",
            value="asc",
            choices=["asc", "desc"],
        ),
        FormFieldView(
            name="limit",
            label="Combinations per page",
            type="choice",
            value=COMBINATIONS_LIST_LIMIT,
            choices=list(COMBINATIONS_PAGINATION_OPTIONS),
        ),
    ]
    return FormView(name=FORM_NAME, method="GET", fields=fields)
