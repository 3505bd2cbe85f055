from __future__ import annotations

from src.api.schemas.combinations import CombinationListShell
from src.forms.combination_item import CombinationItemForm
from src.forms.combination_list import create_filter_form_view
from src.gateways.models import COMBINATIONS_LIST_LIMIT, COMBINATIONS_PAGINATION_OPTIONS


def render_combination_list_shell() -> CombinationListShell:
    """Build the list prototype embedded in the product page.

    Not exposed as a route: the product page embeds it and then talks to
    the list and inline-edit endpoints through the two forms it carries.
    """
    return CombinationListShell(
        limit_choices=list(COMBINATIONS_PAGINATION_OPTIONS),
        default_limit=COMBINATIONS_LIST_LIMIT,
        filter_form=create_filter_form_view(),
        item_form=CombinationItemForm().create_view(),
    )
