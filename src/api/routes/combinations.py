from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.datastructures import QueryParams

from src.api.dependencies import (
    get_context_language_id,
    get_query_gateway,
    get_update_handler,
)
from src.api.schemas.combinations import CombinationListResponse, ErrorEnvelope
from src.api.schemas.common import ErrorResponse
from src.api.security import READ, UPDATE, require_permission
from src.config.telemetry import set_correlation_context
from src.errors import InvalidListQueryError
from src.forms.submission import RawSubmission
from src.gateways.base import QueryGateway
from src.gateways.models import COMBINATIONS_LIST_LIMIT, FilterValue, ListQuery
from src.services.combination_listing import build_combination_list_response
from src.services.combination_update import CombinationUpdateHandler

logger = logging.getLogger(__name__)

router = APIRouter(tags=["combinations"])

_FILTER_PREFIX = "filters["


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _extract_filters(params: QueryParams) -> dict[str, FilterValue]:
    """Collect ``filters[<name>]=<value>`` query parameters into a mapping."""
    filters: dict[str, FilterValue] = {}
    for key, value in params.multi_items():
        if key.startswith(_FILTER_PREFIX) and key.endswith("]"):
            name = key[len(_FILTER_PREFIX) : -1]
            if name:
                filters[name] = value
    return filters


def _build_list_query(**values: object) -> ListQuery:
    try:
        return ListQuery(**values)
    except ValidationError as exc:
        detail = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise InvalidListQueryError(detail) from None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/products/{product_id}/combinations",
    response_model=CombinationListResponse,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
    dependencies=[Depends(require_permission(READ))],
)
async def get_combination_list(
    product_id: int,
    request: Request,
    # parsed by ListQuery so malformed values answer 400 like out-of-range ones
    limit: str = Query(default=str(COMBINATIONS_LIST_LIMIT), description="Combinations per page"),
    offset: str = Query(default="0", description="Index of the first combination"),
    order_by: str = Query(default="id", alias="orderBy", description="Sort field"),
    order_way: str = Query(default="asc", alias="orderWay", description="asc or desc"),
    language_id: int = Depends(get_context_language_id),
    query_gateway: QueryGateway = Depends(get_query_gateway),
) -> CombinationListResponse:
    """List one page of a product's combinations for inline editing.

    Filters are passed as ``filters[<field>]=<value>`` query parameters.
    Query failures are not handled here and reach the global error handling.
    """
    set_correlation_context(product_id=product_id)
    query = _build_list_query(
        product_id=product_id,
        language_id=language_id,
        limit=limit,
        offset=offset,
        order_by=order_by,
        order_way=order_way.lower(),
        filters=_extract_filters(request.query_params),
    )

    result = await query_gateway.execute(query)
    logger.debug(
        "Listed %d of %d combinations",
        len(result.items),
        result.total_count,
        extra={"product_id": product_id},
    )
    return build_combination_list_response(result)


@router.patch(
    "/combinations/{combination_id}",
    responses={
        200: {"description": "Combination updated", "content": {"application/json": {"example": {}}}},
        400: {"model": ErrorEnvelope},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorEnvelope},
    },
    dependencies=[Depends(require_permission(UPDATE))],
)
async def update_combination_from_listing(
    combination_id: int,
    request: Request,
    handler: CombinationUpdateHandler = Depends(get_update_handler),
) -> JSONResponse:
    """Apply a partial update submitted from a combination list row.

    Accepts a form-encoded or JSON body, optionally nested under
    ``combination_item``. Validation failures answer 400, unexpected
    failures 500, both as ``{"errors": [...]}``.
    """
    set_correlation_context(combination_id=combination_id)
    submission = RawSubmission(
        content_type=request.headers.get("content-type", ""),
        body=await request.body(),
    )
    response = await handler.handle(combination_id, submission)
    return JSONResponse(status_code=response.status_code, content=response.body)
