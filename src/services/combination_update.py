"""Inline update of a combination submitted from the listing.

A request moves through ``Received -> Bound -> Responded``: the form is
bound to the raw submission, the form gateway validates and applies it, and
the outcome is mapped to a status code plus JSON body:

* valid -> ``200 {}``
* invalid -> ``400 {"errors": [...]}`` with every form error
* failed or raised -> ``500 {"errors": [<fallback message>]}``
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from src.forms.submission import RawSubmission
from src.gateways.base import FormGateway, FormHandle
from src.gateways.models import UpdateFailed, UpdateInvalid, UpdateOutcome, UpdateValid
from src.services.error_messages import format_fallback_error_message, merge_error_messages

logger = logging.getLogger(__name__)

HTTP_OK = 200
HTTP_BAD_REQUEST = 400
HTTP_INTERNAL_SERVER_ERROR = 500


@dataclass(frozen=True)
class UpdateResponse:
    """Status code and JSON body to send back for an update request."""

    status_code: int
    body: dict[str, Any] = field(default_factory=dict)


class CombinationUpdateHandler:
    """Bind, validate and apply one combination update, mapping every outcome to JSON."""

    def __init__(self, form_gateway: FormGateway, *, expose_error_details: bool = True) -> None:
        self._form_gateway = form_gateway
        self._expose_error_details = expose_error_details

    async def handle(self, combination_id: int, submission: RawSubmission) -> UpdateResponse:
        form = await self._form_gateway.build_form_for(combination_id, method="PATCH")
        form.bind(submission)

        try:
            outcome = await self._form_gateway.update_for(combination_id, form)
        except Exception as exc:
            logger.exception(
                "Combination update raised",
                extra={"combination_id": combination_id},
            )
            outcome = UpdateFailed.from_exception(exc)

        return self._respond(combination_id, form, outcome)

    def _respond(self, combination_id: int, form: FormHandle, outcome: UpdateOutcome) -> UpdateResponse:
        if isinstance(outcome, UpdateValid):
            logger.info("Combination updated", extra={"combination_id": combination_id})
            return UpdateResponse(status_code=HTTP_OK, body={})

        if isinstance(outcome, UpdateInvalid):
            errors = merge_error_messages(form.collect_errors(), outcome.errors)
            logger.info(
                "Combination update rejected",
                extra={"combination_id": combination_id, "error_count": len(errors)},
            )
            return UpdateResponse(status_code=HTTP_BAD_REQUEST, body={"errors": errors})

        if isinstance(outcome, UpdateFailed):
            logger.error(
                "Combination update failed: %s (code %s)",
                outcome.kind,
                outcome.code,
                extra={"combination_id": combination_id},
            )
            message = format_fallback_error_message(
                outcome.kind,
                outcome.code,
                outcome.message,
                include_message=self._expose_error_details,
            )
            return UpdateResponse(status_code=HTTP_INTERNAL_SERVER_ERROR, body={"errors": [message]})

        raise TypeError(f"Unsupported update outcome: {outcome!r}")
