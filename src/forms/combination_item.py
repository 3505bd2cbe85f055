"""Inline-edit form for a single combination row of the listing."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from src.forms.submission import MalformedSubmissionError, RawSubmission
from src.forms.views import FormFieldView, FormView
from src.gateways.base import FormHandle
from src.services.error_messages import flatten_form_errors

logger = logging.getLogger(__name__)

FORM_NAME = "combination_item"

_INT32_MAX = 2_147_483_647

EXTRA_FIELDS_MESSAGE = "This form should not contain extra fields."
EMPTY_SUBMISSION_MESSAGE = "No editable field was submitted."
MISSING_FIELD_MESSAGE = "This field is missing."
NULL_FIELD_MESSAGE = "This value should not be null."


class CombinationItemInput(BaseModel):
    """Editable attributes of a combination. Every field is optional (PATCH)."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    reference: str | None = Field(default=None, max_length=64, pattern=r"^[^<>;={}]*$")
    impact_on_price: Decimal | None = Field(default=None, max_digits=20, decimal_places=6)
    quantity: int | None = Field(default=None, ge=-_INT32_MAX - 1, le=_INT32_MAX)
    is_default: bool | None = None

    # an absent field leaves the column unchanged, null is never accepted
    @field_validator("reference", "impact_on_price", "quantity", "is_default", mode="before")
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        if value is None:
            raise PydanticCustomError("not_null", NULL_FIELD_MESSAGE)
        return value


# (name, label, widget type), in display order
FIELDS: tuple[tuple[str, str, str], ...] = (
    ("reference", "Reference", "text"),
    ("impact_on_price", "Impact on price", "money"),
    ("quantity", "Quantity", "number"),
    ("is_default", "Default", "checkbox"),
)
FIELD_NAMES = tuple(name for name, _, _ in FIELDS)
FIELD_LABELS = {name: label for name, label, _ in FIELDS}


class CombinationItemForm(FormHandle):
    """Form handle for :class:`CombinationItemInput`.

    With ``method="PATCH"`` fields absent from the submission are left
    untouched; any other method requires every field.
    """

    def __init__(
        self,
        combination_id: int | None = None,
        *,
        method: str = "PATCH",
        initial: dict[str, Any] | None = None,
    ) -> None:
        self.combination_id = combination_id
        self.method = method.upper()
        self.initial = dict(initial or {})
        self._submitted = False
        self._data: dict[str, Any] = {}
        self._global_errors: list[str] = []
        self._field_errors: dict[str, list[str]] = {}

    # -- binding ------------------------------------------------------------

    def bind(self, submission: RawSubmission) -> None:
        self._submitted = True
        self._data = {}
        self._global_errors = []
        self._field_errors = {}

        try:
            payload = submission.parse()
        except MalformedSubmissionError as exc:
            self._global_errors.append(str(exc))
            return

        values = self._unwrap(payload)
        if values is None:
            return
        if not values:
            self._global_errors.append(EMPTY_SUBMISSION_MESSAGE)
            return

        if self.method != "PATCH":
            for name in FIELD_NAMES:
                if name not in values:
                    self._field_errors.setdefault(name, []).append(MISSING_FIELD_MESSAGE)

        try:
            model = CombinationItemInput.model_validate(values)
        except ValidationError as exc:
            self._record_validation_errors(exc)
            return

        if not self._field_errors:
            self._data = model.model_dump(exclude_unset=True)

    def _unwrap(self, payload: dict[str, Any]) -> dict[str, Any] | None:
        """Return the submitted field values, accepting a ``combination_item`` namespace."""
        if FORM_NAME not in payload:
            return payload
        nested = payload[FORM_NAME]
        if not isinstance(nested, dict):
            self._global_errors.append(f"{FORM_NAME!r} must contain the form fields")
            return None
        return nested

    def _record_validation_errors(self, exc: ValidationError) -> None:
        for error in exc.errors():
            loc = error.get("loc") or ()
            if error["type"] == "extra_forbidden" or not loc or loc[0] not in FIELD_LABELS:
                if EXTRA_FIELDS_MESSAGE not in self._global_errors:
                    self._global_errors.append(EXTRA_FIELDS_MESSAGE)
                continue
            self._field_errors.setdefault(str(loc[0]), []).append(error["msg"])
        logger.debug(
            "Combination form rejected",
            extra={"combination_id": self.combination_id, "error_count": exc.error_count()},
        )

    # -- state --------------------------------------------------------------

    def is_submitted(self) -> bool:
        return self._submitted

    def is_valid(self) -> bool:
        return self._submitted and not self._global_errors and not self._field_errors

    @property
    def data(self) -> dict[str, Any]:
        return dict(self._data)

    def collect_errors(self) -> list[str]:
        return flatten_form_errors(
            self._global_errors,
            self._field_errors,
            FIELD_NAMES,
            FIELD_LABELS,
        )

    def create_view(self) -> FormView:
        """Describe the form for rendering, pre-filled with initial values."""
        return FormView(
            name=FORM_NAME,
            method=self.method,
            fields=[
                FormFieldView(
                    name=name,
                    label=label,
                    type=widget,
                    required=self.method != "PATCH",
                    value=self.initial.get(name),
                )
                for name, label, widget in FIELDS
            ],
            errors=self.collect_errors(),
        )
