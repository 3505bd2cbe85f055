"""Tests for binding and validating the combination inline-edit form."""

from __future__ import annotations

import json
from decimal import Decimal

from src.forms.combination_item import (
    EMPTY_SUBMISSION_MESSAGE,
    EXTRA_FIELDS_MESSAGE,
    MISSING_FIELD_MESSAGE,
    NULL_FIELD_MESSAGE,
    CombinationItemForm,
)
from src.forms.submission import RawSubmission


def _json(payload: object) -> RawSubmission:
    return RawSubmission(content_type="application/json", body=json.dumps(payload).encode())


class TestBinding:
    def test_unbound_form_is_not_valid(self):
        form = CombinationItemForm(1)

        assert not form.is_submitted()
        assert not form.is_valid()

    def test_partial_submission_keeps_only_sent_fields(self):
        form = CombinationItemForm(1)

        form.bind(_json({"quantity": "12"}))

        assert form.is_valid()
        assert form.data == {"quantity": 12}

    def test_all_fields(self):
        form = CombinationItemForm(1)

        form.bind(_json({
            "reference": "  REF-1 ",
            "impact_on_price": "3.25",
            "quantity": 4,
            "is_default": "on",
        }))

        assert form.data == {
            "reference": "REF-1",
            "impact_on_price": Decimal("3.25"),
            "quantity": 4,
            "is_default": True,
        }

    def test_namespaced_submission(self):
        form = CombinationItemForm(1)

        form.bind(_json({"combination_item": {"is_default": False}}))

        assert form.data == {"is_default": False}

    def test_namespace_must_hold_fields(self):
        form = CombinationItemForm(1)

        form.bind(_json({"combination_item": "quantity=3"}))

        assert not form.is_valid()
        assert form.collect_errors() == ["'combination_item' must contain the form fields"]

    def test_explicit_null_is_a_field_error(self):
        form = CombinationItemForm(1)

        form.bind(_json({"quantity": None, "reference": None}))

        assert not form.is_valid()
        assert form.data == {}
        assert form.collect_errors() == [
            f"Reference: {NULL_FIELD_MESSAGE}",
            f"Quantity: {NULL_FIELD_MESSAGE}",
        ]

    def test_empty_submission_is_a_global_error(self):
        form = CombinationItemForm(1)

        form.bind(RawSubmission(content_type="application/json", body=b""))

        assert form.is_submitted()
        assert form.collect_errors() == [EMPTY_SUBMISSION_MESSAGE]

    def test_malformed_body_is_a_global_error(self):
        form = CombinationItemForm(1)

        form.bind(RawSubmission(content_type="application/json", body=b"{"))

        assert not form.is_valid()
        assert form.collect_errors() == ["Request body is not valid JSON"]

    def test_extra_fields_reported_once(self):
        form = CombinationItemForm(1)

        form.bind(_json({"name": "x", "price": 3, "quantity": 1}))

        assert form.collect_errors() == [EXTRA_FIELDS_MESSAGE]
        assert form.data == {}

    def test_field_errors_follow_field_order_with_labels(self):
        form = CombinationItemForm(1)

        form.bind(_json({"quantity": "lots", "reference": "a<b"}))

        errors = form.collect_errors()
        assert len(errors) == 2
        assert errors[0].startswith("Reference: ")
        assert errors[1].startswith("Quantity: ")

    def test_global_errors_before_field_errors(self):
        form = CombinationItemForm(1)

        form.bind(_json({"quantity": "lots", "unknown": 1}))

        errors = form.collect_errors()
        assert errors[0] == EXTRA_FIELDS_MESSAGE
        assert errors[1].startswith("Quantity: ")

    def test_reference_too_long(self):
        form = CombinationItemForm(1)

        form.bind(_json({"reference": "x" * 65}))

        assert not form.is_valid()

    def test_quantity_out_of_int32_range(self):
        form = CombinationItemForm(1)

        form.bind(_json({"quantity": 2**31}))

        assert not form.is_valid()

    def test_rebinding_resets_state(self):
        form = CombinationItemForm(1)
        form.bind(_json({"quantity": "lots"}))

        form.bind(_json({"quantity": 2}))

        assert form.is_valid()
        assert form.collect_errors() == []

    def test_non_patch_requires_every_field(self):
        form = CombinationItemForm(1, method="put")

        form.bind(_json({"quantity": 2}))

        assert not form.is_valid()
        assert form.collect_errors() == [
            f"Reference: {MISSING_FIELD_MESSAGE}",
            f"Impact on price: {MISSING_FIELD_MESSAGE}",
            f"Default: {MISSING_FIELD_MESSAGE}",
        ]


class TestView:
    def test_view_carries_initial_values(self):
        form = CombinationItemForm(
            5,
            initial={"reference": "R", "impact_on_price": Decimal("1.5"), "quantity": 3, "is_default": True},
        )

        view = form.create_view()

        assert view.name == "combination_item"
        assert view.method == "PATCH"
        assert [f.name for f in view.fields] == ["reference", "impact_on_price", "quantity", "is_default"]
        assert [f.value for f in view.fields] == ["R", Decimal("1.5"), 3, True]
        assert not any(f.required for f in view.fields)

    def test_view_lists_errors(self):
        form = CombinationItemForm(5)
        form.bind(RawSubmission(content_type="application/json", body=b""))

        assert form.create_view().errors == [EMPTY_SUBMISSION_MESSAGE]
