from src.services.error_messages import (
    flatten_form_errors,
    format_fallback_error_message,
    merge_error_messages,
)


class TestFormatFallbackErrorMessage:
    def test_includes_kind_code_and_message(self):
        message = format_fallback_error_message("DomainException", 0, "Stock cannot be negative")

        assert message == (
            "An unexpected error occurred. [DomainException code 0]: Stock cannot be negative"
        )

    def test_without_message(self):
        assert format_fallback_error_message("RuntimeError", 5) == (
            "An unexpected error occurred. [RuntimeError code 5]"
        )

    def test_message_left_out_when_not_included(self):
        message = format_fallback_error_message("RuntimeError", 0, "secret", include_message=False)

        assert "secret" not in message


class TestFlattenFormErrors:
    def test_global_errors_first_then_field_order(self):
        messages = flatten_form_errors(
            ["Form is stale"],
            {"quantity": ["too big"], "reference": ["too long", "bad chars"]},
            ["reference", "impact_on_price", "quantity"],
        )

        assert messages == ["Form is stale", "too long", "bad chars", "too big"]

    def test_labels_prefix_field_messages(self):
        messages = flatten_form_errors([], {"quantity": ["too big"]}, ["quantity"], {"quantity": "Quantity"})

        assert messages == ["Quantity: too big"]

    def test_unknown_fields_appended_sorted(self):
        messages = flatten_form_errors([], {"zeta": ["z"], "alpha": ["a"], "quantity": ["q"]}, ["quantity"])

        assert messages == ["q", "a", "z"]

    def test_no_errors(self):
        assert flatten_form_errors([], {}, ["quantity"]) == []


class TestMergeErrorMessages:
    def test_keeps_first_seen_order_and_drops_repeats(self):
        assert merge_error_messages(["a", "b"], ("b", "c"), ["a"]) == ["a", "b", "c"]

    def test_empty_sources(self):
        assert merge_error_messages([], ()) == []
