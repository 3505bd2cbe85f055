"""Error message formatting shared by the combination endpoints.

Every write-path failure reaches the client as ``{"errors": [...]}``; the
helpers here produce the strings that go into that list.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

FALLBACK_ERROR_TEMPLATE = "An unexpected error occurred. [{kind} code {code}]: {message}"
FALLBACK_ERROR_TEMPLATE_WITHOUT_DETAIL = "An unexpected error occurred. [{kind} code {code}]"


def format_fallback_error_message(
    kind: str,
    code: int,
    message: str = "",
    *,
    include_message: bool = True,
) -> str:
    """Build the last-resort message for an unexpected failure.

    Args:
        kind: Category of the failure, usually the exception class name.
        code: Numeric error code, ``0`` when the failure has none.
        message: Description of the failure.
        include_message: When ``False`` (or *message* is empty) the
            description is left out so internals are not exposed.

    Returns:
        ``"An unexpected error occurred. [<kind> code <code>]: <message>"``
    """
    if include_message and message:
        return FALLBACK_ERROR_TEMPLATE.format(kind=kind, code=code, message=message)
    return FALLBACK_ERROR_TEMPLATE_WITHOUT_DETAIL.format(kind=kind, code=code)


def flatten_form_errors(
    global_errors: Sequence[str],
    field_errors: Mapping[str, Sequence[str]],
    field_order: Sequence[str],
    labels: Mapping[str, str] | None = None,
) -> list[str]:
    """Flatten a form's error tree into one ordered list of messages.

    Global errors come first, then field errors following *field_order*.
    Fields missing from *field_order* are appended in name order. Field
    messages are prefixed with the field label when one is known.
    """
    labels = labels or {}
    ordered_fields = list(field_order) + sorted(set(field_errors) - set(field_order))

    messages = list(global_errors)
    for field_name in ordered_fields:
        label = labels.get(field_name)
        for message in field_errors.get(field_name, ()):
            messages.append(f"{label}: {message}" if label else message)
    return messages


def merge_error_messages(*sources: Iterable[str]) -> list[str]:
    """Concatenate message lists, dropping repeats and keeping first-seen order."""
    seen: set[str] = set()
    merged: list[str] = []
    for source in sources:
        for message in source:
            if message not in seen:
                seen.add(message)
                merged.append(message)
    return merged
