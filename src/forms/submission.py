"""Raw request bodies submitted to combination forms."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qsl

# "combination_item[quantity]" -> ("combination_item", "quantity")
_NESTED_KEY_RE = re.compile(r"^(?P<root>[^\[\]]+)\[(?P<child>[^\[\]]*)\]$")


class MalformedSubmissionError(ValueError):
    """The submitted body could not be decoded."""


@dataclass(frozen=True)
class RawSubmission:
    """An undecoded request body together with its content type."""

    content_type: str = ""
    body: bytes = b""

    @property
    def is_json(self) -> bool:
        media_type = self.content_type.split(";", 1)[0].strip().lower()
        return media_type == "application/json" or media_type.endswith("+json")

    def parse(self) -> dict[str, Any]:
        """Decode the body into a mapping of submitted values.

        JSON bodies must be objects. Anything else is read as
        ``application/x-www-form-urlencoded``; bracketed keys such as
        ``combination_item[quantity]`` become nested mappings.

        Raises:
            MalformedSubmissionError: If the body cannot be decoded.
        """
        if not self.body.strip():
            return {}
        try:
            text = self.body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedSubmissionError("Request body is not valid UTF-8") from exc

        if self.is_json:
            try:
                payload = json.loads(text)
            except json.JSONDecodeError as exc:
                raise MalformedSubmissionError("Request body is not valid JSON") from exc
            if not isinstance(payload, dict):
                raise MalformedSubmissionError("Request body must be a JSON object")
            return payload

        return _parse_form_encoded(text)


def _parse_form_encoded(text: str) -> dict[str, Any]:
    try:
        pairs = parse_qsl(text, keep_blank_values=True)
    except ValueError as exc:
        raise MalformedSubmissionError("Request body is not valid form data") from exc

    data: dict[str, Any] = {}
    for key, value in pairs:
        match = _NESTED_KEY_RE.match(key)
        if match is None:
            if isinstance(data.get(key), dict):
                raise MalformedSubmissionError(f"Conflicting values submitted for {key!r}")
            data[key] = value
            continue
        nested = data.setdefault(match.group("root"), {})
        if not isinstance(nested, dict):
            raise MalformedSubmissionError(f"Conflicting values submitted for {match.group('root')!r}")
        nested[match.group("child")] = value
    return data
