from __future__ import annotations

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error body raised by the API boundary (not found, forbidden, bad query)."""

    detail: str
