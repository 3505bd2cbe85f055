from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from src.forms.submission import RawSubmission
from src.gateways.models import CombinationListResult, ListQuery, UpdateOutcome


class QueryGateway(ABC):
    """Executes combination list queries."""

    @abstractmethod
    async def execute(self, query: ListQuery) -> CombinationListResult:
        """Run *query* and return the matching page. Failures propagate."""


class FormHandle(ABC):
    """A form bound to one combination, filled from a raw submission."""

    @abstractmethod
    def bind(self, submission: RawSubmission) -> None:
        """Fill the form from *submission* in place. Never raises."""

    @abstractmethod
    def is_submitted(self) -> bool:
        """Whether :meth:`bind` has been called."""

    @abstractmethod
    def is_valid(self) -> bool:
        """Whether the form is submitted and carries no errors."""

    @property
    @abstractmethod
    def data(self) -> dict[str, Any]:
        """Submitted values, restricted to the fields actually sent."""

    @abstractmethod
    def collect_errors(self) -> list[str]:
        """Return global errors first, then field errors in field order."""


class FormGateway(ABC):
    """Builds bindable forms and applies them as combination updates."""

    @abstractmethod
    async def build_form_for(self, combination_id: int, *, method: str = "PATCH") -> FormHandle:
        """Return a form pre-filled with the combination's current values."""

    @abstractmethod
    async def update_for(self, combination_id: int, form: FormHandle) -> UpdateOutcome:
        """Validate and apply *form* to the combination."""
