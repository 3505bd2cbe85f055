"""Shared fixtures for API integration tests.

Provides a FastAPI test application with mocked gateways, a permissive
permission checker, and an async HTTPX test client.
"""

from __future__ import annotations

from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fastapi import FastAPI

from src.api.app import create_app
from src.api.dependencies import get_form_gateway, get_query_gateway
from src.api.security import get_permission_checker
from src.forms.combination_item import CombinationItemForm
from src.gateways.models import CombinationListResult, CombinationRow, UpdateValid

# ---------------------------------------------------------------------------
# Stable IDs used across tests
# ---------------------------------------------------------------------------

PRODUCT_ID = 12
COMBINATION_ID = 345


# ---------------------------------------------------------------------------
# Factory helpers
# ---------------------------------------------------------------------------


def make_row(
    combination_id: int = COMBINATION_ID,
    name: str = "Size - M, Color - Red",
    reference: str = "TSHIRT-M-RED",
    price_impact: Decimal = Decimal("2.5"),
    quantity: int = 14,
    is_default: bool = False,
) -> CombinationRow:
    """Return a combination row as produced by the query gateway."""
    return CombinationRow(
        id=combination_id,
        name=name,
        reference=reference,
        price_impact=price_impact,
        quantity=quantity,
        is_default=is_default,
    )


def make_result(*rows: CombinationRow, total: int | None = None) -> CombinationListResult:
    return CombinationListResult(
        total_count=len(rows) if total is None else total,
        items=tuple(rows),
    )


# ---------------------------------------------------------------------------
# Application fixture
# ---------------------------------------------------------------------------


@pytest.fixture()
def app() -> FastAPI:
    """Create a fresh FastAPI application (no real lifespan side-effects)."""
    return create_app()


# ---------------------------------------------------------------------------
# Mock gateway fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_query_gateway() -> AsyncMock:
    """Mock QueryGateway returning one default combination."""
    gateway = AsyncMock()
    gateway.execute = AsyncMock(return_value=make_result(make_row(is_default=True)))
    return gateway


@pytest.fixture()
def mock_form_gateway() -> AsyncMock:
    """Mock FormGateway building real forms and accepting every update."""
    gateway = AsyncMock()
    gateway.build_form_for = AsyncMock(
        side_effect=lambda combination_id, method="PATCH": CombinationItemForm(
            combination_id, method=method
        )
    )
    gateway.update_for = AsyncMock(return_value=UpdateValid())
    return gateway


@pytest.fixture()
def allow_all() -> MagicMock:
    checker = MagicMock()
    checker.is_granted = MagicMock(return_value=True)
    return checker


# ---------------------------------------------------------------------------
# Async HTTPX test client
# ---------------------------------------------------------------------------


@pytest.fixture()
async def client(
    app: FastAPI,
    mock_query_gateway: AsyncMock,
    mock_form_gateway: AsyncMock,
    allow_all: MagicMock,
) -> httpx.AsyncClient:
    """Yield an async HTTPX client wired to the test app with all deps mocked."""
    app.dependency_overrides[get_query_gateway] = lambda: mock_query_gateway
    app.dependency_overrides[get_form_gateway] = lambda: mock_form_gateway
    app.dependency_overrides[get_permission_checker] = lambda: allow_all

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def fake_session() -> SimpleNamespace:
    """Session stand-in for the health check."""
    return SimpleNamespace(execute=AsyncMock(return_value=None))
