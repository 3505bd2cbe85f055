"""Authorization guard evaluated before the combination handlers run."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from fastapi import Depends, Header, HTTPException

from src.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

READ = "read"
UPDATE = "update"


class PermissionChecker:
    """Decides whether a bearer token grants an action."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def is_granted(self, action: str, token: str | None) -> bool:
        if not token:
            return False
        return action in self._settings.granted_actions(token)


def get_permission_checker(settings: Settings = Depends(get_settings)) -> PermissionChecker:
    """Provide the permission checker used by :func:`require_permission`."""
    return PermissionChecker(settings)


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def require_permission(action: str) -> Callable[..., Awaitable[None]]:
    """Return a dependency that rejects the request with 403 unless *action* is granted."""

    async def _guard(
        authorization: str | None = Header(default=None),
        checker: PermissionChecker = Depends(get_permission_checker),
    ) -> None:
        if not checker.is_granted(action, _bearer_token(authorization)):
            logger.warning("Access denied for action %r", action)
            raise HTTPException(status_code=403, detail="Access denied")

    return _guard
