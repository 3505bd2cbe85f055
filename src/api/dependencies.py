from __future__ import annotations

from collections.abc import AsyncGenerator

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.settings import Settings, get_settings
from src.database.engine import get_session_factory
from src.database.repos.combination_repo import CombinationRepo
from src.gateways.base import FormGateway, QueryGateway
from src.gateways.sql import SqlCombinationFormGateway, SqlCombinationQueryGateway
from src.services.combination_update import CombinationUpdateHandler


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session, committing on success or rolling back on error."""
    factory = get_session_factory()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_combination_repo(
    session: AsyncSession = Depends(get_db_session),
) -> CombinationRepo:
    """Provide a CombinationRepo instance."""
    return CombinationRepo(session)


async def get_query_gateway(
    repo: CombinationRepo = Depends(get_combination_repo),
) -> QueryGateway:
    """Provide the gateway that runs combination list queries."""
    return SqlCombinationQueryGateway(repo)


async def get_form_gateway(
    repo: CombinationRepo = Depends(get_combination_repo),
) -> FormGateway:
    """Provide the gateway that builds and applies inline-edit forms."""
    return SqlCombinationFormGateway(repo)


async def get_update_handler(
    form_gateway: FormGateway = Depends(get_form_gateway),
    settings: Settings = Depends(get_settings),
) -> CombinationUpdateHandler:
    """Provide the inline-edit handler wired to the form gateway."""
    return CombinationUpdateHandler(
        form_gateway,
        expose_error_details=settings.EXPOSE_ERROR_DETAILS,
    )


async def get_context_language_id(
    x_language_id: int | None = Header(default=None, ge=1, description="Language of combination names"),
    settings: Settings = Depends(get_settings),
) -> int:
    """Return the language requested through ``X-Language-Id``, or the default one."""
    return x_language_id if x_language_id is not None else settings.DEFAULT_LANGUAGE_ID
