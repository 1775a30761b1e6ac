"""FastAPI dependency injection helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from tourplanner.domain.enums import UserRole
from tourplanner.infrastructure.database import async_session_factory


@dataclass(frozen=True)
class CurrentUser:
    user_id: int
    role: UserRole


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async DB session; commit on success, rollback on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_current_user(
    x_user_id: Optional[int] = Header(None),
    x_user_role: Optional[str] = Header(None),
) -> CurrentUser:
    """
    Identity forwarded by the upstream auth gateway.

    Sessions and tokens are handled before requests reach this service; it
    only trusts the ``X-User-Id`` / ``X-User-Role`` pair.
    """
    if x_user_id is None or x_user_role is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        role = UserRole(x_user_role.upper())
    except ValueError:
        raise HTTPException(status_code=401, detail="Unknown user role")
    return CurrentUser(user_id=x_user_id, role=role)
