"""
FastAPI dependencies
"""

from typing import AsyncGenerator, Optional
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from core.config import settings
from core.database import async_session_maker
from imports.factory import create_status_manager
from imports.status_manager import ImportStatusManager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Database session for one request"""
    async with async_session_maker() as session:
        yield session


async def get_status_manager(db: AsyncSession = Depends(get_db)) -> ImportStatusManager:
    return create_status_manager(db)


async def require_api_key(x_api_key: Optional[str] = Header(None)):
    """Guard admin actions when API_KEY is configured"""
    if settings.API_KEY and x_api_key != settings.API_KEY:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key"
        )
