"""Washline — FastAPI dependencies (DB session, Redis, pagination)."""
from typing import Annotated

import redis.asyncio as redis
from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from washline.config import get_settings
from washline.core.redis import get_redis
from washline.db.session import get_db

settings = get_settings()

DbSession = Annotated[AsyncSession, Depends(get_db)]
RedisClient = Annotated[redis.Redis, Depends(get_redis)]

Page = Annotated[int, Query(ge=1)]
Limit = Annotated[int, Query(ge=1, le=settings.PAGE_SIZE_LIMIT)]
