"""Public liveness endpoint."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Literal

import asyncpg
from fastapi import APIRouter

from src.config import Settings
from src.dependencies import AppSettings
from src.models.base import BloomBase, utc_now
from src.services.supabase import StoreError, get_pool

router = APIRouter(tags=["system"])
logger = logging.getLogger("bloom.health")


class HealthRead(BloomBase):
    status: Literal["healthy", "degraded"]
    version: str
    environment: str
    database: Literal["connected", "unreachable"]
    token_verification: Literal["hs256", "jwks"]
    timestamp: datetime


async def _database_reachable() -> bool:
    try:
        async with get_pool().acquire() as conn:
            await conn.fetchval("SELECT 1")
    except StoreError as exc:
        logger.warning("Health check skipped DB probe: %s", exc.message)
        return False
    except (OSError, asyncpg.PostgresError, asyncpg.InterfaceError) as exc:
        logger.warning("Health check DB probe failed: %s", exc)
        return False
    return True


def _verification_mode(settings: Settings) -> Literal["hs256", "jwks"]:
    return "hs256" if settings.supabase_jwt_secret else "jwks"


@router.get("/health", response_model=HealthRead)
async def health_check(settings: AppSettings) -> HealthRead:
    """Always 200 while the process is up; ``status`` reflects the database."""
    db_ok = await _database_reachable()
    return HealthRead(
        status="healthy" if db_ok else "degraded",
        version=settings.app_version,
        environment=settings.environment,
        database="connected" if db_ok else "unreachable",
        token_verification=_verification_mode(settings),
        timestamp=utc_now(),
    )
