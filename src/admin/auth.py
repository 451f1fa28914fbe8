"""Admin password authentication + Redis session management."""

from __future__ import annotations

import json
import secrets
from typing import Optional

import bcrypt
import structlog
from redis.asyncio import Redis

from src.config import settings

logger = structlog.get_logger()

SESSION_PREFIX = "admin_session:"
BCRYPT_ROUNDS = 12


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a password with bcrypt (for ADMIN_PASSWORD_HASH)."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a bcrypt hash. Malformed hashes never verify."""
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        return False


def authenticate(email: str, password: str) -> bool:
    """Check credentials against the configured admin account."""
    if not settings.admin_password_hash:
        logger.warning("admin_login_not_configured")
        return False
    if email.strip().lower() != settings.admin_email.lower():
        return False
    return verify_password(password, settings.admin_password_hash)


async def create_session(redis: Redis, email: str) -> str:
    """Create admin session in Redis.

    Returns:
        Session token (random string)
    """
    token = secrets.token_urlsafe(32)
    session_data = json.dumps({"email": email, "role": "admin"})

    await redis.setex(
        f"{SESSION_PREFIX}{token}",
        settings.admin_session_ttl_seconds,
        session_data,
    )

    logger.info("admin_session_created", email=email)

    return token


async def get_session(redis: Redis, token: str) -> Optional[dict]:
    """Get session data from Redis.

    Returns:
        Session dict with email and role, or None
    """
    if not token:
        return None

    data = await redis.get(f"{SESSION_PREFIX}{token}")
    if not data:
        return None

    try:
        return json.loads(data)
    except (json.JSONDecodeError, TypeError):
        return None


async def delete_session(redis: Redis, token: str) -> None:
    """Delete admin session from Redis."""
    await redis.delete(f"{SESSION_PREFIX}{token}")
