import logging
from collections.abc import Callable
from functools import lru_cache

from fastapi import Depends, Header
from sqlmodel import Session

from storefront.auth import Claims, PasswordHasher, TokenService, is_authorized
from storefront.config import settings
from storefront.database import get_session
from storefront.errors import Forbidden, MissingToken, TokenError, Unauthorized
from storefront.store import UserStore

logger = logging.getLogger(__name__)


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=settings.bcrypt_rounds)


@lru_cache
def get_token_service() -> TokenService:
    return TokenService(
        secret=settings.secret_key,
        algorithm=settings.token_algorithm,
        expire_minutes=settings.token_expire_minutes,
    )


def get_user_store(session: Session = Depends(get_session)) -> UserStore:
    return UserStore(session)


async def get_token(authorization: str | None = Header(default=None)) -> str:
    """Read the raw token from the ``authorization`` header.

    A ``Bearer `` prefix is tolerated and stripped.
    """
    token = (authorization or "").strip()
    scheme, _, credentials = token.partition(" ")
    if scheme.lower() == "bearer":
        token = credentials.strip()
    if not token:
        logger.info("No token provided")
        raise MissingToken()
    return token


async def get_claims(
    token: str = Depends(get_token),
    tokens: TokenService = Depends(get_token_service),
) -> Claims:
    try:
        return tokens.verify(token)
    except TokenError as exc:
        logger.info(f"Invalid token: {type(exc).__name__}")
        raise Unauthorized() from exc


def require_roles(*roles: str) -> Callable[..., Claims]:
    async def check_roles(claims: Claims = Depends(get_claims)) -> Claims:
        if not is_authorized(claims, roles):
            logger.info(f"Denied subject {claims.subject_id} with role {claims.role!r}")
            raise Forbidden()
        return claims

    return check_roles
