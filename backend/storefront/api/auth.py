import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from storefront.api.deps import get_password_hasher, get_token_service, get_user_store
from storefront.auth import PasswordHasher, TokenService
from storefront.errors import InvalidCredentials, MissingField
from storefront.store import UserStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


class CredentialsRequest(BaseModel):
    username: str | None = None
    password: str | None = None


class UserResponse(BaseModel):
    id: int
    username: str
    role: str
    created_at: datetime


class TokenResponse(BaseModel):
    token: str


@router.post("/register", response_model=UserResponse, status_code=201)
def register(
    body: CredentialsRequest,
    store: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    if not body.username or not body.password:
        raise MissingField()
    user = store.create(body.username, hasher.hash(body.password))
    return user


@router.post("/login", response_model=TokenResponse)
def login(
    body: CredentialsRequest,
    store: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
):
    if not body.username or not body.password:
        raise InvalidCredentials()
    user = store.find_by_username(body.username)
    if not user:
        hasher.verify_dummy(body.password)
        logger.info("Failed login: unknown username")
        raise InvalidCredentials()
    if not hasher.verify(body.password, user.password_hash):
        logger.info(f"Failed login for {body.username!r}: wrong password")
        raise InvalidCredentials()
    return TokenResponse(token=tokens.issue(user.id, user.role))
