import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from storefront.api.auth import router as auth_router
from storefront.api.deps import get_password_hasher
from storefront.api.users import router as users_router
from storefront.auth import PasswordHasher
from storefront.config import DEFAULT_SECRET_KEY, settings
from storefront.database import engine, get_session, init_db, ping
from storefront.errors import DuplicateUsername, StorefrontError
from storefront.models.user import Role
from storefront.store import UserStore

logger = logging.getLogger(__name__)


def seed_admin(
    store: UserStore,
    hasher: PasswordHasher,
    username: str | None,
    password: str | None,
) -> None:
    """Create the configured admin account if it does not exist yet."""
    if not username or not password:
        return
    existing = store.find_by_username(username)
    if existing:
        if existing.role != Role.admin:
            logger.warning(
                f"Admin account {username!r} exists with role {existing.role!r}; not seeded"
            )
        return
    try:
        store.create(
            username,
            hasher.hash(password),
            role=Role.admin,
        )
    except DuplicateUsername:
        logger.warning(f"Admin account {username!r} was created concurrently; not seeded")
        return
    logger.info(f"Seeded admin user {username!r}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.secret_key == DEFAULT_SECRET_KEY:
        logger.warning("STOREFRONT_SECRET_KEY is not set; using the insecure default")
    init_db(engine)
    if ping(engine):
        logger.info("Database connection ready")
    else:
        logger.error("Database ping failed")
    with Session(engine) as session:
        seed_admin(
            UserStore(session),
            get_password_hasher(),
            settings.admin_username,
            settings.admin_password,
        )
    yield


app = FastAPI(title="Storefront", version="0.1.0", lifespan=lifespan)


@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(f"Database error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(auth_router)
app.include_router(users_router)


@app.get("/health")
def health(session: Session = Depends(get_session)):
    if not ping(session.get_bind()):
        return JSONResponse(
            status_code=503, content={"status": "degraded", "database": "unavailable"}
        )
    return {"status": "ok", "database": "ok"}


if settings.static_dir and Path(settings.static_dir).is_dir():
    app.mount("/static", StaticFiles(directory=settings.static_dir), name="static")


def run() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
