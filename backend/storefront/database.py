from collections.abc import Generator

from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, create_engine

from storefront.config import settings

engine = create_engine(settings.database_url, echo=False)


def init_db(bind: Engine = engine) -> None:
    import storefront.models  # noqa: F401  registers the tables with SQLModel metadata

    SQLModel.metadata.create_all(bind)


def ping(bind: Engine = engine) -> bool:
    try:
        with bind.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError:
        return False
    return True


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session
