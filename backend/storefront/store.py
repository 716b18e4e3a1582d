"""Credential store over the ``users`` table."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from storefront.errors import DuplicateUsername, NotFound
from storefront.models.user import Role, User

logger = logging.getLogger(__name__)


class UserStore:
    def __init__(self, session: Session):
        self.session = session

    def create(self, username: str, password_hash: str, role: str = Role.user) -> User:
        user = User(username=username, password_hash=password_hash, role=str(role))
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as exc:
            # The unique index on username decides concurrent registrations.
            self.session.rollback()
            raise DuplicateUsername() from exc
        self.session.refresh(user)
        logger.info(f"Created user {user.id} ({user.role})")
        return user

    def find_by_username(self, username: str) -> User | None:
        return self.session.exec(select(User).where(User.username == username)).first()

    def get(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def list_all(self) -> list[User]:
        return list(self.session.exec(select(User).order_by(User.id)).all())

    def delete_by_id(self, user_id: int) -> None:
        user = self.get(user_id)
        if not user:
            raise NotFound()
        self.session.delete(user)
        self.session.commit()
        logger.info(f"Deleted user {user_id}")
