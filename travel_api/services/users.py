"""Credential store: user lookups and creation over a SQLAlchemy session."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from travel_api.core.errors import EmailInUseError
from travel_api.models.user import User
from travel_api.schemas.auth import Role

logger = logging.getLogger(__name__)


class UserRepository:
    """Keyed reads and writes of User rows. One instance per request session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_email(self, email: str) -> User | None:
        return self._session.query(User).filter(User.email == email).first()

    def get_by_id(self, user_id: int) -> User | None:
        return self._session.get(User, user_id)

    def list_all(self) -> list[User]:
        return self._session.query(User).order_by(User.id).all()

    def create(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        role: Role = Role.USER,
    ) -> User:
        """
        Insert and commit a new user.

        Raises EmailInUseError when the unique email constraint rejects the row,
        which covers a concurrent registration that passed the existence check.
        """
        user = User(name=name, email=email, password_hash=password_hash, role=role.value)
        self._session.add(user)
        try:
            self._session.commit()
        except IntegrityError as e:
            self._session.rollback()
            logger.info("User insert rejected by unique constraint")
            raise EmailInUseError() from e
        self._session.refresh(user)
        return user
