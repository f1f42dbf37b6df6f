"""Repository classes encapsulating database operations.

Each repository is small and focused on a single aggregate (users,
applications). Repositories return SQLModel objects and perform
commits/refreshes where appropriate. Every application query is filtered
by the owning user id.
"""

from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from . import models


class UserRepository:
    """CRUD operations for `User` objects."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, user: models.User) -> models.User:
        """Persist a new user and return the managed instance.

        A duplicate email surfaces as `IntegrityError` from the unique
        index; the session is rolled back before it propagates.
        """
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise
        self.session.refresh(user)
        return user

    def get_by_email(self, email: str) -> Optional[models.User]:
        """Return a `User` by (already normalized) email or `None`."""
        stmt = select(models.User).where(models.User.email == email)
        return self.session.exec(stmt).first()

    def get(self, user_id: int) -> Optional[models.User]:
        """Get a `User` by primary key."""
        return self.session.get(models.User, user_id)


class ApplicationRepository:
    """Owner-scoped persistence for `Application` records."""
    def __init__(self, session: Session):
        self.session = session

    def add(self, application: models.Application) -> models.Application:
        self.session.add(application)
        self.session.commit()
        self.session.refresh(application)
        return application

    def save(self, application: models.Application) -> models.Application:
        """Write back a modified application."""
        return self.add(application)

    def list_by_owner(self, user_id: int) -> List[models.Application]:
        """Return the owner's applications, most recently updated first."""
        stmt = (
            select(models.Application)
            .where(models.Application.user_id == user_id)
            .order_by(col(models.Application.updated_at).desc(), col(models.Application.id).desc())
        )
        return list(self.session.exec(stmt).all())

    def get_owned(self, user_id: int, application_id: int) -> Optional[models.Application]:
        """Fetch an application only if it belongs to `user_id`."""
        stmt = select(models.Application).where(
            models.Application.id == application_id,
            models.Application.user_id == user_id,
        )
        return self.session.exec(stmt).first()

    def delete_owned(self, user_id: int, application_id: int) -> bool:
        """Delete an owned application; return False when nothing matched."""
        existing = self.get_owned(user_id, application_id)
        if existing is None:
            return False
        self.session.delete(existing)
        self.session.commit()
        return True

    def count_by_status(self, user_id: int) -> Dict[str, int]:
        """Return `{status: count}` for the statuses the owner actually uses."""
        stmt = (
            select(models.Application.status, func.count())
            .where(models.Application.user_id == user_id)
            .group_by(models.Application.status)
        )
        return {status: count for status, count in self.session.exec(stmt).all()}
