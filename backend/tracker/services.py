"""Business logic services used by HTTP controllers.

This module holds small service classes that coordinate repositories.
Services are intentionally thin: they perform validation, execute domain
logic and persist aggregates via repositories. Failures are raised as
`tracker.errors` exceptions which the API layer maps to status codes.
"""

import logging
from typing import Dict, List, Optional

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from . import models, repositories, schemas
from .auth import issue_token
from .config import settings
from .errors import AuthenticationFailed, Conflict, NotFound, ValidationFailed

PWD_CTX = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
logger = logging.getLogger("tracker.services")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _required_text(value: Optional[str], message: str) -> str:
    """Return `value` trimmed, raising ValidationFailed if it is empty."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationFailed(message)
    return value.strip()


def _optional_text(value: Optional[str]) -> str:
    return value.strip() if isinstance(value, str) else ""


def parse_status(value: Optional[str]) -> str:
    """Validate a status string against the five pipeline stages."""
    if value not in models.STATUSES:
        raise ValidationFailed("Invalid status")
    return value


class AuthService:
    """Credential store operations (register, lookup, login)."""
    def __init__(self, session: Session):
        self.session = session
        self.user_repo = repositories.UserRepository(session)

    def register(self, email: Optional[str], password: Optional[str]) -> models.User:
        """Create a new user with a hashed password.

        The email is trimmed and lowercased first. Uniqueness is left to the
        database: a duplicate insert is translated into `Conflict`.
        """
        if not isinstance(email, str) or not isinstance(password, str) or not email.strip():
            raise ValidationFailed("Email and password are required")
        if len(password) < settings.MIN_PASSWORD_LENGTH:
            raise ValidationFailed(f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters")
        user = models.User(email=normalize_email(email), password_hash=PWD_CTX.hash(password))
        try:
            created = self.user_repo.create(user)
        except IntegrityError:
            logger.warning("registration conflict for existing email")
            raise Conflict("Email already exists")
        logger.info("registered user id=%s", created.id)
        return created

    def find_by_email(self, email: str) -> Optional[models.User]:
        """Return the user for `email` (normalized before lookup) or `None`."""
        return self.user_repo.get_by_email(normalize_email(email))

    @staticmethod
    def verify_password(plain: str, password_hash: str) -> bool:
        """Check `plain` against a stored hash using the hashing context."""
        try:
            return PWD_CTX.verify(plain, password_hash)
        except (ValueError, TypeError):
            # unrecognised or corrupt hash
            return False

    def login(self, email: Optional[str], password: Optional[str]) -> str:
        """Verify credentials and return a signed token.

        Unknown emails and wrong passwords fail identically.
        """
        if not isinstance(email, str) or not isinstance(password, str):
            raise ValidationFailed("Email and password are required")
        user = self.find_by_email(email)
        if not user or not self.verify_password(password, user.password_hash):
            logger.info("failed login attempt")
            raise AuthenticationFailed("Invalid credentials")
        return issue_token(user.id)


class ApplicationService:
    """Validate and persist applications for a single owner at a time."""
    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.ApplicationRepository(session)

    def create(self, user_id: int, data: schemas.ApplicationCreate) -> models.Application:
        """Create an application, applying the documented defaults."""
        company = _required_text(data.company, "Company is required")
        role = _required_text(data.role, "Role is required")
        # an explicit null status is invalid; only an omitted one defaults
        status = parse_status(data.status) if "status" in data.model_fields_set else models.ApplicationStatus.applied.value
        now = models.utc_now_iso()
        application = models.Application(
            user_id=user_id,
            company=company,
            role=role,
            status=status,
            location=_optional_text(data.location),
            referral=bool(data.referral),
            source=_optional_text(data.source),
            notes=_optional_text(data.notes),
            created_at=now,
            updated_at=now,
        )
        created = self.repo.add(application)
        logger.info("created application id=%s user_id=%s", created.id, user_id)
        return created

    def list(self, user_id: int) -> List[models.Application]:
        return self.repo.list_by_owner(user_id)

    def get_owned(self, user_id: int, application_id: int) -> models.Application:
        application = self.repo.get_owned(user_id, application_id)
        if application is None:
            raise NotFound("Application not found")
        return application

    def update(self, user_id: int, application_id: int, patch: schemas.ApplicationPatch) -> models.Application:
        """Merge `patch` into an owned application.

        Every supplied field is validated before anything is written, so a
        rejected patch leaves the stored record untouched. `updated_at` is
        refreshed even when no field actually changes.
        """
        application = self.get_owned(user_id, application_id)
        status = parse_status(patch.status) if "status" in patch.model_fields_set else application.status
        company = patch.company.strip() if patch.company is not None else application.company
        role = patch.role.strip() if patch.role is not None else application.role
        if not company or not role:
            raise ValidationFailed("Company and role are required")

        application.company = company
        application.role = role
        application.status = status
        if patch.location is not None:
            application.location = patch.location.strip()
        if patch.referral is not None:
            application.referral = patch.referral
        if patch.source is not None:
            application.source = patch.source.strip()
        if patch.notes is not None:
            application.notes = patch.notes.strip()
        application.updated_at = models.utc_now_iso()
        saved = self.repo.save(application)
        logger.info("updated application id=%s user_id=%s status=%s", saved.id, user_id, saved.status)
        return saved

    def delete(self, user_id: int, application_id: int) -> None:
        """Delete an owned application; foreign or missing ids are NotFound."""
        if not self.repo.delete_owned(user_id, application_id):
            raise NotFound("Application not found")
        logger.info("deleted application id=%s user_id=%s", application_id, user_id)


class StatsService:
    """Per-owner status counts for the board header."""
    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.ApplicationRepository(session)

    def stats_for(self, user_id: int) -> Dict[str, object]:
        """Return `{byStatus, total}` with every status present.

        Statuses with no applications are reported as 0 so the mapping is
        never sparse, and `total` is the sum of the counts.
        """
        counts = self.repo.count_by_status(user_id)
        by_status = {status: counts.get(status, 0) for status in models.STATUSES}
        return {"byStatus": by_status, "total": sum(by_status.values())}
