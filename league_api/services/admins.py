from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from league_api.core.errors import AuthenticationError, InvalidInputError, InvalidStateError
from league_api.core.logging import logger
from league_api.core.security import (
    MAX_PASSWORD_BYTES, create_access_token, hash_password, password_too_long, verify_password,
)
from league_api.data.database import transaction
from league_api.data.models import Admin
from league_api.services.teams import clean_name

ADMIN_EXISTS = "admin already exists. only 1 admin is allowed to register"
MIN_PASSWORD_LENGTH = 8


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class AdminService:
    def __init__(self, db: Session):
        self.db = db

    def register(self, name: str, email: str, password: str) -> Admin:
        name = clean_name(name)
        email = normalize_email(email)
        if not email:
            raise InvalidInputError("email must not be empty")
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise InvalidInputError(f"password must be at least {MIN_PASSWORD_LENGTH} characters")
        if password_too_long(password):
            raise InvalidInputError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")

        if self.db.scalar(select(func.count(Admin.id))):
            logger.warning(f"Rejected admin registration for {email}: an admin already exists")
            raise InvalidStateError(ADMIN_EXISTS)

        admin = Admin(name=name, email=email, password_hash=hash_password(password))
        try:
            with transaction(self.db):
                self.db.add(admin)
        except IntegrityError:
            # The singleton column caught a registration that raced past the check
            raise InvalidStateError(ADMIN_EXISTS)

        logger.info(f"Registered admin {admin.id} ({email})")
        return admin

    def find_by_email(self, email: str):
        return self.db.execute(
            select(Admin).where(Admin.email == normalize_email(email))
        ).scalar_one_or_none()

    def login(self, email: str, password: str):
        """Return ``(token, admin)`` for valid credentials."""
        admin = self.find_by_email(email)
        if not admin or not verify_password(password or "", admin.password_hash):
            logger.warning(f"Failed login attempt for {normalize_email(email)}")
            raise AuthenticationError("invalid email or password")

        return create_access_token(admin), admin


def get_admin_service(db: Session):
    return AdminService(db)
