from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import logging

from ..models.user import User
from ..core.security import verify_password, get_password_hash, TokenService
from ..core.exceptions import (
    DuplicateEmailError, DuplicateUsernameError, NoSuchUserError,
    InvalidCredentialsError, InternalStoreError
)
from ..schemas.auth import UserLogin, UserRegister, AuthResponse

logger = logging.getLogger(__name__)


def mask_email(email: str) -> str:
    """``jdoe@example.com`` -> ``j***@example.com`` for log lines."""
    local, _, domain = email.partition("@")
    return f"{local[:1]}***@{domain}" if domain else "***"


class AuthService:
    def __init__(self, db: Session, token_service: TokenService):
        self.db = db
        self.token_service = token_service

    def register_user(self, user_data: UserRegister) -> AuthResponse:
        """Register a new user and issue their first token."""
        if self._find_by_email(user_data.email):
            logger.warning(f"register: email already registered ({mask_email(user_data.email)})")
            raise DuplicateEmailError()

        if self._find_by_username(user_data.username):
            logger.warning(f"register: username already taken ({user_data.username})")
            raise DuplicateUsernameError()

        new_user = User(
            role=user_data.role,
            username=user_data.username,
            email=user_data.email,
            password_hash=get_password_hash(user_data.password),
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            gender=user_data.gender,
            age=user_data.age,
            contact=user_data.contact,
            address=user_data.address,
        )

        try:
            self.db.add(new_user)
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email/username
            self.db.rollback()
            logger.warning(f"register: unique constraint violated for {mask_email(user_data.email)}")
            if self._find_by_email(user_data.email):
                raise DuplicateEmailError()
            raise DuplicateUsernameError()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"register: failed to persist user {mask_email(user_data.email)}")
            raise InternalStoreError()

        self.db.refresh(new_user)
        logger.info(f"Registered {new_user.role.value} {new_user.username} (id={new_user.id})")

        return AuthResponse(
            message="Registration successful!",
            token=self.token_service.issue(new_user),
        )

    def authenticate_user(self, login_data: UserLogin) -> AuthResponse:
        """Check email and password, and issue a token on success."""
        user = self._find_by_email(login_data.email)
        if not user:
            logger.warning(f"login: no user with email {mask_email(login_data.email)}")
            raise NoSuchUserError()

        if not verify_password(login_data.password, user.password_hash):
            logger.warning(f"login: wrong password for user id={user.id}")
            raise InvalidCredentialsError()

        logger.info(f"User id={user.id} logged in")
        return AuthResponse(
            message="Login successful!",
            token=self.token_service.issue(user),
        )

    def _find_by_email(self, email: str):
        try:
            return self.db.query(User).filter(User.email == email).first()
        except SQLAlchemyError:
            logger.exception(f"lookup of user by email {mask_email(email)} failed")
            raise InternalStoreError()

    def _find_by_username(self, username: str):
        try:
            return self.db.query(User).filter(User.username == username).first()
        except SQLAlchemyError:
            logger.exception(f"lookup of user by username {username} failed")
            raise InternalStoreError()
