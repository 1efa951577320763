from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import status
from fastapi.security import HTTPBearer
from pydantic import BaseModel, field_validator
from enum import Enum

from .exceptions import ServiceError

# Password hashing, work factor fixed at 10
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=10)

# Cookie fallback is handled by the authenticator, so a missing header is not an error here
security = HTTPBearer(auto_error=False)


class UserRole(str, Enum):
    DOCTOR = "doctor"
    PATIENT = "patient"


class TokenPayload(BaseModel):
    sub: str
    email: str
    role: UserRole
    iat: Optional[int] = None
    exp: int

    @field_validator("sub")
    @classmethod
    def sub_is_user_id(cls, value: str) -> str:
        int(value)
        return value

    @property
    def user_id(self) -> int:
        return int(self.sub)


# Password utilities
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Generate password hash."""
    return pwd_context.hash(password)


# Security exceptions
class AuthenticationError(ServiceError):
    title = "Unauthorized"

    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(
            status.HTTP_401_UNAUTHORIZED,
            detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class TokenService:
    """Issues and verifies the signed identity claims carried by clients.

    Tokens are stateless: nothing is stored server-side and there is no
    refresh, so an expired token means logging in again.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_hours: int = 5):
        if not secret_key:
            raise ValueError("TokenService requires a non-empty secret key")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.lifetime = timedelta(hours=expire_hours)

    def issue(self, user, now: Optional[datetime] = None) -> str:
        """Create a signed token for ``user`` valid for the configured lifetime."""
        issued_at = now or datetime.now(timezone.utc)
        to_encode = {
            "sub": str(user.id),
            "email": user.email,
            "role": UserRole(user.role).value,
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        return jwt.encode(to_encode, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenPayload:
        """Decode ``token``, raising AuthenticationError if it is bad or expired."""
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
            claims = TokenPayload(**payload)
        except (JWTError, ValueError):
            raise AuthenticationError("Invalid or expired token")

        return claims
