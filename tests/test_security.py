import pytest
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from pydantic import ValidationError

from clinic_booking.core.config import Settings
from clinic_booking.core.security import (
    AuthenticationError, TokenService, UserRole, get_password_hash, verify_password
)

SECRET = "unit-test-secret"


@pytest.fixture
def token_service():
    return TokenService(secret_key=SECRET)


@pytest.fixture
def user():
    return SimpleNamespace(id=42, email="drsmith@example.com", role=UserRole.DOCTOR)


class TestTokenService:

    def test_round_trip(self, token_service, user):
        """Verified claims carry the user's id, email and role."""
        claims = token_service.verify(token_service.issue(user))

        assert claims.user_id == 42
        assert claims.sub == "42"
        assert claims.email == "drsmith@example.com"
        assert claims.role == UserRole.DOCTOR

    def test_lifetime_is_five_hours(self, token_service, user):
        issued_at = datetime.now(timezone.utc).replace(microsecond=0)
        claims = token_service.verify(token_service.issue(user, now=issued_at))

        assert claims.exp - claims.iat == 5 * 3600

    def test_token_valid_just_before_expiry(self, token_service, user):
        issued_at = datetime.now(timezone.utc) - timedelta(hours=4, minutes=59)
        token = token_service.issue(user, now=issued_at)

        assert token_service.verify(token).email == user.email

    def test_expired_token_rejected(self, token_service, user):
        issued_at = datetime.now(timezone.utc) - timedelta(hours=5, minutes=1)
        token = token_service.issue(user, now=issued_at)

        with pytest.raises(AuthenticationError) as exc_info:
            token_service.verify(token)
        assert exc_info.value.status_code == 401

    def test_wrong_secret_rejected(self, token_service, user):
        token = token_service.issue(user)

        with pytest.raises(AuthenticationError):
            TokenService(secret_key="some-other-secret").verify(token)

    def test_tampered_payload_rejected(self, token_service, user):
        token = token_service.issue(user)
        other = token_service.issue(SimpleNamespace(id=1, email="x@example.com", role="patient"))

        header, _, signature = token.split(".")
        forged = ".".join([header, other.split(".")[1], signature])

        with pytest.raises(AuthenticationError):
            token_service.verify(forged)

    @pytest.mark.parametrize("token", ["", "garbage", "not.a.token"])
    def test_malformed_token_rejected(self, token_service, token):
        with pytest.raises(AuthenticationError):
            token_service.verify(token)

    def test_empty_secret_refused(self):
        with pytest.raises(ValueError):
            TokenService(secret_key="")


class TestPasswordHashing:

    def test_hash_is_salted(self):
        first = get_password_hash("PatientPass123")
        second = get_password_hash("PatientPass123")

        assert first != second
        assert first.startswith("$2b$10$")

    def test_verify_password(self):
        hashed = get_password_hash("PatientPass123")

        assert verify_password("PatientPass123", hashed)
        assert not verify_password("wrongpassword", hashed)


class TestSettings:

    def test_secret_key_required_in_production(self, monkeypatch):
        monkeypatch.delenv("SECRET_KEY", raising=False)

        with pytest.raises(ValidationError):
            Settings(_env_file=None, TESTING=False, DEBUG=False)

    def test_ephemeral_secret_when_testing(self, monkeypatch):
        monkeypatch.delenv("SECRET_KEY", raising=False)

        first = Settings(_env_file=None, TESTING=True)
        second = Settings(_env_file=None, TESTING=True)

        assert first.SECRET_KEY
        assert first.SECRET_KEY != second.SECRET_KEY

    def test_explicit_secret_used(self):
        settings = Settings(_env_file=None, TESTING=False, SECRET_KEY="from-environment")

        assert settings.SECRET_KEY == "from-environment"
