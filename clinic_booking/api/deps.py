from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional
import logging

from ..core.database import AppContext, get_context, get_db
from ..core.exceptions import InternalStoreError
from ..core.security import security, AuthenticationError, TokenPayload, TokenService
from ..models.user import User

logger = logging.getLogger(__name__)


def get_token_service(context: AppContext = Depends(get_context)) -> TokenService:
    return context.token_service


def get_request_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    context: AppContext = Depends(get_context),
) -> str:
    """Take the bearer token from the Authorization header, falling back to the cookie."""
    if credentials and credentials.credentials:
        return credentials.credentials

    token = request.cookies.get(context.settings.TOKEN_COOKIE_NAME)
    if token:
        return token

    logger.warning(f"{request.method} {request.url.path}: no token supplied")
    raise AuthenticationError("Authentication token missing")


def get_current_user_token(
    request: Request,
    token: str = Depends(get_request_token),
    token_service: TokenService = Depends(get_token_service),
) -> TokenPayload:
    """Verify the request's token and return its claims."""
    try:
        return token_service.verify(token)
    except AuthenticationError:
        logger.warning(f"{request.method} {request.url.path}: rejected invalid or expired token")
        raise


def get_current_user(
    token_payload: TokenPayload = Depends(get_current_user_token),
    db: Session = Depends(get_db),
) -> User:
    """Get current authenticated user from database."""
    try:
        user = db.get(User, token_payload.user_id)
    except SQLAlchemyError:
        logger.exception(f"Loading user id={token_payload.user_id} for authentication failed")
        raise InternalStoreError()

    if not user:
        logger.warning(f"Token for user id={token_payload.user_id} refers to a missing user")
        raise AuthenticationError("User not found")

    return user
