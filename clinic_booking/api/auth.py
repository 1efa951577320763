from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from ..core.config import Settings
from ..core.database import AppContext, get_context, get_db
from ..services.auth_service import AuthService
from ..schemas.auth import UserLogin, UserRegister, AuthResponse

router = APIRouter(tags=["Authentication"])


def set_token_cookie(response: Response, token: str, settings: Settings):
    """Hand the token to browser clients; API clients read it from the body."""
    response.set_cookie(
        key=settings.TOKEN_COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_HOURS * 3600,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    response: Response,
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_context),
):
    """Register a new patient or doctor and log them in."""
    auth_service = AuthService(db, context.token_service)
    result = auth_service.register_user(user_data)
    set_token_cookie(response, result.token, context.settings)
    return result


@router.post("/login", response_model=AuthResponse)
def login(
    login_data: UserLogin,
    response: Response,
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_context),
):
    """Authenticate user and return an access token."""
    auth_service = AuthService(db, context.token_service)
    result = auth_service.authenticate_user(login_data)
    set_token_cookie(response, result.token, context.settings)
    return result
