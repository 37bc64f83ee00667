from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from sebeta_mart.database import get_db
from sebeta_mart.config import settings
from sebeta_mart.schemas.user import UserCreate, UserLogin
from sebeta_mart.schemas.common import ResponseModel
from sebeta_mart.services.auth_service import register_user, authenticate_user
from sebeta_mart.models.user import User
from sebeta_mart.utils.security import create_session_token
from sebeta_mart.utils.formatters import format_user
from sebeta_mart.api.deps import get_current_user

router = APIRouter()


def _set_session_cookie(response: Response, token: str):
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.post("/register", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
def register(user_data: UserCreate, db: Session = Depends(get_db)):
    """Register a buyer, seller or delivery account"""
    user = register_user(db, user_data)
    return ResponseModel(
        success=True,
        data={"user": format_user(user)},
        message="User registered successfully"
    )


@router.post("/login", response_model=ResponseModel)
def login(credentials: UserLogin, response: Response, db: Session = Depends(get_db)):
    """Login with email and password; the session travels in an HTTP-only cookie"""
    user = authenticate_user(db, email=credentials.email, password=credentials.password)
    _set_session_cookie(response, create_session_token(user))

    return ResponseModel(
        success=True,
        data={"user": format_user(user)},
        message="Login successful"
    )


@router.get("/me", response_model=ResponseModel)
def me(current_user: User = Depends(get_current_user)):
    """Current session user"""
    return ResponseModel(success=True, data={"user": format_user(current_user)})


@router.post("/logout", response_model=ResponseModel)
def logout(response: Response):
    """Expire the session cookie"""
    response.delete_cookie(
        key=settings.COOKIE_NAME,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )
    return ResponseModel(success=True, message="Logged out successfully")
