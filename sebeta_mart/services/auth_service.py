from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from sebeta_mart.models.user import User
from sebeta_mart.utils.security import get_password_hash, verify_password
import logging

logger = logging.getLogger(__name__)


def register_user(db: Session, user_data) -> User:
    """Register a new user (public sign-up or admin-created staff)"""
    # Emails are stored lower-cased by the schema
    if db.query(User).filter(User.email == user_data.email).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists"
        )

    user = User(
        full_name=user_data.full_name,
        email=user_data.email,
        password_hash=get_password_hash(user_data.password),
        role=user_data.role,
        phone_number=user_data.phone_number,
    )

    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("Registered user %s as %s", user.id, user.role.value)
    return user


def authenticate_user(db: Session, email: str, password: str) -> User:
    """Authenticate user and return user object"""
    user = db.query(User).filter(User.email == email.lower()).first()
    if not user or not verify_password(password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid credentials"
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )

    return user
