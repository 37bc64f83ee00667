from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
from sebeta_mart.config import settings
from sebeta_mart.database import get_db
from sebeta_mart.utils.security import verify_token
from sebeta_mart.models.user import User, UserRole, STAFF_ROLES


async def get_current_user(
    request: Request,
    db: Session = Depends(get_db)
) -> User:
    """Resolve the session cookie to the logged-in user"""
    token = request.cookies.get(settings.COOKIE_NAME)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token, authorization denied"
        )

    user_id = verify_token(token)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token is not valid"
        )

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token is not valid"
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )

    return user


def require_roles(*roles: UserRole):
    """Dependency factory: only users holding one of ``roles`` get through"""
    allowed = set(roles)

    async def _require_roles(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied"
            )
        return current_user

    return _require_roles


require_buyer = require_roles(UserRole.BUYER)
require_seller = require_roles(UserRole.SELLER)
require_delivery = require_roles(UserRole.DELIVERY)
require_staff = require_roles(*STAFF_ROLES)
require_admin = require_roles(UserRole.ADMIN)
