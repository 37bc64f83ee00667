"""
Script to create the first admin user from environment variables
Skipped when ADMIN_EMAIL / ADMIN_PASSWORD are unset or the user already exists
"""
import os
from sqlalchemy.exc import SQLAlchemyError
from sebeta_mart.database import SessionLocal
from sebeta_mart.models.user import User, UserRole
from sebeta_mart.utils.security import get_password_hash
from sebeta_mart.config import settings


def create_admin_from_env(db=None) -> bool:
    """Create admin user from environment variables"""
    owns_session = db is None
    db = db or SessionLocal()

    try:
        email = (os.getenv("ADMIN_EMAIL", "").strip() or settings.ADMIN_EMAIL).lower()
        password = os.getenv("ADMIN_PASSWORD", "").strip() or settings.ADMIN_PASSWORD
        name = os.getenv("ADMIN_NAME", "").strip() or settings.ADMIN_NAME
        phone = os.getenv("ADMIN_PHONE", "").strip() or settings.ADMIN_PHONE

        if not email or not password:
            return False  # No credentials provided, skip creation

        if db.query(User).filter(User.email == email).first():
            return False  # Admin already exists

        if len(password) < 6:
            print("[WARNING] Admin password too short, skipping admin creation")
            return False

        admin = User(
            full_name=name or "Admin",
            email=email,
            password_hash=get_password_hash(password),
            role=UserRole.ADMIN,
            phone_number=phone,
            is_active=True
        )

        db.add(admin)
        db.commit()
        db.refresh(admin)

        print("[SUCCESS] Admin user created from environment variables!")
        print(f"   Email: {admin.email}")
        print(f"   Name: {admin.full_name}")
        return True

    except SQLAlchemyError as e:
        db.rollback()
        print(f"[WARNING] Error creating admin from env: {e}")
        return False
    finally:
        if owns_session:
            db.close()


if __name__ == "__main__":
    create_admin_from_env()
