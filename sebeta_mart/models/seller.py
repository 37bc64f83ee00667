from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from datetime import datetime
from sebeta_mart.database import Base


class Seller(Base):
    """A seller's shop. One per seller-role user."""
    __tablename__ = "sellers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)
    shop_name = Column(String(255), nullable=False)
    shop_description = Column(Text, default="", nullable=False)
    shop_address = Column(String(500), default="", nullable=False)
    business_license = Column(String(255), default="", nullable=False)
    government_id = Column(String(255), default="", nullable=False)
    national_id_number = Column(String(50), default="", nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="shop")
