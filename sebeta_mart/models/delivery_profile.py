"""
Delivery Profile Model
Vehicle and identity details of a delivery-role user, plus their availability
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
import enum
from sebeta_mart.database import Base


class AvailabilityStatus(str, enum.Enum):
    ONLINE = "online"
    OFFLINE = "offline"


class ProfileStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    SUSPENDED = "suspended"


class DeliveryProfile(Base):
    __tablename__ = "delivery_profiles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)

    # Vehicle & identification
    vehicle_type = Column(String(50), nullable=True)  # bike, car, van, etc.
    plate_number = Column(String(50), nullable=True)
    license_number = Column(String(50), nullable=True)
    national_id = Column(String(16), nullable=False)
    profile_image = Column(String(500), nullable=True)
    id_card_image = Column(String(500), nullable=True)

    # Status
    availability_status = Column(String(10), default=AvailabilityStatus.OFFLINE.value, nullable=False)
    status = Column(String(20), default=ProfileStatus.PENDING.value, nullable=False)  # admin verification

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="delivery_profile")

    def __repr__(self):
        return f"<DeliveryProfile user={self.user_id} ({self.availability_status})>"
