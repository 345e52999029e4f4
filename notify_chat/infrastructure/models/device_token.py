"""SQLAlchemy model for registered device tokens."""

from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint

from notify_chat.domain.entities import DEFAULT_DEVICE_TYPE
from notify_chat.infrastructure.database import Base
from notify_chat.utils import utc_now_naive


class DeviceTokenModel(Base):
    """Push token registered by a user's device."""

    __tablename__ = "user_device_token"
    __table_args__ = (UniqueConstraint("user_id", "token", name="uq_user_device_token"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    token = Column(String(512), nullable=False)
    device_type = Column(String(20), nullable=False, default=DEFAULT_DEVICE_TYPE)
    created_at = Column(DateTime(), nullable=False, default=utc_now_naive)
    updated_at = Column(DateTime(), nullable=True)


__all__ = ["DeviceTokenModel"]
