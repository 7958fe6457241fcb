import uuid
from sqlalchemy import Column, Numeric, String, DateTime, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base


class Platform(Base):
    __tablename__ = "platforms"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(64), nullable=False, unique=True)
    commission_percentage = Column(Numeric(5, 2), nullable=False, default=0)
    # PlatformRole value; NULL on rows created before roles existed
    role = Column(String(16))
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    bookings = relationship("Booking", back_populates="platform")
