import uuid
from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    property_id = Column(UUID(as_uuid=True), ForeignKey(
        "properties.id"), nullable=False, index=True)
    platform_id = Column(UUID(as_uuid=True), ForeignKey(
        "platforms.id"), nullable=False)
    check_in = Column(Date, nullable=False)
    check_out = Column(Date, nullable=False, index=True)
    nights = Column(Integer, nullable=False, default=0)
    gross_price = Column(Numeric(12, 2), nullable=False, default=0)
    commission = Column(Numeric(12, 2), nullable=False, default=0)
    commission_pinned = Column(Boolean, nullable=False, default=False)
    net_price = Column(Numeric(12, 2), nullable=False, default=0)
    average_daily_rate = Column(Numeric(12, 2), nullable=False, default=0)
    request_date = Column(Date)
    lead_time_days = Column(Integer)
    # feed UID for rows ingested from an iCal feed, NULL for manual entries
    ical_uid = Column(String(255), unique=True)
    notes = Column(String)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    property = relationship("Property", back_populates="bookings")
    platform = relationship("Platform", back_populates="bookings")
