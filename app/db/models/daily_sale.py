import uuid
from sqlalchemy import Column, DateTime, Integer, Numeric, ForeignKey, Index, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from app.db.base import Base

# Columns that only ever grow through additive upserts
ACCUMULATED_FIELDS = (
    "service_sale",
    "product_sale",
    "customer_count",
    "total_rating",
    "reviews_with_name",
    "reviews_with_photo",
    "review_count",
)

class DailySale(Base):
    """Per-staff, per-day aggregate of incentive metrics."""
    __tablename__ = "daily_sales"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    staff_id = Column(UUID(as_uuid=True), ForeignKey("staff.id"), nullable=False)
    # Always midnight UTC of the calendar day
    date = Column(DateTime(timezone=True), nullable=False)
    service_sale = Column(Numeric(12, 2), nullable=False, default=0)
    product_sale = Column(Numeric(12, 2), nullable=False, default=0)
    customer_count = Column(Integer, nullable=False, default=0)
    total_rating = Column(Numeric(12, 2), nullable=False, default=0)
    reviews_with_name = Column(Integer, nullable=False, default=0)
    reviews_with_photo = Column(Integer, nullable=False, default=0)
    review_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    staff = relationship("Staff", back_populates="daily_sales")

    __table_args__ = (
        UniqueConstraint('staff_id', 'date', name='uq_daily_sales_staff_date'),
        Index('idx_daily_sales_date', 'date'),
    )

    def __repr__(self):
        return f"<DailySale(staff_id={self.staff_id}, date={self.date})>"
