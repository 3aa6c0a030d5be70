from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
import uuid

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# Ranges of the daily_sales columns: numeric(12, 2) and 32-bit integer
NUMERIC_LIMIT = Decimal("1e10")
INT4_MIN = -(2 ** 31)
INT4_MAX = 2 ** 31 - 1


# Body of a metrics submission (input)
class DailyMetricsInput(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # Presence is checked by the service so that it can report MissingField
    staff_id: Optional[str] = None
    date: Optional[str] = None
    service_sale: Decimal = Field(default=Decimal(0), gt=-NUMERIC_LIMIT, lt=NUMERIC_LIMIT)
    product_sale: Decimal = Field(default=Decimal(0), gt=-NUMERIC_LIMIT, lt=NUMERIC_LIMIT)
    # Counts are stored in integer columns, so fractional counts are rejected
    customer_count: int = Field(default=0, ge=INT4_MIN, le=INT4_MAX)
    total_rating: Decimal = Field(default=Decimal(0), gt=-NUMERIC_LIMIT, lt=NUMERIC_LIMIT)
    reviews_with_name: int = Field(default=0, ge=INT4_MIN, le=INT4_MAX)
    reviews_with_photo: int = Field(default=0, ge=INT4_MIN, le=INT4_MAX)

    @field_validator("staff_id", "date", mode="before")
    @classmethod
    def _strip(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value


# Stored aggregate (output)
class DailySaleRead(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: uuid.UUID
    staff_id: uuid.UUID
    date: datetime
    service_sale: float
    product_sale: float
    customer_count: int
    total_rating: float
    reviews_with_name: int
    reviews_with_photo: int
    review_count: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("date", "created_at", "updated_at")
    @classmethod
    def _as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # SQLite hands back naive values; the stored instants are UTC
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
