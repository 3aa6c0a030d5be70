import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError
from sqlalchemy.exc import DataError, IntegrityError, InterfaceError, OperationalError, StatementError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.permissions import PERMISSIONS, AuthorizationResult, RequestContext, check_permission
from app.crud.daily_sale import upsert_daily_sale
from app.crud.staff import get_staff
from app.db.models.daily_sale import DailySale
from app.schemas.daily_sale import DailyMetricsInput
from app.services.incentives.errors import (
    Forbidden,
    InternalError,
    MissingField,
    NotFound,
    StoreUnavailable,
    Unauthenticated,
    ValidationFailed,
)

logger = logging.getLogger(__name__)
settings = get_settings()


def parse_day_bucket(value: str) -> datetime:
    """Turn a ``YYYY-MM-DD`` string into midnight UTC of that calendar day.

    Months are 1-12 as written. Anything after the day component of an
    ISO-8601 timestamp (``2025-07-09T18:30:00``) is ignored, so every string
    naming the same day maps to the same bucket.

    Raises:
        ValueError: if the string is not a date or names an impossible day
    """
    day_part = value.strip().split("T", 1)[0].split(" ", 1)[0]
    parts = day_part.split("-")
    if len(parts) != 3:
        raise ValueError(f"Expected a YYYY-MM-DD date, got '{value}'")
    year, month, day = (int(part) for part in parts)
    return datetime(year, month, day, tzinfo=timezone.utc)


# SQLSTATE classes 22 (data exception) and 23 (integrity constraint violation)
_REJECTED_SQLSTATE_CLASSES = ("22", "23")


def _rejects_value(error: StatementError) -> bool:
    """True when the database refused the values rather than failed to run."""
    if isinstance(error, (IntegrityError, DataError)):
        return True
    orig = error.orig
    for candidate in (orig, getattr(orig, "__cause__", None)):
        if candidate is None:
            continue
        sqlstate = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if sqlstate and str(sqlstate)[:2] in _REJECTED_SQLSTATE_CLASSES:
            return True
        # Driver-side conversion failures, e.g. an int too large for the column
        if isinstance(candidate, (OverflowError, ValueError, TypeError)):
            return True
    return False


class DailyMetricsService:
    """Records daily staff performance metrics into per-day aggregates."""

    @staticmethod
    def authorize(context: Optional[RequestContext]) -> None:
        """Raise unless the caller may manage staff incentives."""
        outcome = check_permission(context, PERMISSIONS.STAFF_INCENTIVES_MANAGE)
        if outcome is AuthorizationResult.UNAUTHENTICATED:
            raise Unauthenticated()
        if outcome is AuthorizationResult.FORBIDDEN:
            raise Forbidden()

    @staticmethod
    def build_deltas(metrics: DailyMetricsInput) -> Dict[str, Any]:
        """Increments to apply for one submission.

        ``review_count`` grows by this submission's named plus photo reviews;
        it is never recomputed from the stored totals.
        """
        return {
            "service_sale": metrics.service_sale,
            "product_sale": metrics.product_sale,
            "customer_count": metrics.customer_count,
            "total_rating": metrics.total_rating,
            "reviews_with_name": metrics.reviews_with_name,
            "reviews_with_photo": metrics.reviews_with_photo,
            "review_count": (metrics.reviews_with_name or 0) + (metrics.reviews_with_photo or 0),
        }

    @staticmethod
    async def record_daily_metrics(
        db: AsyncSession,
        context: Optional[RequestContext],
        payload: Union[bytes, str, Dict[str, Any]]
    ) -> DailySale:
        """Validate a submission and add it to the staff member's record for that day.

        Args:
            db: Database session
            context: Caller identity and permissions
            payload: JSON body of the submission, raw or already decoded

        Returns:
            The DailySale row after the increment

        Raises:
            IncentiveError: one of its subclasses, carrying the HTTP status
        """
        DailyMetricsService.authorize(context)

        if isinstance(payload, (bytes, str)):
            try:
                payload = json.loads(payload)
            except ValueError as e:
                logger.error(f"Daily metrics body is not valid JSON: {e}")
                raise InternalError(detail=str(e))

        if not isinstance(payload, dict):
            raise ValidationFailed(detail="Request body must be a JSON object")
        try:
            metrics = DailyMetricsInput.model_validate(payload)
        except ValidationError as e:
            raise ValidationFailed(detail=str(e))

        if not metrics.staff_id or not metrics.date:
            raise MissingField()

        staff = await get_staff(db, metrics.staff_id)
        if staff is None:
            logger.info(f"Daily metrics rejected, unknown staff id {metrics.staff_id}")
            raise NotFound()

        try:
            target_date = parse_day_bucket(metrics.date)
        except ValueError as e:
            raise ValidationFailed(detail=str(e))

        deltas = DailyMetricsService.build_deltas(metrics)
        # Rollback expires loaded objects, so keep the key as a plain value
        staff_id = staff.id

        try:
            record = await asyncio.wait_for(
                upsert_daily_sale(db, staff_id, target_date, deltas),
                timeout=settings.STORE_TIMEOUT_SECONDS
            )
            await db.commit()
        except asyncio.TimeoutError:
            await db.rollback()
            logger.error(f"Upsert for staff {staff_id} on {target_date.date()} timed out")
            raise StoreUnavailable(detail="Timed out waiting for the database")
        except OverflowError as e:
            # Raised by the driver before the statement reaches the database
            await db.rollback()
            logger.warning(f"Store rejected daily metrics for staff {staff_id}: {e}")
            raise ValidationFailed(detail=str(e))
        except StatementError as e:
            await db.rollback()
            if _rejects_value(e):
                logger.warning(f"Store rejected daily metrics for staff {staff_id}: {e.orig}")
                raise ValidationFailed(detail=str(e.orig))
            if isinstance(e, (OperationalError, InterfaceError)):
                logger.error(f"Database unavailable while recording daily metrics: {e}")
                raise StoreUnavailable(detail=str(e.orig))
            logger.exception("Unexpected statement error while recording daily metrics")
            raise InternalError(detail=str(e))

        logger.info(
            f"Recorded daily metrics for staff {staff_id} on {target_date.date()} "
            f"(review_count +{deltas['review_count']})"
        )
        return record
