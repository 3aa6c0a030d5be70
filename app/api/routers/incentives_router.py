import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_request_context
from app.core.permissions import RequestContext
from app.db.base import get_db
from app.schemas.daily_sale import DailySaleRead
from app.services.incentives.daily_metrics_service import DailyMetricsService
from app.services.incentives.errors import IncentiveError, InternalError

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/incentives", response_model=Dict[str, Any])
async def record_daily_metrics(
    request: Request,
    context: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db)
):
    """
    Add one submission of daily metrics to the staff member's record for that day.
    """
    try:
        body = await request.body()
        record = await DailyMetricsService.record_daily_metrics(db, context, body)
    except IncentiveError:
        raise
    except Exception as e:
        logger.exception("API POST /incentives Error")
        raise InternalError(detail=str(e))

    return {
        "message": "Daily data updated successfully",
        "data": DailySaleRead.model_validate(record).model_dump(by_alias=True, mode="json")
    }
