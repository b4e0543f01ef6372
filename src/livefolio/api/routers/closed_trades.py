"""Closed trades API: monthly realized summary."""

from fastapi import APIRouter, Depends, Query

from livefolio.api.deps import get_closed_trades_service
from livefolio.api.schemas import MonthlySummaryResponse
from livefolio.services import ClosedTradesService

router = APIRouter(prefix="/closed-trades", tags=["closed-trades"])


@router.get("/summary", response_model=MonthlySummaryResponse)
def get_monthly_summary(
    offset: int = Query(
        0, ge=-120, le=0, description="Months relative to the current one (-1 = previous)"
    ),
    service: ClosedTradesService = Depends(get_closed_trades_service),
):
    """Return turnover, saldo and average percent return for one month."""
    return MonthlySummaryResponse.from_view(service.summary(offset), offset=offset)
