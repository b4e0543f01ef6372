"""Top movers API."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from livefolio.api.deps import get_context, get_movers_service
from livefolio.api.schemas import MoversResponse
from livefolio.app_context import AppContext
from livefolio.services import TopMoversService

router = APIRouter(prefix="/movers", tags=["movers"])


@router.get("", response_model=MoversResponse)
async def get_movers(
    top_n: Optional[int] = Query(
        None, ge=1, le=500, description="Rows per list (default from settings)"
    ),
    context: AppContext = Depends(get_context),
    service: TopMoversService = Depends(get_movers_service),
):
    """Return the exchange's top gainers and losers by daily change percent."""
    view = await service.build_movers(top_n or context.settings.movers_top_n)
    return MoversResponse.from_view(view)
