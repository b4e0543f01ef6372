"""Live valuation API: current snapshot, manual refresh, positions."""

from fastapi import APIRouter, Depends

from livefolio.api.deps import get_valuation_loop
from livefolio.api.schemas import (
    PortfolioValuationOut,
    PositionOut,
    PositionsReplace,
    PositionsResponse,
    RefreshResponse,
)
from livefolio.domain.models import LoopState, RawPositionRow, Side
from livefolio.services import LiveValuationLoop

router = APIRouter(tags=["valuation"])


@router.get("/valuation", response_model=PortfolioValuationOut)
def get_valuation(loop: LiveValuationLoop = Depends(get_valuation_loop)):
    """Return the latest valuation snapshot (positions are pending until the first cycle)."""
    return PortfolioValuationOut.from_view(loop.valuation, state=loop.state.value)


@router.post("/valuation/refresh", response_model=RefreshResponse)
async def refresh_valuation(loop: LiveValuationLoop = Depends(get_valuation_loop)):
    """
    Run a valuation cycle now.

    Status is "busy" when a cycle was already loading, "stopped" once the
    loop has been torn down, and "discarded" when the positions were replaced
    while quotes were loading.
    """
    was_idle = loop.state == LoopState.IDLE
    valuation = await loop.refresh()
    if valuation is None:
        if loop.is_torn_down:
            return RefreshResponse(status="stopped")
        if not was_idle:
            return RefreshResponse(status="busy")
        return RefreshResponse(status="discarded")
    return RefreshResponse(
        status="refreshed",
        valuation=PortfolioValuationOut.from_view(valuation, state=loop.state.value),
    )


@router.get("/positions", response_model=PositionsResponse)
def list_positions(loop: LiveValuationLoop = Depends(get_valuation_loop)):
    """List the consolidated positions currently being valued."""
    return PositionsResponse(positions=[PositionOut.from_model(p) for p in loop.positions])


@router.post("/positions", response_model=PositionsResponse)
def replace_positions(
    body: PositionsReplace,
    loop: LiveValuationLoop = Depends(get_valuation_loop),
):
    """Consolidate raw rows and replace the positions being valued."""
    rows = [
        RawPositionRow(
            symbol=r.symbol,
            side=Side(r.side),
            volume=r.volume,
            open_price=r.open_price,
            market_price=r.market_price,
            open_time=r.open_time,
        )
        for r in body.rows
    ]
    result = loop.load_rows(rows)
    return PositionsResponse(
        positions=[PositionOut.from_model(p) for p in result.positions],
        rejected=[e.message for e in result.rejected],
    )
