"""Pydantic schemas for the top movers API."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from livefolio.domain.views import Mover, MoversView


class MoverOut(BaseModel):
    symbol: str
    change_percent: float

    @classmethod
    def from_model(cls, mover: Mover) -> "MoverOut":
        return cls(symbol=mover.symbol, change_percent=float(mover.change_percent))


class MoversResponse(BaseModel):
    """Gainers and losers for one exchange."""

    exchange: str
    gainers: list[MoverOut]
    losers: list[MoverOut]
    as_of: Optional[datetime] = None
    note: Optional[str] = None

    @classmethod
    def from_view(cls, view: MoversView) -> "MoversResponse":
        return cls(
            exchange=view.exchange,
            gainers=[MoverOut.from_model(m) for m in view.gainers],
            losers=[MoverOut.from_model(m) for m in view.losers],
            as_of=view.as_of,
            note=view.note,
        )
