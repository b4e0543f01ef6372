"""CSV import of brokerage export sheets."""

import csv
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Generic, Optional, TypeVar

import pytz

from livefolio.core.exceptions import ValidationError
from livefolio.core.timezone import EXPORT_TZ, parse_export_datetime
from livefolio.domain.models import ClosedTradeRow, RawPositionRow, Side

RowT = TypeVar("RowT")

# Required columns; alternatives are listed in lookup order
OPEN_POSITION_COLUMNS = {
    "symbol": ("Symbol",),
    "type": ("Type",),
    "volume": ("Volume",),
    "open_price": ("Open price",),
}
MARKET_PRICE_COLUMNS = ("Market price", "Price", "Close price")
OPEN_TIME_COLUMNS = ("Open time", "Time")
CLOSED_TRADE_COLUMNS = {
    **OPEN_POSITION_COLUMNS,
    "close_price": ("Close price",),
    "close_time": ("Close time", "Close Time"),
}
GROSS_PROFIT_COLUMNS = ("Gross P/L",)


@dataclass
class RowImport(Generic[RowT]):
    """Rows read from a file plus per-row errors."""

    rows: list[RowT] = field(default_factory=list)
    skipped_count: int = 0
    errors: list[str] = field(default_factory=list)


def _first(row: dict, names: tuple[str, ...]) -> Optional[str]:
    for name in names:
        value = row.get(name)
        if value is not None and str(value).strip() != "":
            return str(value).strip()
    return None


def _decimal(value: Optional[str], column: str) -> Decimal:
    if value is None:
        raise ValidationError(f"Missing {column}")
    try:
        number = Decimal(value.replace(",", "."))
    except InvalidOperation:
        raise ValidationError(f"Invalid {column}: {value}")
    if not number.is_finite():
        raise ValidationError(f"Invalid {column}: {value}")
    return number


def _optional_decimal(value: Optional[str], column: str) -> Optional[Decimal]:
    return None if value is None else _decimal(value, column)


def _side(value: Optional[str]) -> Side:
    try:
        return Side((value or "").strip().upper())
    except ValueError:
        raise ValidationError(f"Invalid type: {value}")


class PositionCsvImporter:
    """
    Reads open and closed position sheets exported as CSV.

    Expected headers follow the broker export: Symbol, Type, Volume,
    Open price, Market price, Open time (closed sheets add Close price,
    Close time and Gross P/L). Naive timestamps use the export timezone.
    """

    def __init__(self, export_tz: Optional[pytz.BaseTzInfo] = None):
        self._tz = export_tz or EXPORT_TZ

    def read_open_positions(self, path: str | Path) -> RowImport[RawPositionRow]:
        """Read an open positions sheet. Bad rows are reported and skipped."""
        return self._read(path, OPEN_POSITION_COLUMNS, self._open_row)

    def read_closed_trades(self, path: str | Path) -> RowImport[ClosedTradeRow]:
        """Read a closed positions sheet. Bad rows are reported and skipped."""
        return self._read(path, CLOSED_TRADE_COLUMNS, self._closed_row)

    def _read(self, path, required: dict[str, tuple[str, ...]], parse_row) -> RowImport:
        file_path = Path(path)
        if not file_path.exists():
            raise ValidationError(f"File not found: {path}")

        result: RowImport = RowImport()
        with open(file_path, newline="", encoding="utf-8-sig") as csvfile:
            reader = csv.DictReader(csvfile)

            # Validate columns
            fieldnames = set(reader.fieldnames or [])
            missing = [names[0] for names in required.values() if not fieldnames.intersection(names)]
            if missing:
                raise ValidationError(f"Missing required columns: {missing}")

            for row_num, row in enumerate(reader, start=2):  # Start at 2 (header is row 1)
                if not any((v or "").strip() for v in row.values() if isinstance(v, str)):
                    result.skipped_count += 1
                    continue
                try:
                    result.rows.append(parse_row(row))
                except ValidationError as e:
                    result.errors.append(f"Row {row_num}: {e.message}")

        return result

    def _open_row(self, row: dict) -> RawPositionRow:
        return RawPositionRow(
            symbol=_first(row, ("Symbol",)) or "",
            side=_side(_first(row, ("Type",))),
            volume=_decimal(_first(row, ("Volume",)), "volume"),
            open_price=_decimal(_first(row, ("Open price",)), "open price"),
            market_price=_optional_decimal(_first(row, MARKET_PRICE_COLUMNS), "market price"),
            open_time=parse_export_datetime(_first(row, OPEN_TIME_COLUMNS), self._tz),
        )

    def _closed_row(self, row: dict) -> ClosedTradeRow:
        gross = _optional_decimal(_first(row, GROSS_PROFIT_COLUMNS), "gross P/L")
        return ClosedTradeRow(
            symbol=_first(row, ("Symbol",)) or "",
            side=_side(_first(row, ("Type",))),
            volume=_decimal(_first(row, ("Volume",)), "volume"),
            open_price=_decimal(_first(row, ("Open price",)), "open price"),
            close_price=_decimal(_first(row, ("Close price",)), "close price"),
            close_time=parse_export_datetime(_first(row, ("Close time", "Close Time")), self._tz),
            gross_profit=gross if gross is not None else Decimal("0"),
        )
