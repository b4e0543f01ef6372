"""
Unit tests for CSV import of brokerage exports.

Tests cover:
- Open positions sheet parsing
- Closed positions sheet parsing
- Spreadsheet serial and string timestamps
- Row errors and missing columns
"""

from datetime import datetime
from decimal import Decimal

import pytest
import pytz

from livefolio.core.exceptions import ValidationError
from livefolio.core.timezone import parse_export_datetime
from livefolio.csv import PositionCsvImporter
from livefolio.domain.models import Side
from livefolio.services import PositionConsolidator, merge_nearby_fills

WARSAW = pytz.timezone("Europe/Warsaw")


def _write(path: str, content: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)


@pytest.fixture
def importer() -> PositionCsvImporter:
    return PositionCsvImporter(WARSAW)


# =============================================================================
# OPEN POSITIONS
# =============================================================================


class TestOpenPositions:
    """Tests for reading an open positions sheet."""

    def test_rows_are_parsed(self, importer, temp_csv_file, open_positions_csv_content):
        """
        GIVEN an open positions export with three rows
        WHEN I read it
        THEN each row carries symbol, side, volume, prices and open time
        """
        _write(temp_csv_file, open_positions_csv_content)

        result = importer.read_open_positions(temp_csv_file)

        assert result.errors == []
        assert [r.symbol for r in result.rows] == ["IFX.DE", "SAP.DE", "CBK.DE"]
        ifx, sap, cbk = result.rows
        assert ifx.side == Side.BUY
        assert ifx.volume == Decimal("10")
        assert ifx.open_price == Decimal("30.00")
        assert ifx.market_price == Decimal("33.10")
        assert ifx.open_time == WARSAW.localize(datetime(2024, 3, 1, 9, 15, 2))
        assert sap.open_time == WARSAW.localize(datetime(2024, 3, 1, 12, 0, 0))
        assert cbk.side == Side.SELL
        assert cbk.market_price is None
        assert cbk.open_time is None

    def test_imported_rows_consolidate(self, importer, temp_csv_file, open_positions_csv_content):
        _write(temp_csv_file, open_positions_csv_content)

        rows = importer.read_open_positions(temp_csv_file).rows
        result = PositionConsolidator().consolidate(rows)

        assert len(result.positions) == 3

    def test_bad_rows_are_reported_and_skipped(self, importer, temp_csv_file):
        _write(temp_csv_file, (
            "Symbol,Type,Volume,Open price\n"
            "SAP.DE,BUY,1,180\n"
            "IFX.DE,HOLD,1,30\n"
            "CBK.DE,SELL,lots,12\n"
            ",,,\n"
        ))

        result = importer.read_open_positions(temp_csv_file)

        assert [r.symbol for r in result.rows] == ["SAP.DE"]
        assert result.errors == ["Row 3: Invalid type: HOLD", "Row 4: Invalid volume: lots"]
        assert result.skipped_count == 1

    @pytest.mark.parametrize("cell", ["NaN", "Infinity", "-inf"])
    def test_non_finite_numbers_are_row_errors(self, importer, temp_csv_file, cell):
        """
        GIVEN a SAP.DE row whose volume is not a finite number
        WHEN I read the sheet and consolidate it
        THEN the row is reported and IFX.DE is still consolidated
        """
        _write(temp_csv_file, (
            "Symbol,Type,Volume,Open price,Market price\n"
            "IFX.DE,BUY,10,30,33\n"
            f"SAP.DE,BUY,{cell},200,250\n"
        ))

        result = importer.read_open_positions(temp_csv_file)
        consolidated = PositionConsolidator().consolidate(result.rows)

        assert result.errors == [f"Row 3: Invalid volume: {cell}"]
        assert [p.symbol for p in consolidated.positions] == ["IFX.DE"]

    def test_missing_required_columns(self, importer, temp_csv_file):
        _write(temp_csv_file, "Symbol,Volume\nSAP.DE,1\n")

        with pytest.raises(ValidationError) as exc_info:
            importer.read_open_positions(temp_csv_file)

        assert "Type" in exc_info.value.message
        assert "Open price" in exc_info.value.message

    def test_missing_file(self, importer):
        with pytest.raises(ValidationError, match="File not found"):
            importer.read_open_positions("/nonexistent/positions.csv")

    def test_byte_order_mark_is_ignored(self, importer, temp_csv_file):
        with open(temp_csv_file, "w", encoding="utf-8-sig") as f:
            f.write("Symbol,Type,Volume,Open price\nSAP.DE,BUY,1,180\n")

        result = importer.read_open_positions(temp_csv_file)

        assert result.rows[0].symbol == "SAP.DE"


# =============================================================================
# CLOSED POSITIONS
# =============================================================================


class TestClosedTrades:
    """Tests for reading a closed positions sheet."""

    def test_closed_trades_and_fill_merge(
        self, importer, temp_csv_file, closed_positions_csv_content
    ):
        """
        GIVEN two DTE.DE fills closed 20 seconds apart and one SAP.DE trade
        WHEN I read and merge nearby fills
        THEN two trades remain and DTE.DE gross profit is summed
        """
        _write(temp_csv_file, closed_positions_csv_content)

        result = importer.read_closed_trades(temp_csv_file)
        merged = merge_nearby_fills(result.rows)

        assert len(result.rows) == 3
        assert result.rows[0].close_price == Decimal("22.00")
        assert [t.symbol for t in merged] == ["DTE.DE", "SAP.DE"]
        assert merged[0].volume == Decimal("20")
        assert merged[0].gross_profit == Decimal("70.00")

    def test_missing_gross_profit_defaults_to_zero(self, importer, temp_csv_file):
        _write(temp_csv_file, (
            "Symbol,Type,Volume,Open price,Close time,Close price\n"
            "SAP.DE,BUY,1,170,2024-03-02 10:00:00,175\n"
        ))

        result = importer.read_closed_trades(temp_csv_file)

        assert result.rows[0].gross_profit == Decimal("0")


# =============================================================================
# TIMESTAMP PARSING
# =============================================================================


class TestParseExportDatetime:
    """Tests for export timestamp parsing."""

    def test_serial_number(self):
        assert parse_export_datetime(45352, WARSAW) == WARSAW.localize(datetime(2024, 3, 1))

    def test_string_with_milliseconds(self):
        parsed = parse_export_datetime("2024-03-01 09:15:02.123", WARSAW)

        assert parsed == WARSAW.localize(datetime(2024, 3, 1, 9, 15, 2, 123000))

    def test_aware_string_keeps_offset(self):
        parsed = parse_export_datetime("2024-03-01T09:15:00+00:00", WARSAW)

        assert parsed.utcoffset().total_seconds() == 0

    @pytest.mark.parametrize("value", [None, "", "   ", "not a date", 1e12])
    def test_unusable_values_give_none(self, value):
        assert parse_export_datetime(value, WARSAW) is None
