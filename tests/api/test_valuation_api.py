"""
API tests for valuation, positions and movers endpoints.

Tests cover:
- Health and root endpoints
- Replacing and listing positions
- Manual refresh and the latest snapshot
- Busy, stopped and discarded refresh triggers
- Top movers
- Validation errors (422)
"""

from fastapi.testclient import TestClient

from livefolio.app_context import get_app_context
from livefolio.domain.models import LoopState


POSITION_ROWS = [
    {"symbol": "IFX.DE", "side": "BUY", "volume": "10", "open_price": "30.00"},
    {"symbol": "IFX.DE", "side": "BUY", "volume": "30", "open_price": "34.00"},
    {"symbol": "SAP.DE", "side": "BUY", "volume": "2", "open_price": "200", "market_price": "249"},
    {"symbol": "XYZ.DE", "side": "SELL", "volume": "1", "open_price": "5"},
]


# =============================================================================
# BASIC ENDPOINTS
# =============================================================================


class TestBasicEndpoints:
    """Tests for /health and /."""

    def test_health(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_root(self, client: TestClient):
        data = client.get("/").json()

        assert data["app"] == "livefolio"
        assert data["docs"] == "/docs"


# =============================================================================
# POSITIONS
# =============================================================================


class TestPositionsAPI:
    """Tests for GET/POST /positions."""

    def test_replace_positions_consolidates_rows(self, client: TestClient):
        """
        GIVEN four raw rows, two of them for IFX.DE
        WHEN I POST /positions
        THEN three consolidated positions are returned
        """
        response = client.post("/positions", json={"rows": POSITION_ROWS})

        assert response.status_code == 200
        data = response.json()
        assert [p["symbol"] for p in data["positions"]] == ["IFX.DE", "SAP.DE", "XYZ.DE"]
        assert data["positions"][0]["total_volume"] == 40
        assert data["positions"][0]["open_price"] == 33
        assert data["positions"][1]["last_known_market_price"] == 249
        assert data["rejected"] == []

    def test_rejected_groups_are_reported(self, client: TestClient):
        response = client.post("/positions", json={"rows": [
            {"symbol": "CBK.DE", "side": "BUY", "volume": "0", "open_price": "12"},
        ]})

        data = response.json()
        assert data["positions"] == []
        assert len(data["rejected"]) == 1
        assert "CBK.DE" in data["rejected"][0]

    def test_list_positions(self, client: TestClient):
        client.post("/positions", json={"rows": POSITION_ROWS})

        data = client.get("/positions").json()

        assert len(data["positions"]) == 3

    def test_invalid_side_is_rejected(self, client: TestClient):
        response = client.post("/positions", json={"rows": [
            {"symbol": "SAP.DE", "side": "HOLD", "volume": "1", "open_price": "1"},
        ]})

        assert response.status_code == 422


# =============================================================================
# VALUATION
# =============================================================================


class TestValuationAPI:
    """Tests for /valuation and /valuation/refresh."""

    def test_valuation_is_pending_before_refresh(self, client: TestClient):
        client.post("/positions", json={"rows": POSITION_ROWS})

        data = client.get("/valuation").json()

        assert data["state"] == "idle"
        assert data["as_of"] is None
        assert {p["status"] for p in data["positions"]} == {"pending"}

    def test_refresh_values_positions(self, client: TestClient):
        """
        GIVEN IFX.DE 40 @ 33 and SAP.DE 2 @ 200, priced at 33.00 and 250.00
        WHEN I POST /valuation/refresh
        THEN profits are computed and the unpriced XYZ.DE is an error
        """
        client.post("/positions", json={"rows": POSITION_ROWS})

        response = client.post("/valuation/refresh")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "refreshed"
        positions = {p["symbol"]: p for p in data["valuation"]["positions"]}
        assert positions["IFX.DE"]["status"] == "ok"
        assert positions["IFX.DE"]["profit"] == 0
        assert positions["SAP.DE"]["profit"] == 100
        assert positions["SAP.DE"]["percent_return"] == 25
        assert positions["SAP.DE"]["provider"] == "scripted"
        assert positions["XYZ.DE"]["status"] == "error"
        assert positions["XYZ.DE"]["error"] == "all providers exhausted"

        totals = data["valuation"]["totals"]
        assert totals["total_profit"] == 100
        assert totals["total_investment"] == 1720
        assert totals["average_percent_return"] == 5.81
        assert totals["position_count"] == 2
        assert totals["failed_count"] == 1

    def test_latest_snapshot_after_refresh(self, client: TestClient):
        client.post("/positions", json={"rows": POSITION_ROWS})
        client.post("/valuation/refresh")

        data = client.get("/valuation").json()

        assert data["as_of"] is not None
        assert data["totals"]["position_count"] == 2

    def test_busy_refresh(self, client: TestClient, monkeypatch):
        """
        GIVEN a cycle that is still loading quotes
        WHEN I POST /valuation/refresh
        THEN the trigger is dropped with status "busy"
        """
        loop = get_app_context().loop
        monkeypatch.setattr(loop, "_state", LoopState.LOADING)

        response = client.post("/valuation/refresh")

        assert response.json() == {"status": "busy", "valuation": None}

    def test_refresh_after_teardown_is_stopped(self, client: TestClient, monkeypatch):
        loop = get_app_context().loop
        monkeypatch.setattr(loop, "_torn_down", True)

        response = client.post("/valuation/refresh")

        assert response.json() == {"status": "stopped", "valuation": None}

    def test_discarded_refresh(self, client: TestClient, monkeypatch):
        """
        GIVEN an idle loop whose cycle result is thrown away
        WHEN I POST /valuation/refresh
        THEN status is "discarded" rather than "busy"
        """
        loop = get_app_context().loop

        async def discarded():
            return None

        monkeypatch.setattr(loop, "refresh", discarded)

        response = client.post("/valuation/refresh")

        assert response.json() == {"status": "discarded", "valuation": None}


# =============================================================================
# MOVERS
# =============================================================================


class TestMoversAPI:
    """Tests for GET /movers."""

    def test_movers_ranked(self, client: TestClient):
        data = client.get("/movers").json()

        assert data["exchange"] == "XETRA"
        assert [m["symbol"] for m in data["gainers"]] == ["SAP.DE", "DTE.DE", "IFX.DE"]
        assert [m["symbol"] for m in data["losers"]] == ["IFX.DE", "DTE.DE", "SAP.DE"]
        assert data["gainers"][0]["change_percent"] == 2.5
        assert data["note"] is None

    def test_movers_top_n(self, client: TestClient):
        data = client.get("/movers", params={"top_n": 1}).json()

        assert len(data["gainers"]) == 1
        assert len(data["losers"]) == 1

    def test_movers_top_n_validation(self, client: TestClient):
        assert client.get("/movers", params={"top_n": 0}).status_code == 422
