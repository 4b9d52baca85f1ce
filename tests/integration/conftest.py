"""Integration test fixtures — real adapters and cache, provider HTTP mocked."""

from __future__ import annotations

import httpx
import pytest
import respx

OWID_URL = "https://raw.githubusercontent.com/owid/energy-data/master/owid-energy-data.json"
YAHOO_CHART = r"^https://query1\.finance\.yahoo\.com/v8/finance/chart/"

OWID_DATASET = {
    "USA": {
        "iso_code": "USA",
        "data": [
            {"year": 2021, "solar_electricity": 115.3, "wind_electricity": 380.3, "nuclear_electricity": 778.2},
            {"year": 2022, "solar_electricity": 143.8, "wind_electricity": 434.8, "nuclear_electricity": 772.2},
        ],
    }
}


def _yahoo(price: float) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "chart": {
                "result": [{"meta": {"regularMarketPrice": price, "regularMarketTime": 1717372800}}],
                "error": None,
            }
        },
    )


def _eia(value, period="2024-05-31", column="value") -> httpx.Response:
    return httpx.Response(200, json={"response": {"data": [{"period": period, column: value}]}})


@pytest.fixture
def providers():
    """Every upstream endpoint mocked; natural gas on EIA is down."""
    with respx.mock(assert_all_called=False) as router:
        router.get(url__startswith="https://api.eia.gov/v2/petroleum/", name="eia_oil").mock(
            return_value=_eia(78.35)
        )
        router.get(url__startswith="https://api.eia.gov/v2/natural-gas/", name="eia_gas").mock(
            return_value=httpx.Response(503)
        )
        router.get(url__startswith="https://api.eia.gov/v2/coal/", name="eia_coal").mock(
            return_value=_eia("142.10", period="2024-05", column="price")
        )
        router.get(url__startswith="https://api.stlouisfed.org/fred/", name="fred").mock(
            return_value=httpx.Response(
                200, json={"observations": [{"date": "2024-04-01", "value": "91.17"}]}
            )
        )
        router.get(OWID_URL, name="owid").mock(return_value=httpx.Response(200, json=OWID_DATASET))
        router.get(url__regex=YAHOO_CHART + "CL=F", name="yahoo_wti").mock(return_value=_yahoo(77.90))
        router.get(url__regex=YAHOO_CHART + "BZ=F", name="yahoo_brent").mock(return_value=_yahoo(82.10))
        router.get(url__regex=YAHOO_CHART + "NG=F", name="yahoo_gas").mock(return_value=_yahoo(2.80))
        router.get(url__regex=YAHOO_CHART + "MTF=F", name="yahoo_coal").mock(return_value=_yahoo(118.50))
        yield router
