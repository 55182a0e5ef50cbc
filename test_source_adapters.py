import httpx
import pytest

from conftest import COINGECKO_MARKETS, json_route, make_transport
from datagen.services.sources.base import PLACEHOLDER
from datagen.services.sources.catalogs import MLDatasetsAdapter, TransportationAdapter
from datagen.services.sources.general import GeneralSourcesAdapter
from datagen.services.sources.markets import CoinGeckoMarketsAdapter, CryptoAdapter
from datagen.services.sources.public_data import (
    RestCountriesAdapter,
    WorldBankEconomicsAdapter,
)
from datagen.services.sources.weather import (
    AIR_QUALITY_FIELDS,
    WEATHER_FIELDS,
    AirQualityAdapter,
    WeatherAdapter,
)
from datagen.utils.app_exceptions import OperationTimeoutError, SourceFetchError


def wttr_payload(temp: str) -> dict:
    return {
        "current_condition": [
            {
                "temp_C": temp,
                "temp_F": "50",
                "weatherDesc": [{"value": "Sunny"}],
                "humidity": "40",
                "windspeedKmph": "12",
                "FeelsLikeC": temp,
            }
        ]
    }


def timeout_route(request: httpx.Request) -> httpx.Response:
    raise httpx.ReadTimeout("timed out", request=request)


def make_client(routes) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=make_transport(routes))


@pytest.mark.asyncio
async def test_crypto_adapter_maps_and_truncates(settings):
    async with make_client({"/coins/markets": json_route(COINGECKO_MARKETS)}) as client:
        result = await CryptoAdapter(settings, client).fetch("bitcoin", [], 5)

    assert result.source == "CoinGecko API"
    assert len(result.data) == 5
    assert result.data[0]["symbol"] == "C1"
    assert result.fields == [
        "name",
        "symbol",
        "current_price",
        "market_cap",
        "market_cap_rank",
        "price_change_24h",
        "total_volume",
        "circulating_supply",
        "ath",
        "ath_date",
    ]


@pytest.mark.asyncio
async def test_finance_adapter_uses_market_fields(settings):
    async with make_client({"/coins/markets": json_route(COINGECKO_MARKETS)}) as client:
        result = await CoinGeckoMarketsAdapter(settings, client).fetch("stocks", [], 3)

    assert len(result.data) == 3
    assert "market_cap_rank" not in result.fields


@pytest.mark.asyncio
async def test_http_error_becomes_source_fetch_error(settings):
    async with make_client({"/coins/markets": json_route({"error": "busy"}, 503)}) as client:
        with pytest.raises(SourceFetchError):
            await CryptoAdapter(settings, client).fetch("bitcoin", [], 5)


@pytest.mark.asyncio
async def test_timeout_becomes_operation_timeout_error(settings):
    async with make_client({"/coins/markets": timeout_route}) as client:
        with pytest.raises(OperationTimeoutError):
            await CryptoAdapter(settings, client).fetch("bitcoin", [], 5)


@pytest.mark.asyncio
async def test_unexpected_payload_is_a_fetch_error(settings):
    async with make_client({"/coins/markets": json_route({"status": "ok"})}) as client:
        with pytest.raises(SourceFetchError):
            await CryptoAdapter(settings, client).fetch("bitcoin", [], 5)


@pytest.mark.asyncio
async def test_weather_failed_city_gets_placeholder_row(settings):
    def route(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/Tokyo":
            return httpx.Response(500)
        return httpx.Response(200, json=wttr_payload("10"))

    async with make_client({"wttr.in": route}) as client:
        result = await WeatherAdapter(settings, client).fetch("weather", [], 3)

    assert [row["city"] for row in result.data] == settings.WEATHER_CITIES[:3]
    assert result.fields == WEATHER_FIELDS
    for row in result.data:
        assert list(row.keys()) == WEATHER_FIELDS
    tokyo = next(row for row in result.data if row["city"] == "Tokyo")
    assert tokyo["temperature_c"] == PLACEHOLDER
    london = next(row for row in result.data if row["city"] == "London")
    assert london["condition"] == "Sunny"


@pytest.mark.asyncio
async def test_air_quality_failures_are_marked_unavailable(settings):
    async with make_client({}) as client:
        result = await AirQualityAdapter(settings, client).fetch("air quality", [], 2)

    assert len(result.data) == 2
    assert result.fields == AIR_QUALITY_FIELDS
    assert all(row["status"] == "Unavailable" for row in result.data)
    assert result.data[0]["aqi"] == PLACEHOLDER


@pytest.mark.asyncio
async def test_world_bank_economics_skips_missing_values(settings):
    payload = [
        {"page": 1},
        [
            {"country": {"value": "Nowhere"}, "countryiso3code": "NWH", "date": "2023", "value": None},
            {"country": {"value": "World"}, "countryiso3code": "WLD", "date": "2023", "value": 1.05e14},
        ],
    ]
    async with make_client({"NY.GDP.MKTP.CD": json_route(payload)}) as client:
        result = await WorldBankEconomicsAdapter(settings, client).fetch("gdp", [], 5)

    assert len(result.data) == 1
    assert result.data[0]["country"] == "World"
    assert result.data[0]["gdp_formatted"] == "$105.00T"


@pytest.mark.asyncio
async def test_rest_countries_sorted_by_population(settings):
    payload = [
        {"name": {"common": "Small"}, "population": 10, "area": 0, "region": "X", "capital": ["A"]},
        {"name": {"common": "Big"}, "population": 1000, "area": 10, "region": "Y", "capital": ["B"]},
    ]
    async with make_client({"restcountries": json_route(payload)}) as client:
        result = await RestCountriesAdapter(settings, client).fetch("population", [], 5)

    assert [row["country"] for row in result.data] == ["Big", "Small"]
    assert result.data[0]["population_density"] == "100.00"
    assert result.data[1]["population_density"] == "N/A"


@pytest.mark.asyncio
async def test_static_catalogs_cap_at_table_size(settings):
    async with make_client({}) as client:
        transport = await TransportationAdapter(settings, client).fetch("transit", [], 3)
        datasets = await MLDatasetsAdapter(settings, client).fetch("datasets", [], 50)

    assert len(transport.data) == 3
    assert transport.data[0]["transport_mode"] == "Bus"
    assert len(datasets.data) == 8


@pytest.mark.asyncio
async def test_general_sources_fall_through_to_next(settings):
    users = {
        "results": [
            {
                "name": {"first": "Ana", "last": "Lima"},
                "email": "ana@example.com",
                "location": {"country": "Brazil"},
                "dob": {"age": 31},
            }
        ]
    }
    routes = {
        "jsonplaceholder": json_route({}, 500),
        "randomuser": json_route(users),
    }
    async with make_client(routes) as client:
        result = await GeneralSourcesAdapter(settings, client).fetch("people", [], 1)

    assert result.source == "Random User API"
    assert result.data == [
        {
            "id": 1,
            "name": "Ana Lima",
            "email": "ana@example.com",
            "country": "Brazil",
            "age": 31,
            "type": "User Profile",
        }
    ]


@pytest.mark.asyncio
async def test_general_sources_all_failing(settings):
    async with make_client({}) as client:
        with pytest.raises(SourceFetchError, match="All general data sources failed"):
            await GeneralSourcesAdapter(settings, client).fetch("people", [], 3)


@pytest.mark.asyncio
async def test_general_sources_all_timing_out(settings):
    routes = {"jsonplaceholder": timeout_route, "randomuser": timeout_route}
    async with make_client(routes) as client:
        with pytest.raises(OperationTimeoutError):
            await GeneralSourcesAdapter(settings, client).fetch("people", [], 3)


@pytest.mark.asyncio
async def test_air_quality_malformed_city_gets_placeholder_row(settings):
    def route(request: httpx.Request) -> httpx.Response:
        components = {"co": 201.9, "no2": 0.7, "pm2_5": 0.5, "pm10": 0.6}
        if request.url.params["lat"] == "35.6762":
            components = None
        return httpx.Response(
            200, json={"list": [{"main": {"aqi": 1}, "components": components}]}
        )

    async with make_client({"air_pollution": route}) as client:
        result = await AirQualityAdapter(settings, client).fetch("air quality", [], 3)

    assert [row["city"] for row in result.data] == ["London", "New York", "Tokyo"]
    assert [row["status"] for row in result.data] == ["Real Data", "Real Data", "Unavailable"]
    assert result.data[2]["co"] == PLACEHOLDER


@pytest.mark.asyncio
async def test_non_object_list_items_are_skipped(settings):
    payload = [None, "oops", 7] + COINGECKO_MARKETS[:2]
    async with make_client({"/coins/markets": json_route(payload)}) as client:
        result = await CryptoAdapter(settings, client).fetch("bitcoin", [], 5)

    assert [row["name"] for row in result.data] == ["Coin 1", "Coin 2"]


@pytest.mark.asyncio
async def test_malformed_payload_becomes_source_fetch_error(settings):
    payload = [{"name": "France", "population": 68_000_000, "area": 551_695}]
    async with make_client({"restcountries": json_route(payload)}) as client:
        with pytest.raises(SourceFetchError, match="malformed"):
            await RestCountriesAdapter(settings, client).run("population", [], 5)


@pytest.mark.asyncio
async def test_general_sources_skip_malformed_posts(settings):
    users = {"results": [{"name": {"first": "Li", "last": "Wei"}, "email": "li@example.com"}]}
    routes = {
        "jsonplaceholder": json_route([{"id": 1, "title": 42, "body": "x"}]),
        "randomuser": json_route(users),
    }
    async with make_client(routes) as client:
        result = await GeneralSourcesAdapter(settings, client).fetch("people", [], 1)

    assert result.source == "Random User API"
    assert result.data[0]["name"] == "Li Wei"
