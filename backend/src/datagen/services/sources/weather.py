import asyncio
from typing import List, Tuple

from datagen.models.schemas.generation import GenerationResult, Row
from datagen.services.sources.base import (
    MALFORMED_PAYLOAD_ERRORS,
    SourceAdapter,
    placeholder_row,
)
from datagen.utils.app_exceptions import AppBaseException
from datagen.utils.logging_config import get_logger

logger = get_logger(__name__)

WEATHER_FIELDS = [
    "city",
    "temperature_c",
    "temperature_f",
    "condition",
    "humidity",
    "wind_speed_kmph",
    "feels_like_c",
]

AIR_QUALITY_FIELDS = ["city", "aqi", "co", "no2", "pm2_5", "pm10", "status"]

AIR_QUALITY_CITIES: List[Tuple[str, float, float]] = [
    ("London", 51.5074, -0.1278),
    ("New York", 40.7128, -74.0060),
    ("Tokyo", 35.6762, 139.6503),
    ("Paris", 48.8566, 2.3522),
    ("Beijing", 39.9042, 116.4074),
]


class WeatherAdapter(SourceAdapter):
    """Current conditions per city from wttr.in, one concurrent call per city."""

    source_name = "wttr.in Weather API"
    topic = "weather"

    async def _city_weather(self, city: str) -> Row:
        try:
            payload = await self._get_json(
                f"{self.settings.WTTR_API_URL}/{city}", params={"format": "j1"}
            )
            current = payload["current_condition"][0]
            return {
                "city": city,
                "temperature_c": current["temp_C"],
                "temperature_f": current["temp_F"],
                "condition": current["weatherDesc"][0]["value"],
                "humidity": current["humidity"],
                "wind_speed_kmph": current["windspeedKmph"],
                "feels_like_c": current["FeelsLikeC"],
            }
        except (AppBaseException, *MALFORMED_PAYLOAD_ERRORS) as e:
            logger.warning("Weather lookup failed, using placeholder row", city=city, error=str(e))
            return placeholder_row(WEATHER_FIELDS, city=city)

    async def fetch(
        self, request: str, keywords: List[str], rows: int
    ) -> GenerationResult:
        cities = self.settings.WEATHER_CITIES[:rows]
        data = await asyncio.gather(*(self._city_weather(city) for city in cities))
        return self._result(list(data), rows)


class AirQualityAdapter(SourceAdapter):
    """Air pollution readings per city from OpenWeatherMap."""

    source_name = "Environmental Data (Multiple Sources)"
    topic = "environment"

    async def _city_air_quality(self, city: str, lat: float, lon: float) -> Row:
        try:
            payload = await self._get_json(
                f"{self.settings.OPENWEATHER_API_URL}/air_pollution",
                params={
                    "lat": lat,
                    "lon": lon,
                    "appid": self.settings.OPENWEATHER_API_KEY,
                },
            )
            pollution = payload["list"][0]
            components = pollution["components"]
            return {
                "city": city,
                "aqi": pollution["main"]["aqi"],
                "co": components.get("co"),
                "no2": components.get("no2"),
                "pm2_5": components.get("pm2_5"),
                "pm10": components.get("pm10"),
                "status": "Real Data",
            }
        except (AppBaseException, *MALFORMED_PAYLOAD_ERRORS) as e:
            logger.warning("Air quality lookup failed, using placeholder row", city=city, error=str(e))
            return placeholder_row(AIR_QUALITY_FIELDS, city=city, status="Unavailable")

    async def fetch(
        self, request: str, keywords: List[str], rows: int
    ) -> GenerationResult:
        cities = AIR_QUALITY_CITIES[:rows]
        data = await asyncio.gather(
            *(self._city_air_quality(name, lat, lon) for name, lat, lon in cities)
        )
        return self._result(list(data), rows)
