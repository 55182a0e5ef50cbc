from typing import Any, List

from datagen.models.schemas.generation import GenerationResult
from datagen.services.sources.base import SourceAdapter, dict_items

WHO_COUNTRIES = ["USA", "GBR", "DEU", "FRA", "JPN"]


def _world_bank_records(payload: Any) -> list:
    # World Bank answers [paging metadata, records]
    if isinstance(payload, list) and len(payload) > 1:
        return dict_items(payload[1])
    return []


class DataGovAdapter(SourceAdapter):
    """Dataset search on the data.gov CKAN catalog."""

    source_name = "Data.gov API"
    topic = "government"

    async def fetch(
        self, request: str, keywords: List[str], rows: int
    ) -> GenerationResult:
        payload = await self._get_json(
            f"{self.settings.DATA_GOV_API_URL}/action/package_search",
            params={"q": keywords[0] if keywords else "population", "rows": rows},
        )
        datasets = []
        if isinstance(payload, dict):
            result = payload.get("result")
            if isinstance(result, dict):
                datasets = dict_items(result.get("results"))

        data = []
        for dataset in datasets[:rows]:
            tags = [tag.get("display_name") for tag in dict_items(dataset.get("tags"))[:3]]
            data.append(
                {
                    "title": dataset.get("title"),
                    "organization": (dataset.get("organization") or {}).get("title")
                    or "Unknown",
                    "notes": (dataset.get("notes") or "No description")[:200],
                    "metadata_created": dataset.get("metadata_created"),
                    "num_resources": dataset.get("num_resources"),
                    "tags": ", ".join(t for t in tags if t) or "No tags",
                }
            )
        return self._result(data, rows)


class WorldBankEducationAdapter(SourceAdapter):
    source_name = "World Bank Education Statistics"
    topic = "education"

    async def fetch(
        self, request: str, keywords: List[str], rows: int
    ) -> GenerationResult:
        payload = await self._get_json(
            f"{self.settings.WORLD_BANK_API_URL}/country/all/indicator/SE.PRM.ENRR",
            params={"format": "json", "per_page": rows, "date": "2020:2023"},
        )
        data = [
            {
                "country": (item.get("country") or {}).get("value") or "Unknown",
                "country_code": item.get("countryiso3code"),
                "year": item.get("date"),
                "enrollment_rate": item.get("value") if item.get("value") is not None else "N/A",
                "indicator": "Primary Education Enrollment Rate",
            }
            for item in _world_bank_records(payload)[:rows]
        ]
        return self._result(data, rows)


class WorldBankEconomicsAdapter(SourceAdapter):
    source_name = "World Bank Economics Data"
    topic = "economics"

    async def fetch(
        self, request: str, keywords: List[str], rows: int
    ) -> GenerationResult:
        payload = await self._get_json(
            f"{self.settings.WORLD_BANK_API_URL}/country/all/indicator/NY.GDP.MKTP.CD",
            params={"format": "json", "per_page": rows, "date": "2022:2023"},
        )
        records = [
            item for item in _world_bank_records(payload) if item.get("value") is not None
        ]
        data = [
            {
                "country": (item.get("country") or {}).get("value") or "Unknown",
                "country_code": item.get("countryiso3code"),
                "year": item.get("date"),
                "gdp_usd": item["value"],
                "gdp_formatted": f"${item['value'] / 1e12:.2f}T",
                "indicator": "GDP (Current US$)",
            }
            for item in records[:rows]
        ]
        return self._result(data, rows)


class WHOHealthAdapter(SourceAdapter):
    """Life expectancy at birth from the WHO Global Health Observatory."""

    source_name = "WHO Global Health Observatory"
    topic = "health"

    async def fetch(
        self, request: str, keywords: List[str], rows: int
    ) -> GenerationResult:
        country_filter = " or ".join(f"SpatialDim eq '{code}'" for code in WHO_COUNTRIES)
        payload = await self._get_json(
            f"{self.settings.WHO_GHO_API_URL}/WHOSIS_000001",
            params={"$filter": country_filter, "$top": rows},
        )
        values = dict_items(payload.get("value")) if isinstance(payload, dict) else []
        data = [
            {
                "country": item.get("SpatialDim"),
                "year": item.get("TimeDim"),
                "life_expectancy": item.get("NumericValue"),
                "gender": item.get("Dim1"),
                "indicator": "Life Expectancy at Birth",
            }
            for item in values[:rows]
        ]
        return self._result(data, rows)


class RestCountriesAdapter(SourceAdapter):
    """Most populous countries from REST Countries."""

    source_name = "REST Countries API"
    topic = "demographics"

    async def fetch(
        self, request: str, keywords: List[str], rows: int
    ) -> GenerationResult:
        payload = await self._get_json(
            f"{self.settings.REST_COUNTRIES_API_URL}/all",
            params={"fields": "name,population,area,region,capital"},
        )
        countries = sorted(
            self._as_list(payload),
            key=lambda country: country.get("population") or 0,
            reverse=True,
        )

        data = []
        for country in countries[:rows]:
            population = country.get("population") or 0
            area = country.get("area") or 0
            data.append(
                {
                    "country": (country.get("name") or {}).get("common") or "Unknown",
                    "population": population,
                    "area_km2": area,
                    "region": country.get("region") or "Unknown",
                    "capital": (country.get("capital") or ["Unknown"])[0],
                    "population_density": f"{population / area:.2f}" if area else "N/A",
                }
            )
        return self._result(data, rows)
