from typing import Dict, List

import httpx

from datagen.config.settings import Settings
from datagen.models.categories import DataCategory
from datagen.models.schemas.generation import GenerationResult
from datagen.services.request_classifier import RequestClassifier
from datagen.services.sources.base import SourceAdapter
from datagen.services.sources.catalogs import (
    ComputerVisionAdapter,
    MLDatasetsAdapter,
    NLPDatasetsAdapter,
    TransportationAdapter,
)
from datagen.services.sources.general import GeneralSourcesAdapter
from datagen.services.sources.markets import CoinGeckoMarketsAdapter, CryptoAdapter
from datagen.services.sources.media import NewsAdapter, SportsAdapter
from datagen.services.sources.public_data import (
    DataGovAdapter,
    RestCountriesAdapter,
    WHOHealthAdapter,
    WorldBankEconomicsAdapter,
    WorldBankEducationAdapter,
)
from datagen.services.sources.weather import AirQualityAdapter, WeatherAdapter
from datagen.utils.app_exceptions import (
    AppBaseException,
    OperationTimeoutError,
    SourceFetchError,
)
from datagen.utils.logging_config import get_logger

logger = get_logger(__name__)


def build_source_registry(
    settings: Settings, client: httpx.AsyncClient
) -> Dict[DataCategory, SourceAdapter]:
    """Maps every category to its adapter. Raises if a category is left unmapped."""
    ml_datasets = MLDatasetsAdapter(settings, client)
    registry = {
        DataCategory.FINANCE: CoinGeckoMarketsAdapter(settings, client),
        DataCategory.CRYPTO: CryptoAdapter(settings, client),
        DataCategory.WEATHER: WeatherAdapter(settings, client),
        DataCategory.NEWS: NewsAdapter(settings, client),
        DataCategory.SPORTS: SportsAdapter(settings, client),
        DataCategory.GOVERNMENT: DataGovAdapter(settings, client),
        DataCategory.EDUCATION: WorldBankEducationAdapter(settings, client),
        DataCategory.HEALTH: WHOHealthAdapter(settings, client),
        DataCategory.ENVIRONMENT: AirQualityAdapter(settings, client),
        DataCategory.DEMOGRAPHICS: RestCountriesAdapter(settings, client),
        DataCategory.TRANSPORTATION: TransportationAdapter(settings, client),
        DataCategory.ECONOMICS: WorldBankEconomicsAdapter(settings, client),
        DataCategory.ML_DATASETS: ml_datasets,
        DataCategory.AI_TRAINING: ml_datasets,
        DataCategory.COMPUTER_VISION: ComputerVisionAdapter(settings, client),
        DataCategory.NLP_DATASETS: NLPDatasetsAdapter(settings, client),
        DataCategory.GENERAL: GeneralSourcesAdapter(settings, client),
    }

    missing = [category.value for category in DataCategory if category not in registry]
    if missing:
        raise RuntimeError(f"No source adapter registered for: {', '.join(missing)}")
    return registry


class RealDataFetcher:
    """
    Classifies a request and fetches rows from the matching public data API.
    When the category's source fails, the general sources are tried before
    giving up.
    """

    def __init__(
        self,
        classifier: RequestClassifier,
        registry: Dict[DataCategory, SourceAdapter],
    ):
        self.classifier = classifier
        self.registry = registry

    async def fetch_real_data(self, prompt: str, rows: int) -> GenerationResult:
        intent = await self.classifier.classify(prompt)
        logger.info(
            "Fetching real data",
            category=intent.category.value,
            keywords=intent.keywords,
            rows=rows,
        )

        adapter = self.registry[intent.category]
        general = self.registry[DataCategory.GENERAL]
        failures: List[AppBaseException] = []

        if adapter is not general:
            try:
                return await adapter.run(intent.specificRequest, intent.keywords, rows)
            except AppBaseException as e:
                logger.warning(
                    "Category source failed, falling back to general sources",
                    category=intent.category.value,
                    source=adapter.source_name,
                    error=e.detail,
                )
                failures.append(e)

        try:
            return await general.run(intent.specificRequest, intent.keywords, rows)
        except AppBaseException as e:
            failures.append(e)

        logger.error("Every real data source failed", category=intent.category.value)
        if all(isinstance(e, OperationTimeoutError) for e in failures):
            raise OperationTimeoutError(
                "all sources failed: every data source timed out"
            )
        raise SourceFetchError(
            "all sources failed: " + "; ".join(e.detail for e in failures)
        )
