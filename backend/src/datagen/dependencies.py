from dataclasses import dataclass
from typing import Optional

import httpx
from fastapi import Request

from datagen.config.settings import Settings
from datagen.services.llm_service import GeminiLLMService, LLMInterface
from datagen.services.mock_data_generator import MockDataGenerator
from datagen.services.real_data_fetcher import RealDataFetcher, build_source_registry
from datagen.services.request_classifier import RequestClassifier
from datagen.usecases.generate_data import GenerateDataUsecase


@dataclass
class Services:
    settings: Settings
    http_client: httpx.AsyncClient
    llm_service: LLMInterface
    generate_data_usecase: GenerateDataUsecase

    async def close(self) -> None:
        await self.http_client.aclose()


def build_services(
    settings: Settings,
    llm_service: Optional[LLMInterface] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Services:
    """Wire every service from one settings object."""
    http_client = httpx.AsyncClient(
        timeout=settings.SOURCE_TIMEOUT_SECONDS,
        transport=transport,
        headers={"User-Agent": f"{settings.PROJECT_NAME}/{settings.VERSION}"},
        follow_redirects=True,
    )
    if llm_service is None:
        llm_service = GeminiLLMService(settings)

    classifier = RequestClassifier(settings, llm_service)
    real_fetcher = RealDataFetcher(classifier, build_source_registry(settings, http_client))
    mock_generator = MockDataGenerator(settings, llm_service)

    return Services(
        settings=settings,
        http_client=http_client,
        llm_service=llm_service,
        generate_data_usecase=GenerateDataUsecase(settings, mock_generator, real_fetcher),
    )


def get_services(request: Request) -> Services:
    return request.app.state.services
