import asyncio
import json
import re
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from datagen.config.settings import Settings
from datagen.main import create_app
from datagen.models.schemas.generation import RequestIntent
from datagen.services.llm_service import LLMInterface
from datagen.utils.app_exceptions import GenerationError

HANG = "hang"


def make_settings(**overrides) -> Settings:
    values = {
        "GOOGLE_API_KEY": None,
        "MOCK_INTER_BATCH_DELAY_SECONDS": 0.0,
        "LOG_LEVEL": "WARNING",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def mock_payload(count: int, fields=("name", "email"), offset: int = 0) -> Dict[str, Any]:
    rows = []
    for i in range(count):
        row = {}
        for field in fields:
            row[field] = f"{field}-{offset + i + 1}"
        rows.append(json.dumps(row))
    return {"fields": list(fields), "rows": rows}


def _requested_count(prompt: str) -> int:
    match = re.search(r"(\d+) rows", prompt)
    return int(match.group(1)) if match else 1


class FakeLLM(LLMInterface):
    """
    In-memory stand-in for the Gemini service.

    Mock requests consume `responses` in order; each entry is a payload dict,
    an exception to raise, or HANG to never answer. Once the list is empty the
    fake answers with as many rows as the prompt asks for.
    """

    def __init__(
        self,
        responses: Optional[List[Any]] = None,
        configured: bool = True,
        intent: Optional[RequestIntent] = None,
    ):
        self.responses = list(responses or [])
        self.configured = configured
        self.intent = intent
        self.prompts: List[str] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def generate_structured(self, prompt, schema, timeout=None):
        if schema is RequestIntent:
            if self.intent is None:
                raise GenerationError("classification unavailable")
            return self.intent

        self.prompts.append(prompt)
        response = self.responses.pop(0) if self.responses else None
        if response is None:
            response = mock_payload(_requested_count(prompt), offset=len(self.prompts) * 100)
        if response == HANG:
            await asyncio.sleep(60)
        if isinstance(response, Exception):
            raise response
        return schema.model_validate(response)


def json_route(payload: Any, status_code: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=payload)

    return handler


def make_transport(routes: Dict[str, Callable[[httpx.Request], httpx.Response]]) -> httpx.MockTransport:
    """Dispatch on the first route whose key is contained in the request URL; 404 otherwise."""

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        for fragment, route in routes.items():
            if fragment in url:
                return route(request)
        return httpx.Response(404, json={"error": "not found"})

    return httpx.MockTransport(handler)


COINGECKO_MARKETS = [
    {
        "name": f"Coin {i}",
        "symbol": f"c{i}",
        "current_price": 100.0 * i,
        "market_cap": 1_000_000 * i,
        "market_cap_rank": i,
        "price_change_percentage_24h": 1.5,
        "total_volume": 5000 * i,
        "circulating_supply": 21_000_000,
        "ath": 200.0 * i,
        "ath_date": "2024-03-14T07:10:36.635Z",
    }
    for i in range(1, 11)
]


@pytest.fixture()
def settings() -> Settings:
    return make_settings()


@pytest.fixture()
def app_client():
    """Factory yielding a TestClient for an app built from the given collaborators."""
    clients = []

    def factory(settings=None, llm_service=None, transport=None) -> TestClient:
        app = create_app(
            settings=settings or make_settings(),
            llm_service=llm_service or FakeLLM(configured=False),
            transport=transport or make_transport({}),
        )
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.__exit__(None, None, None)
