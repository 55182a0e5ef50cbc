from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx

from datagen.config.settings import Settings
from datagen.models.schemas.generation import GenerationResult, Row
from datagen.utils.app_exceptions import OperationTimeoutError, SourceFetchError
from datagen.utils.logging_config import get_logger

logger = get_logger(__name__)

PLACEHOLDER = "N/A"

# Raised while mapping a payload whose shape differs from what the API documents
MALFORMED_PAYLOAD_ERRORS = (AttributeError, KeyError, IndexError, TypeError, ValueError)


def placeholder_row(fields: List[str], **known: Any) -> Row:
    """A row with every field set to the placeholder, except those given."""
    row = {field: PLACEHOLDER for field in fields}
    row.update(known)
    return row


def dict_items(value: Any) -> List[dict]:
    """The object entries of a list payload. Anything that is not a list yields nothing."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


class SourceAdapter(ABC):
    """
    Wraps one external data API behind a uniform
    (request, keywords, rows) -> GenerationResult contract.
    """

    source_name: str = "Unknown Source"
    topic: str = "real"

    def __init__(self, settings: Settings, client: httpx.AsyncClient):
        self.settings = settings
        self.client = client

    @abstractmethod
    async def fetch(
        self, request: str, keywords: List[str], rows: int
    ) -> GenerationResult:
        pass

    async def run(
        self, request: str, keywords: List[str], rows: int
    ) -> GenerationResult:
        """`fetch`, with payloads that cannot be mapped reported as a SourceFetchError."""
        try:
            return await self.fetch(request, keywords, rows)
        except MALFORMED_PAYLOAD_ERRORS as e:
            logger.warning(
                "External API returned a malformed payload", source=self.source_name, error=str(e)
            )
            raise SourceFetchError(
                f"{self.source_name} returned a malformed {self.topic} payload"
            )

    async def _get_json(
        self, url: str, params: Optional[Dict[str, Any]] = None
    ) -> Any:
        try:
            response = await self.client.get(url, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.TimeoutException:
            logger.warning("External API timed out", source=self.source_name, url=url)
            raise OperationTimeoutError(
                f"{self.source_name} did not respond in time"
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(
                "External API call failed", source=self.source_name, url=url, error=str(e)
            )
            raise SourceFetchError(f"Failed to fetch {self.topic} data: {e}")

    def _as_list(self, payload: Any) -> List[dict]:
        if isinstance(payload, list):
            return dict_items(payload)
        raise SourceFetchError(
            f"{self.source_name} returned an unexpected {self.topic} payload"
        )

    def _result(self, data: List[Row], rows: int) -> GenerationResult:
        data = data[:rows]
        if not data:
            raise SourceFetchError(
                f"{self.source_name} returned no {self.topic} data"
            )
        return GenerationResult(
            data=data, fields=list(data[0].keys()), source=self.source_name
        )
