from typing import Any, Callable, List, Tuple

from datagen.models.schemas.generation import GenerationResult, Row
from datagen.services.sources.base import (
    MALFORMED_PAYLOAD_ERRORS,
    SourceAdapter,
    dict_items,
)
from datagen.utils.app_exceptions import (
    AppBaseException,
    OperationTimeoutError,
    SourceFetchError,
)
from datagen.utils.logging_config import get_logger

logger = get_logger(__name__)


def _posts_to_rows(payload: Any, rows: int) -> List[Row]:
    posts = dict_items(payload)
    return [
        {
            "id": post.get("id"),
            "title": (post.get("title") or "No title")[:50],
            "body": (post.get("body") or "No content")[:100],
            "user_id": post.get("userId"),
            "type": "Social Post",
        }
        for post in posts[:rows]
    ]


def _users_to_rows(payload: Any, rows: int) -> List[Row]:
    users = dict_items(payload.get("results")) if isinstance(payload, dict) else []
    data = []
    for index, user in enumerate(users[:rows]):
        name = user.get("name") or {}
        data.append(
            {
                "id": index + 1,
                "name": f"{name.get('first', '')} {name.get('last', '')}".strip(),
                "email": user.get("email"),
                "country": (user.get("location") or {}).get("country"),
                "age": (user.get("dob") or {}).get("age"),
                "type": "User Profile",
            }
        )
    return data


class GeneralSourcesAdapter(SourceAdapter):
    """
    Tries generic public sources in order and returns the first one that
    answers with rows. Fails only when every source failed.
    """

    source_name = "General Public Sources"
    topic = "general"

    def _sources(self, rows: int) -> List[Tuple[str, str, dict, Callable[[Any, int], List[Row]]]]:
        return [
            (
                "JSON Placeholder",
                f"{self.settings.JSON_PLACEHOLDER_API_URL}/posts",
                {},
                _posts_to_rows,
            ),
            (
                "Random User API",
                f"{self.settings.RANDOM_USER_API_URL}/",
                {"results": rows},
                _users_to_rows,
            ),
        ]

    async def fetch(
        self, request: str, keywords: List[str], rows: int
    ) -> GenerationResult:
        failures: List[AppBaseException] = []

        for name, url, params, transform in self._sources(rows):
            try:
                payload = await self._get_json(url, params=params or None)
            except AppBaseException as e:
                logger.info("General source failed, trying next", source=name, error=e.detail)
                failures.append(e)
                continue

            try:
                data = transform(payload, rows)
            except MALFORMED_PAYLOAD_ERRORS as e:
                logger.info(
                    "General source returned a malformed payload, trying next",
                    source=name,
                    error=str(e),
                )
                failures.append(SourceFetchError(f"{name} returned a malformed payload"))
                continue

            if not data:
                logger.info("General source returned no rows, trying next", source=name)
                failures.append(SourceFetchError(f"{name} returned no data"))
                continue

            return GenerationResult(data=data, fields=list(data[0].keys()), source=name)

        if failures and all(isinstance(e, OperationTimeoutError) for e in failures):
            raise OperationTimeoutError("All general data sources timed out")
        raise SourceFetchError("All general data sources failed")
