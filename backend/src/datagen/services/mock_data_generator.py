import asyncio
import json
import time
from typing import Awaitable, Callable, List, Optional, Tuple

from datagen.config.settings import Settings
from datagen.models.schemas.generation import (
    GenerationResult,
    MockGenerationPayload,
    Row,
)
from datagen.prompts.prompts import PROMPT_LEVELS, create_mock_prompt
from datagen.services.llm_service import LLMInterface
from datagen.utils.app_exceptions import ConfigurationError, GenerationError
from datagen.utils.logging_config import get_logger
from datagen.utils.retry import RetryPolicy

logger = get_logger(__name__)

MOCK_SOURCE = "AI Generated Mock Data"

# Called after each finished batch with (batch number, total batches, rows in batch)
BatchCallback = Callable[[int, int, int], Awaitable[None]]


def parse_row(raw: str) -> Row:
    """Decode one JSON-encoded row; anything that is not a JSON object becomes {"value": raw}."""
    try:
        row = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return {"value": raw}
    if not isinstance(row, dict):
        return {"value": raw}
    return row


def reconcile_rows(rows: List[Row], fields: List[str]) -> List[Row]:
    """Backfill missing fields with None and drop fields outside the field set."""
    reconciled = []
    drifted = 0
    for row in rows:
        if list(row.keys()) != fields:
            drifted += 1
        reconciled.append({field: row.get(field) for field in fields})
    if drifted:
        logger.warning("Reconciled rows to the established field set", rows=drifted, fields=fields)
    return reconciled


def _clean_fields(fields: List[str]) -> List[str]:
    cleaned = []
    for field in fields:
        field = field.strip()
        if field and field not in cleaned:
            cleaned.append(field)
    return cleaned


class MockDataGenerator:
    """
    Fabricates rows with the AI model. Small requests are a single call;
    larger ones are split into batches that run one after another so later
    batches reuse the field set established by the first.
    """

    def __init__(self, settings: Settings, llm_service: LLMInterface):
        self.settings = settings
        self.llm_service = llm_service

    def batch_plan(self, prompt: str, rows: int) -> List[int]:
        """Sizes of the batches needed for `rows`; a single entry when batching is not needed."""
        if rows < self.settings.MOCK_BATCH_THRESHOLD:
            return [rows]

        if len(prompt) > self.settings.LONG_PROMPT_CHARS:
            batch_size = self.settings.MOCK_LONG_PROMPT_BATCH_SIZE
        else:
            batch_size = self.settings.MOCK_BATCH_SIZE

        full_batches, remainder = divmod(rows, batch_size)
        plan = [batch_size] * full_batches
        if remainder:
            plan.append(remainder)
        return plan

    def _retry_policy(
        self, count: int, template: Optional[str], fields: Optional[List[str]]
    ) -> RetryPolicy:
        def degrade(user_prompt: str, attempt: int) -> str:
            level = PROMPT_LEVELS[min(attempt, len(PROMPT_LEVELS) - 1)]
            return create_mock_prompt(
                user_prompt,
                count,
                level=level,
                template=template,
                fields=fields,
                truncate_at=self.settings.TRUNCATED_PROMPT_CHARS,
            )

        return RetryPolicy(
            max_attempts=self.settings.MOCK_BATCH_RETRIES + 1,
            attempt_timeout=self.settings.LLM_CALL_TIMEOUT_SECONDS,
            degrade=degrade,
        )

    async def _generate_batch(
        self,
        prompt: str,
        count: int,
        template: Optional[str],
        fields: Optional[List[str]],
        description: str,
    ) -> Tuple[List[str], List[Row]]:
        async def attempt(model_prompt: str) -> Tuple[List[str], List[Row]]:
            payload = await self.llm_service.generate_structured(
                model_prompt, MockGenerationPayload
            )
            rows = [parse_row(raw) for raw in payload.rows]
            if len(rows) < count:
                raise GenerationError(
                    f"The AI model returned {len(rows)} of {count} requested rows"
                )
            rows = rows[:count]

            batch_fields = fields or _clean_fields(payload.fields) or list(rows[0].keys())
            if not batch_fields:
                raise GenerationError("The AI model returned rows without any fields")

            blanked = sum(
                1 for row in rows if list(row) == ["value"] and "value" not in batch_fields
            )
            if blanked:
                logger.warning(
                    "Rows that were not JSON objects are blanked to the field set",
                    rows=blanked,
                    fields=batch_fields,
                )
            return batch_fields, rows

        policy = self._retry_policy(count, template, fields)
        return await policy.run(attempt, prompt, description=description)

    async def generate_mock_data(
        self,
        prompt: str,
        rows: int,
        template: Optional[str] = None,
        on_batch: Optional[BatchCallback] = None,
    ) -> GenerationResult:
        if not self.llm_service.is_configured:
            raise ConfigurationError(
                "Gemini API key not configured. Mock data generation requires "
                "GOOGLE_API_KEY or GOOGLE_GENERATIVE_AI_API_KEY in your environment variables."
            )

        plan = self.batch_plan(prompt, rows)
        logger.info("Generating mock data", rows=rows, batches=len(plan))

        fields: Optional[List[str]] = None
        data: List[Row] = []

        for index, batch_size in enumerate(plan):
            if index > 0 and self.settings.MOCK_INTER_BATCH_DELAY_SECONDS > 0:
                await asyncio.sleep(self.settings.MOCK_INTER_BATCH_DELAY_SECONDS)

            start_time = time.time()
            batch_fields, batch_rows = await self._generate_batch(
                prompt,
                batch_size,
                template,
                fields,
                description=f"mock batch {index + 1}/{len(plan)}",
            )
            if fields is None:
                fields = batch_fields
            data.extend(reconcile_rows(batch_rows, fields))

            logger.info(
                "Batch completed",
                batch=index + 1,
                total_batches=len(plan),
                rows=len(batch_rows),
                duration=f"{time.time() - start_time:.2f}s",
            )
            if on_batch is not None:
                await on_batch(index + 1, len(plan), len(batch_rows))

        return GenerationResult(data=data, fields=fields, source=MOCK_SOURCE)
