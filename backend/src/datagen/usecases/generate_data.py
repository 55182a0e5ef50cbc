import asyncio
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import ValidationError as SchemaValidationError

from datagen.config.settings import Settings
from datagen.models.categories import DataType
from datagen.models.schemas.generation import GenerateDataRequest, GenerationResult
from datagen.prompts.prompts import get_available_templates, is_valid_template
from datagen.services.mock_data_generator import BatchCallback, MockDataGenerator
from datagen.services.real_data_fetcher import RealDataFetcher
from datagen.utils.app_exceptions import OperationTimeoutError, ValidationError
from datagen.utils.logging_config import get_logger

logger = get_logger(__name__)

FIELD_ERROR_LABELS = {
    "prompt": "Please provide a valid data description",
    "rows": "Invalid row count",
    "dataType": "Invalid data type",
}


@dataclass(frozen=True)
class GenerationJob:
    """A validated, routed generation request."""

    data_type: DataType
    prompt: str
    rows: int
    template: Optional[str]
    requested_type: DataType
    timeout_seconds: float

    @property
    def auto_detected(self) -> bool:
        return self.data_type != self.requested_type


class GenerateDataUsecase:
    def __init__(
        self,
        settings: Settings,
        mock_generator: MockDataGenerator,
        real_fetcher: RealDataFetcher,
    ):
        self.settings = settings
        self.mock_generator = mock_generator
        self.real_fetcher = real_fetcher

    def clamp_rows(self, rows: Optional[int]) -> int:
        if rows is None:
            rows = self.settings.DEFAULT_ROWS
        return max(self.settings.MIN_ROWS, min(rows, self.settings.MAX_ROWS))

    def is_training_prompt(self, prompt: str) -> bool:
        """Whole-word match against the auto-detect keywords; a plural "s" is allowed."""
        lower_prompt = prompt.lower()
        return any(
            re.search(rf"\b{re.escape(keyword.lower())}s?\b", lower_prompt)
            for keyword in self.settings.MOCK_AUTODETECT_KEYWORDS
        )

    def request_timeout(self, data_type: DataType, prompt: str, rows: int) -> float:
        """Base allowance, plus extra time per batch when mock generation is batched."""
        timeout = self.settings.REQUEST_TIMEOUT_SECONDS
        if data_type is DataType.MOCK:
            plan = self.mock_generator.batch_plan(prompt, rows)
            if len(plan) > 1:
                timeout += self.settings.REQUEST_TIMEOUT_PER_BATCH_SECONDS * len(plan)
        return min(timeout, self.settings.REQUEST_TIMEOUT_MAX_SECONDS)

    def prepare(self, body: Dict[str, Any]) -> GenerationJob:
        """Validate the request body and decide which path serves it."""
        try:
            request = GenerateDataRequest.model_validate(body)
        except SchemaValidationError as e:
            error = e.errors()[0]
            field = str(error["loc"][0]) if error["loc"] else ""
            message = error["msg"].removeprefix("Value error, ")
            raise ValidationError(
                f"{field}: {message}" if field else message,
                error=FIELD_ERROR_LABELS.get(field),
            )

        if request.template is not None and not is_valid_template(request.template):
            raise ValidationError(
                f"Unsupported template: {request.template}. "
                f"Available templates: {', '.join(get_available_templates())}",
                error="Invalid template",
            )

        rows = self.clamp_rows(request.rows)
        data_type = request.dataType
        if data_type is DataType.REAL and self.is_training_prompt(request.prompt):
            logger.info("Training-data prompt detected, routing to mock generation")
            data_type = DataType.MOCK

        return GenerationJob(
            data_type=data_type,
            prompt=request.prompt,
            rows=rows,
            template=request.template,
            requested_type=request.dataType,
            timeout_seconds=self.request_timeout(data_type, request.prompt, rows),
        )

    async def _dispatch(
        self, job: GenerationJob, on_batch: Optional[BatchCallback]
    ) -> GenerationResult:
        if job.data_type is DataType.MOCK:
            return await self.mock_generator.generate_mock_data(
                job.prompt, job.rows, template=job.template, on_batch=on_batch
            )
        return await self.real_fetcher.fetch_real_data(job.prompt, job.rows)

    async def execute(
        self, job: GenerationJob, on_batch: Optional[BatchCallback] = None
    ) -> GenerationResult:
        """Run the job under the request-wide timeout; expiry cancels the in-flight generation."""
        logger.info(
            "Starting data generation",
            data_type=job.data_type.value,
            rows=job.rows,
            auto_detected=job.auto_detected,
            timeout=job.timeout_seconds,
        )
        try:
            return await asyncio.wait_for(
                self._dispatch(job, on_batch), timeout=job.timeout_seconds
            )
        except asyncio.TimeoutError:
            logger.error("Request timed out", timeout=job.timeout_seconds)
            raise OperationTimeoutError(
                f"The request did not complete within {job.timeout_seconds:g} seconds"
            )
