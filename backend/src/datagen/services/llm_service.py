import asyncio
import json
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Type, TypeVar

from google import genai
from google.genai import types
from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

from datagen.config.settings import Settings
from datagen.utils.app_exceptions import (
    ConfigurationError,
    GenerationError,
    OperationTimeoutError,
)
from datagen.utils.logging_config import get_logger

logger = get_logger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class LLMInterface(ABC):
    @property
    @abstractmethod
    def is_configured(self) -> bool:
        pass

    @abstractmethod
    async def generate_structured(
        self,
        prompt: str,
        schema: Type[SchemaT],
        timeout: Optional[float] = None,
    ) -> SchemaT:
        pass


class GeminiLLMService(LLMInterface):
    """Schema-constrained generation against the Gemini API."""

    def __init__(self, settings: Settings):
        self._model = settings.GEMINI_MODEL
        self._temperature = settings.LLM_TEMPERATURE
        self._client = None
        if settings.has_ai_credential:
            self._client = genai.Client(api_key=settings.GOOGLE_API_KEY)
            logger.info("Gemini client initialized", model=self._model)
        else:
            logger.warning(
                "No generative AI credential configured; mock generation and AI classification are disabled."
            )

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    async def generate_structured(
        self,
        prompt: str,
        schema: Type[SchemaT],
        timeout: Optional[float] = None,
    ) -> SchemaT:
        if self._client is None:
            raise ConfigurationError(
                "Gemini API key not configured. Mock data generation requires "
                "GOOGLE_API_KEY or GOOGLE_GENERATIVE_AI_API_KEY in your environment variables."
            )

        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=schema,
            temperature=self._temperature,
        )
        call = self._client.aio.models.generate_content(
            model=self._model, contents=prompt, config=config
        )

        try:
            if timeout is not None:
                response = await asyncio.wait_for(call, timeout=timeout)
            else:
                response = await call
        except asyncio.TimeoutError:
            raise OperationTimeoutError(
                f"The AI model did not respond within {timeout:g} seconds"
            )
        except Exception as e:
            logger.error("Error during Gemini generation", error=str(e), exc_info=True)
            raise GenerationError(f"The AI model request failed: {e}")

        parsed = parse_json_object(response.text or "")
        if parsed is None:
            raise GenerationError("The AI model returned output that is not valid JSON")

        try:
            return schema.model_validate(parsed)
        except SchemaValidationError as e:
            raise GenerationError(
                f"The AI model output did not match the expected schema: {e.errors()[0]['msg']}"
            )


def parse_json_object(text: str) -> Optional[Dict[str, Any]]:
    """
    Parse a JSON object out of model output, trying progressively more
    forgiving strategies. Returns None when nothing usable is found.
    """
    if not text or not text.strip():
        logger.warning("Empty text received from LLM")
        return None

    strategies = [
        ("direct_parse", _try_direct_parse),
        ("cleaned_parse", _try_cleaned_parse),
        ("outer_object", _try_outer_object),
    ]

    for strategy_name, strategy in strategies:
        try:
            result = strategy(text)
        except (json.JSONDecodeError, ValueError) as e:
            logger.debug("JSON parse strategy failed", strategy=strategy_name, error=str(e))
            continue
        if isinstance(result, dict):
            if strategy_name != "direct_parse":
                logger.info("Parsed LLM output", strategy=strategy_name)
            return result

    logger.error("All JSON parsing strategies failed", preview=text[:200])
    return None


def _try_direct_parse(text: str) -> Any:
    return json.loads(text)


def _clean_json_text(text: str) -> str:
    # Remove control characters except newlines and tabs
    cleaned = re.sub(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]", "", text)
    # Strip markdown code fences
    cleaned = re.sub(r"^\s*```(?:json)?\s*|\s*```\s*$", "", cleaned)
    # Trailing commas in arrays and objects
    cleaned = re.sub(r",(\s*[}\]])", r"\1", cleaned)
    return cleaned.strip()


def _try_cleaned_parse(text: str) -> Any:
    return json.loads(_clean_json_text(text))


def _try_outer_object(text: str) -> Any:
    json_start = text.find("{")
    json_end = text.rfind("}")
    if json_start == -1 or json_end <= json_start:
        raise ValueError("No JSON object found")
    return json.loads(_clean_json_text(text[json_start : json_end + 1]))
