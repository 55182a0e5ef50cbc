import re
from typing import List, Optional

from datagen.config.settings import Settings
from datagen.models.categories import DataCategory
from datagen.models.schemas.generation import RequestIntent
from datagen.prompts.prompts import create_classification_prompt
from datagen.services.llm_service import LLMInterface
from datagen.utils.logging_config import get_logger

logger = get_logger(__name__)

# Checked in order; the first category with a matching trigger wins.
# Each entry: (category, trigger substrings, keyword hints for extraction)
HEURISTIC_RULES = [
    (
        DataCategory.CRYPTO,
        ["crypto", "bitcoin", "ethereum", "coin"],
        ["crypto", "bitcoin", "ethereum", "coin", "price", "trading"],
    ),
    (
        DataCategory.FINANCE,
        ["stock", "finance", "market", "trading"],
        ["stock", "finance", "market", "price", "trading"],
    ),
    (
        DataCategory.WEATHER,
        ["weather", "temperature", "climate", "forecast"],
        ["weather", "temperature", "climate", "rain", "wind", "humidity"],
    ),
    (
        DataCategory.NEWS,
        ["news", "article", "headline"],
        ["news", "article", "headline", "breaking", "story"],
    ),
    (
        DataCategory.SPORTS,
        ["sport", "game", "team", "player", "league"],
        ["sport", "game", "team", "player", "score", "match", "league"],
    ),
]


def extract_keywords(text: str, relevant_words: List[str]) -> List[str]:
    """Words that contain a relevant term or are longer than four characters, de-duplicated, top 5."""
    keywords = []
    for word in text.lower().split():
        if any(relevant in word for relevant in relevant_words) or len(word) > 4:
            if word not in keywords:
                keywords.append(word)
    return keywords[:5]


def default_keywords(text: str) -> List[str]:
    return [word for word in re.split(r"\s+", text.strip()) if len(word) > 3][:5]


def heuristic_intent(prompt: str) -> RequestIntent:
    lower_prompt = prompt.lower()

    for category, triggers, hints in HEURISTIC_RULES:
        if any(trigger in lower_prompt for trigger in triggers):
            return RequestIntent(
                category=category,
                specificRequest=prompt,
                keywords=extract_keywords(prompt, hints),
            )

    return RequestIntent(
        category=DataCategory.GENERAL,
        specificRequest=prompt,
        keywords=default_keywords(prompt),
    )


class RequestClassifier:
    """
    Labels a free-text request with a data category. Uses the AI model when a
    credential is configured and falls back to keyword matching otherwise.
    Never raises.
    """

    def __init__(self, settings: Settings, llm_service: Optional[LLMInterface] = None):
        self.llm_service = llm_service
        self.timeout = settings.LLM_CALL_TIMEOUT_SECONDS

    async def classify(self, prompt: str) -> RequestIntent:
        if self.llm_service is None or not self.llm_service.is_configured:
            logger.info("No AI credential found, using heuristic categorization")
            return heuristic_intent(prompt)

        try:
            intent = await self.llm_service.generate_structured(
                create_classification_prompt(prompt),
                RequestIntent,
                timeout=self.timeout,
            )
        except Exception as e:
            logger.warning(
                "AI categorization failed, using heuristic categorization",
                error=str(e),
            )
            return heuristic_intent(prompt)

        if not intent.specificRequest.strip():
            intent = intent.model_copy(update={"specificRequest": prompt})
        if not intent.keywords:
            intent = intent.model_copy(update={"keywords": default_keywords(prompt)})

        logger.info(
            "AI-analyzed data intent",
            category=intent.category.value,
            keywords=intent.keywords,
        )
        return intent
