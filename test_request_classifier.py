import pytest

from conftest import FakeLLM
from datagen.models.categories import DataCategory
from datagen.models.schemas.generation import RequestIntent
from datagen.services.request_classifier import (
    RequestClassifier,
    default_keywords,
    heuristic_intent,
)


@pytest.mark.parametrize(
    "prompt, category",
    [
        ("bitcoin prices", DataCategory.CRYPTO),
        ("top ethereum tokens", DataCategory.CRYPTO),
        ("stock market trends", DataCategory.FINANCE),
        ("weather in London", DataCategory.WEATHER),
        ("latest headlines", DataCategory.NEWS),
        ("football team standings", DataCategory.SPORTS),
        ("list of paint colors", DataCategory.GENERAL),
    ],
)
def test_heuristic_categories(prompt, category):
    assert heuristic_intent(prompt).category is category


def test_heuristic_checks_categories_in_order():
    # "coin" matches crypto before "market" matches finance
    assert heuristic_intent("coin market overview").category is DataCategory.CRYPTO


def test_heuristic_keywords_keep_relevant_and_long_words():
    intent = heuristic_intent("show me bitcoin price now")
    assert intent.keywords == ["bitcoin", "price"]
    assert intent.specificRequest == "show me bitcoin price now"


def test_default_keywords_are_words_longer_than_three():
    assert default_keywords("a list of paint colors for the new house") == [
        "list",
        "paint",
        "colors",
        "house",
    ]


@pytest.mark.asyncio
async def test_without_llm_uses_heuristic(settings):
    classifier = RequestClassifier(settings)
    intent = await classifier.classify("bitcoin prices")
    assert intent.category is DataCategory.CRYPTO


@pytest.mark.asyncio
async def test_unconfigured_llm_is_not_called(settings):
    llm = FakeLLM(configured=False, intent=RequestIntent(
        category=DataCategory.NEWS, specificRequest="news", keywords=["news"]
    ))
    intent = await RequestClassifier(settings, llm).classify("bitcoin prices")
    assert intent.category is DataCategory.CRYPTO


@pytest.mark.asyncio
async def test_llm_failure_falls_back_to_heuristic(settings):
    llm = FakeLLM(configured=True)
    intent = await RequestClassifier(settings, llm).classify("weather in Paris")
    assert intent.category is DataCategory.WEATHER


@pytest.mark.asyncio
async def test_llm_intent_is_used_and_blanks_filled(settings):
    llm = FakeLLM(
        intent=RequestIntent(category=DataCategory.HEALTH, specificRequest=" ", keywords=[])
    )
    intent = await RequestClassifier(settings, llm).classify("life expectancy by country")

    assert intent.category is DataCategory.HEALTH
    assert intent.specificRequest == "life expectancy by country"
    assert intent.keywords == ["life", "expectancy", "country"]
