import json

import pytest

from conftest import HANG, FakeLLM, make_settings, mock_payload
from datagen.services.mock_data_generator import (
    MOCK_SOURCE,
    MockDataGenerator,
    parse_row,
    reconcile_rows,
)
from datagen.utils.app_exceptions import (
    ConfigurationError,
    GenerationError,
    OperationTimeoutError,
)


def make_generator(llm, **overrides) -> MockDataGenerator:
    return MockDataGenerator(make_settings(**overrides), llm)


@pytest.mark.parametrize(
    "prompt, rows, plan",
    [
        ("users", 5, [5]),
        ("users", 14, [14]),
        ("users", 15, [10, 5]),
        ("users", 30, [10, 10, 10]),
        ("x" * 201, 23, [5, 5, 5, 5, 3]),
    ],
)
def test_batch_plan(prompt, rows, plan):
    assert make_generator(FakeLLM()).batch_plan(prompt, rows) == plan


def test_parse_row_wraps_non_objects():
    assert parse_row('{"a": 1}') == {"a": 1}
    assert parse_row("not json") == {"value": "not json"}
    assert parse_row("[1, 2]") == {"value": "[1, 2]"}


def test_reconcile_rows_backfills_and_drops():
    rows = [{"a": 1, "b": 2}, {"a": 3, "c": 4}]
    assert reconcile_rows(rows, ["a", "b"]) == [{"a": 1, "b": 2}, {"a": 3, "b": None}]


@pytest.mark.asyncio
async def test_requires_credential():
    generator = make_generator(FakeLLM(configured=False))
    with pytest.raises(ConfigurationError):
        await generator.generate_mock_data("users", 5)


@pytest.mark.asyncio
async def test_single_call_for_small_requests():
    llm = FakeLLM([mock_payload(5)])
    result = await make_generator(llm).generate_mock_data("users", 5)

    assert len(llm.prompts) == 1
    assert result.source == MOCK_SOURCE
    assert result.fields == ["name", "email"]
    assert len(result.data) == 5


@pytest.mark.asyncio
async def test_extra_rows_are_truncated():
    llm = FakeLLM([mock_payload(8)])
    result = await make_generator(llm).generate_mock_data("users", 5)
    assert len(result.data) == 5


@pytest.mark.asyncio
async def test_unparseable_rows_become_value_rows():
    llm = FakeLLM([{"fields": [], "rows": ["alpha", "beta"]}])
    result = await make_generator(llm).generate_mock_data("words", 2)

    assert result.fields == ["value"]
    assert result.data == [{"value": "alpha"}, {"value": "beta"}]


@pytest.mark.asyncio
async def test_batches_share_the_first_field_set():
    drifting = {
        "fields": ["name", "phone"],
        "rows": [json.dumps({"name": f"n{i}", "phone": "555"}) for i in range(10)],
    }
    llm = FakeLLM([mock_payload(10), drifting, mock_payload(5, fields=("email", "name"))])
    result = await make_generator(llm).generate_mock_data("users", 25)

    assert len(llm.prompts) == 3
    assert len(result.data) == 25
    assert result.fields == ["name", "email"]
    for row in result.data:
        assert list(row.keys()) == ["name", "email"]
    assert result.data[10] == {"name": "n0", "email": None}
    # Later batches are told the established field names
    assert "name, email" in llm.prompts[1]


@pytest.mark.asyncio
async def test_on_batch_reports_each_batch():
    calls = []

    async def on_batch(batch, total, rows):
        calls.append((batch, total, rows))

    await make_generator(FakeLLM()).generate_mock_data("users", 15, on_batch=on_batch)
    assert calls == [(1, 2, 10), (2, 2, 5)]


@pytest.mark.asyncio
async def test_retries_use_simpler_prompts():
    llm = FakeLLM([GenerationError("bad json"), GenerationError("bad json"), mock_payload(3)])
    result = await make_generator(llm).generate_mock_data("a detailed list of users", 3)

    assert len(result.data) == 3
    full, truncated, minimal = llm.prompts
    assert "Instructions:" in full
    assert "Instructions:" not in truncated
    assert "Generate exactly 3 rows" in truncated
    assert minimal.startswith("Generate 3 rows of realistic sample data about")


@pytest.mark.asyncio
async def test_too_few_rows_is_retried():
    llm = FakeLLM([mock_payload(2), mock_payload(4)])
    result = await make_generator(llm).generate_mock_data("users", 4)

    assert len(llm.prompts) == 2
    assert len(result.data) == 4


@pytest.mark.asyncio
async def test_exhausted_retries_raise():
    llm = FakeLLM([GenerationError("bad json")] * 3)
    with pytest.raises(GenerationError):
        await make_generator(llm).generate_mock_data("users", 3)
    assert len(llm.prompts) == 3


@pytest.mark.asyncio
async def test_failed_later_batch_fails_the_request():
    llm = FakeLLM([mock_payload(10)] + [GenerationError("bad json")] * 3)
    with pytest.raises(GenerationError):
        await make_generator(llm).generate_mock_data("users", 20)


@pytest.mark.asyncio
async def test_slow_model_times_out():
    llm = FakeLLM([HANG])
    generator = make_generator(llm, LLM_CALL_TIMEOUT_SECONDS=0.05, MOCK_BATCH_RETRIES=0)
    with pytest.raises(OperationTimeoutError):
        await generator.generate_mock_data("users", 3)


@pytest.mark.asyncio
async def test_timeout_is_retried():
    llm = FakeLLM([HANG, mock_payload(3)])
    generator = make_generator(llm, LLM_CALL_TIMEOUT_SECONDS=0.05)
    result = await generator.generate_mock_data("users", 3)
    assert len(result.data) == 3


@pytest.mark.asyncio
async def test_unparseable_row_is_blanked_when_fields_are_known():
    payload = {
        "fields": ["name", "email"],
        "rows": [json.dumps({"name": "Ana", "email": "ana@example.com"}), "oops"],
    }
    result = await make_generator(FakeLLM([payload])).generate_mock_data("users", 2)

    assert result.fields == ["name", "email"]
    assert result.data == [
        {"name": "Ana", "email": "ana@example.com"},
        {"name": None, "email": None},
    ]
