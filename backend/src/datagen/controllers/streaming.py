import asyncio
import json
from typing import AsyncIterator, Optional

from datagen.models.categories import DataType
from datagen.models.schemas.generation import GenerationResult
from datagen.usecases.generate_data import GenerateDataUsecase, GenerationJob
from datagen.utils.app_exceptions import AppBaseException
from datagen.utils.logging_config import get_logger

logger = get_logger(__name__)


def _event(payload: dict) -> str:
    return json.dumps(payload, ensure_ascii=False) + "\n"


def result_payload(job: GenerationJob, result: GenerationResult) -> dict:
    """Body shared by the JSON response and the streamed data event."""
    payload = {
        "data": result.data,
        "source": result.source,
        "rowCount": len(result.data),
    }
    if job.data_type is DataType.MOCK:
        payload["fields"] = result.fields
    return payload


def _error_event(error: AppBaseException) -> str:
    content = error.to_response()
    content.pop("success", None)
    return _event({"type": "error", **content})


async def stream_generation_events(
    usecase: GenerateDataUsecase, job: GenerationJob
) -> AsyncIterator[str]:
    """
    Newline-delimited JSON events for one generation:
    started, then batch events as batches finish, then data and completed,
    or a single error event.
    """
    queue: asyncio.Queue = asyncio.Queue()

    async def on_batch(batch: int, total_batches: int, row_count: int) -> None:
        await queue.put(
            {
                "type": "batch",
                "batch": batch,
                "totalBatches": total_batches,
                "rowCount": row_count,
            }
        )

    yield _event({"type": "started", "dataType": job.data_type.value, "rows": job.rows})

    task = asyncio.create_task(usecase.execute(job, on_batch=on_batch))
    getter: Optional[asyncio.Task] = None
    try:
        while True:
            getter = asyncio.create_task(queue.get())
            done, _ = await asyncio.wait({getter, task}, return_when=asyncio.FIRST_COMPLETED)
            if getter in done:
                yield _event(getter.result())
                continue
            getter.cancel()
            break

        while not queue.empty():
            yield _event(queue.get_nowait())

        try:
            result = task.result()
        except AppBaseException as e:
            logger.warning("Streamed generation failed", code=e.__class__.__name__, error=e.detail)
            yield _error_event(e)
            return
        except Exception as e:
            logger.critical("Unexpected error in streamed generation", error=str(e), exc_info=True)
            yield _event(
                {
                    "type": "error",
                    "error": "Internal Server Error",
                    "details": "An unexpected error occurred",
                }
            )
            return

        yield _event({"type": "data", **result_payload(job, result)})
        yield _event({"type": "completed", "rowCount": len(result.data)})
    finally:
        if getter is not None and not getter.done():
            getter.cancel()
        if not task.done():
            # Client went away; stop generating
            task.cancel()
