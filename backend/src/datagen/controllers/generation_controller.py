import time

from fastapi import Request
from fastapi.responses import JSONResponse, StreamingResponse

from datagen.config.settings import Settings
from datagen.controllers.streaming import result_payload, stream_generation_events
from datagen.dependencies import get_services
from datagen.prompts.prompts import get_available_templates
from datagen.utils.error_handler import api_error_handler
from datagen.utils.logging_config import get_logger

logger = get_logger(__name__)


def wants_stream(request: Request, settings: Settings) -> bool:
    accept = request.headers.get("accept", "")
    flag = request.headers.get(settings.STREAM_HEADER, "")
    return settings.STREAM_MEDIA_TYPE in accept or flag.lower() in ("1", "true", "yes")


@api_error_handler
async def generate_data(request: Request):
    """
    Generate mock or real data from a natural-language description.

    - **dataType**: "mock" (AI generated) or "real" (public data APIs).
    - **prompt**: What the data should describe.
    - **rows**: Number of rows, clamped into the configured range.
    - **template**: Optional mock domain template.

    Send `Accept: text/stream-json` to receive newline-delimited progress events.
    """
    services = get_services(request)
    usecase = services.generate_data_usecase
    body = getattr(request.state, "json_body", {})

    job = usecase.prepare(body)

    if wants_stream(request, services.settings):
        logger.info("Streaming generation response", rows=job.rows)
        return StreamingResponse(
            stream_generation_events(usecase, job),
            media_type=services.settings.STREAM_MEDIA_TYPE,
        )

    start_time = time.time()
    result = await usecase.execute(job)
    logger.info(
        "Generation completed",
        data_type=job.data_type.value,
        rows=len(result.data),
        duration=f"{time.time() - start_time:.2f}s",
    )

    return JSONResponse(content={"success": True, **result_payload(job, result)})


async def list_templates():
    """Templates accepted by the `template` field of mock requests."""
    return {"templates": get_available_templates()}
