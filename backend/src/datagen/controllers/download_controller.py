from fastapi import Request
from fastapi.responses import Response
from pydantic import ValidationError as SchemaValidationError

from datagen.models.schemas.generation import DownloadRequest
from datagen.services.row_formatter import format_rows
from datagen.utils.app_exceptions import ValidationError
from datagen.utils.error_handler import api_error_handler
from datagen.utils.logging_config import get_logger

logger = get_logger(__name__)


@api_error_handler
async def download_data(request: Request):
    """
    Return previously generated rows as a file.

    - **data**: The rows to export.
    - **format**: "csv", "json" or "excel".
    - **prompt**: Used to derive the file name.
    """
    body = getattr(request.state, "json_body", {})
    try:
        download = DownloadRequest.model_validate(body)
    except SchemaValidationError as e:
        error = e.errors()[0]
        field = str(error["loc"][0]) if error["loc"] else ""
        raise ValidationError(
            f"Invalid download request: {field}: {error['msg']}",
            error="No data to download" if field == "data" else None,
        )

    file = format_rows(download.data, download.format, download.prompt or "")
    logger.info(
        "Prepared download",
        filename=file.filename,
        rows=len(download.data),
        size=len(file.content),
    )

    return Response(
        content=file.content,
        media_type=file.content_type,
        headers={"Content-Disposition": f'attachment; filename="{file.filename}"'},
    )
