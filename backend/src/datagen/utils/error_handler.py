from functools import wraps

from fastapi.responses import JSONResponse

from datagen.utils.app_exceptions import AppBaseException
from datagen.utils.logging_config import get_logger

logger = get_logger(__name__)


def api_error_handler(func):
    """
    Decorator to catch exceptions from API endpoints and return a
    standardized JSON error response.
    """

    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)

        except AppBaseException as e:
            log = logger.warning if e.status_code < 500 else logger.error
            log(
                "Application error occurred",
                code=e.__class__.__name__,
                error=e.detail,
            )
            return JSONResponse(status_code=e.status_code, content=e.to_response())
        except Exception as e:
            logger.critical(
                "An unexpected server error occurred",
                error=str(e),
                exc_info=True,
            )
            return JSONResponse(
                status_code=500,
                content={
                    "success": False,
                    "code": "InternalServerError",
                    "error": "Internal Server Error",
                    "details": "An unexpected error occurred",
                    "suggestion": "Please try again or contact support if the issue persists",
                },
            )

    return wrapper
