import json

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from datagen.utils.app_exceptions import MalformedRequestError
from datagen.utils.logging_config import get_logger

logger = get_logger(__name__)


class RequestValidationMiddleware(BaseHTTPMiddleware):
    """
    Parses the JSON body of the generate and download endpoints once and
    stores it on `request.state.json_body`. Bodies that are not a JSON
    object are rejected before they reach the endpoint.
    """

    def __init__(self, app: ASGIApp, paths: tuple):
        super().__init__(app)
        self.paths = paths

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method != "POST" or request.url.path not in self.paths:
            return await call_next(request)

        try:
            body = json.loads(await request.body())
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Request body is not valid JSON", path=request.url.path)
            error = MalformedRequestError("Request body must be valid JSON")
            return JSONResponse(status_code=error.status_code, content=error.to_response())

        if not isinstance(body, dict):
            logger.warning("Request body is not a JSON object", path=request.url.path)
            error = MalformedRequestError("Request body must be a JSON object")
            return JSONResponse(status_code=error.status_code, content=error.to_response())

        # Store the body in the request state so we don't have to read the stream again
        request.state.json_body = body
        return await call_next(request)
