from typing import Optional


class AppBaseException(Exception):
    """Base exception for this application."""

    status_code: int = 500
    error_label: str = "Internal Server Error"
    suggestion: Optional[str] = None

    def __init__(
        self,
        detail: str,
        error: Optional[str] = None,
        suggestion: Optional[str] = None,
    ):
        self.detail = detail
        if error is not None:
            self.error_label = error
        if suggestion is not None:
            self.suggestion = suggestion
        super().__init__(detail)

    def to_response(self) -> dict:
        content = {
            "success": False,
            "code": self.__class__.__name__,
            "error": self.error_label,
            "details": self.detail,
        }
        if self.suggestion:
            content["suggestion"] = self.suggestion
        return content


class ValidationError(AppBaseException):
    """Raised when the request content is invalid."""

    status_code = 400
    error_label = "Invalid Request"


class MalformedRequestError(AppBaseException):
    """Raised when the request body cannot be parsed."""

    status_code = 400
    error_label = "Invalid Request Format"
    suggestion = "Please check your request format"


class ConfigurationError(AppBaseException):
    """Raised when the generative AI credential is missing."""

    status_code = 500
    error_label = "API Configuration Error"
    suggestion = (
        "Please add GOOGLE_API_KEY or GOOGLE_GENERATIVE_AI_API_KEY "
        "to the environment variables"
    )


class OperationTimeoutError(AppBaseException):
    """Raised when a model call, an external API call or the whole request runs out of time."""

    status_code = 504
    error_label = "Request Timeout"
    suggestion = "Try using a shorter or simpler prompt, or request fewer rows"


class GenerationError(AppBaseException):
    """Raised when the model produced no usable rows after retries."""

    status_code = 500
    error_label = "Generation Failed"
    suggestion = "Please try a different description or check your API key"


class SourceFetchError(AppBaseException):
    """Raised when an external data API failed or every fallback was exhausted."""

    status_code = 500
    error_label = "Real Data Fetch Failed"
    suggestion = (
        "Please try a different description or check if the data source is available."
    )


MockGenerationError = GenerationError
DataFetchError = SourceFetchError
