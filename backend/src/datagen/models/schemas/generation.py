import math
import sys
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from datagen.models.categories import DataCategory, DataType

Row = Dict[str, Any]


class GenerateDataRequest(BaseModel):
    """
    Request model for the generate endpoint.
    `rows` is kept as given here; clamping into the configured bounds
    happens in the use case, which owns the settings.
    """

    dataType: DataType = DataType.REAL
    prompt: str
    rows: Optional[int] = None
    template: Optional[str] = None

    @field_validator("prompt")
    @classmethod
    def _prompt_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Prompt is required and must be a non-empty string")
        return value.strip()

    @field_validator("rows", mode="before")
    @classmethod
    def _rows_numeric(cls, value: Any) -> Optional[int]:
        if value is None:
            return None
        if isinstance(value, bool):
            raise ValueError("Rows must be a valid number")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                value = float(value.strip())
            except ValueError:
                raise ValueError("Rows must be a valid number")
        if not isinstance(value, float) or math.isnan(value):
            raise ValueError("Rows must be a valid number")
        # Infinite counts are left for the use case to clamp like any other huge value
        if math.isinf(value):
            return sys.maxsize if value > 0 else -sys.maxsize
        return int(value)

    @field_validator("template")
    @classmethod
    def _template_lower(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value.strip().lower()


class DownloadRequest(BaseModel):
    data: List[Row] = Field(default_factory=list)
    format: str = "csv"
    prompt: Optional[str] = None


class RequestIntent(BaseModel):
    """The classifier's reading of a free-text request."""

    category: DataCategory = Field(..., description="Category of data requested")
    specificRequest: str = Field(
        ..., description="Specific details about what data to fetch"
    )
    keywords: List[str] = Field(
        default_factory=list, description="Keywords to use for fetching data"
    )


class MockGenerationPayload(BaseModel):
    """Schema the model must follow when fabricating rows."""

    fields: List[str] = Field(..., description="Array of field names for the data")
    rows: List[str] = Field(
        ...,
        description="One JSON-encoded object per row, using exactly the field names above",
    )


class GenerationResult(BaseModel):
    data: List[Row]
    fields: List[str]
    source: str


class GenerateDataResponse(BaseModel):
    """
    Standard success response for the generate endpoint.
    `fields` is only reported for mock data.
    """

    success: bool = True
    data: List[Row]
    fields: Optional[List[str]] = None
    source: str
    rowCount: int
