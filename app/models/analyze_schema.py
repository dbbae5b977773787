from typing import Any, Literal

from pydantic import BaseModel


class AnalyzeImageRequest(BaseModel):
    # any JSON value; falsy ones are rejected by the service
    imageUrl: Any = None


class AnalyzeImageResponse(BaseModel):
    isPizza: bool
    confidence: Literal["high"] = "high"


class ErrorResponse(BaseModel):
    error: str
