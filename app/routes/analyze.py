from fastapi import APIRouter, HTTPException

from ..models.analyze_schema import AnalyzeImageRequest, AnalyzeImageResponse, ErrorResponse
from ..services.pizza_classifier import PizzaClassifierService

router = APIRouter(prefix="/api", tags=["api"])


@router.post(
    "/analyze",
    response_model=AnalyzeImageResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def analyze_image(payload: AnalyzeImageRequest) -> AnalyzeImageResponse:
    return await PizzaClassifierService.classify_image(payload)


@router.api_route(
    "/analyze",
    methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"],
    include_in_schema=False,
)
async def analyze_method_not_allowed() -> None:
    raise HTTPException(status_code=405, detail="Method not allowed")
