import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .routes.analyze import router as analyze_router

logger = logging.getLogger(__name__)

# body is not JSON, or there is no body at all
UNREADABLE_BODY_ERRORS = {"json_invalid", "missing"}

app = FastAPI(
    title="Is It Pizza?",
    version="0.1.0",
    description="Asks a vision language model whether an image contains pizza.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = "Method not allowed" if exc.status_code == 405 else exc.detail
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    # valid JSON that is not an object carries no imageUrl
    if errors and all(error.get("type") not in UNREADABLE_BODY_ERRORS for error in errors):
        return JSONResponse(status_code=400, content={"error": "Image URL is required"})

    logger.error("Error analyzing image: unreadable request body %s", errors)
    return JSONResponse(status_code=500, content={"error": "Failed to analyze image"})


@app.get("/health")
async def health():
    return {"status": "ok", "service": "pizza-classifier"}


app.include_router(analyze_router)
