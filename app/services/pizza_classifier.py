import asyncio
import base64
import logging
from typing import Any

import google.generativeai as genai  # type: ignore[import-untyped]
import httpx
from fastapi import HTTPException
from openai import AsyncOpenAI

from ..errors import ConfigurationError, UpstreamError
from ..models.analyze_schema import AnalyzeImageRequest, AnalyzeImageResponse
from ..settings import Settings, get_settings

logger = logging.getLogger(__name__)

PROMPT = (
    "This image is going to be analyzed by a 'Is it Pizza?' app. "
    "Your ONLY job is to determine if the image contains pizza. "
    "Respond with ONLY 'yes' if the image contains pizza, or 'no' if it does not contain pizza. "
    "No explanation, just 'yes' or 'no'."
)

# room for a single word
MAX_ANSWER_TOKENS = 10
TEMPERATURE = 0.5


class PizzaClassifierService:
    @staticmethod
    def _get_openai_client(settings: Settings) -> AsyncOpenAI:
        if not settings.openai_api_key:
            raise ConfigurationError("OPENAI_API_KEY environment variable is not set")
        return AsyncOpenAI(api_key=settings.openai_api_key)

    @staticmethod
    def _get_gemini_model(settings: Settings) -> genai.GenerativeModel:
        if not settings.gemini_api_key:
            raise ConfigurationError("GEMINI_API_KEY environment variable is not set")

        genai.configure(api_key=settings.gemini_api_key)
        return genai.GenerativeModel(
            model_name=settings.gemini_vision_model,
            generation_config={
                "max_output_tokens": MAX_ANSWER_TOKENS,
                "temperature": TEMPERATURE,
            },
        )

    @staticmethod
    def _extract_openai_text(response: Any) -> str:
        if not response.choices:
            return ""
        message = response.choices[0].message
        if message is None:
            return ""
        return message.content or ""

    @staticmethod
    def _extract_gemini_text(response: Any) -> str:
        try:
            return response.text or ""
        except ValueError:
            # blocked or empty candidates carry no text parts
            return ""

    @staticmethod
    def is_pizza_answer(answer: str) -> bool:
        return "yes" in answer.strip().lower()

    @classmethod
    async def _ask_openai(cls, image_url: str, settings: Settings) -> str:
        async with cls._get_openai_client(settings) as client:
            try:
                response = await client.chat.completions.create(
                    model=settings.openai_vision_model,
                    messages=[
                        {
                            "role": "user",
                            "content": [
                                {"type": "text", "text": PROMPT},
                                {"type": "image_url", "image_url": {"url": image_url}},
                            ],
                        }
                    ],
                    max_tokens=MAX_ANSWER_TOKENS,
                    temperature=TEMPERATURE,
                )
            except Exception as exc:
                raise UpstreamError(f"OpenAI request failed: {exc}") from exc

        return cls._extract_openai_text(response)

    @staticmethod
    async def _fetch_image(image_url: str) -> tuple[bytes, str]:
        if image_url.startswith("data:"):
            header, _, encoded = image_url.partition(",")
            mime_type = header[len("data:"):].split(";")[0] or "image/jpeg"
            try:
                return base64.b64decode(encoded, validate=True), mime_type
            except ValueError as exc:
                raise UpstreamError("Invalid base64 image data URL") from exc

        try:
            async with httpx.AsyncClient(timeout=15) as client:
                response = await client.get(image_url)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Failed to download image: {exc}") from exc

        if response.status_code >= 400:
            raise UpstreamError(f"Image URL returned status {response.status_code}")

        content_type = response.headers.get("content-type", "").split(";")[0].strip()
        if not content_type.startswith("image/"):
            raise UpstreamError(f"URL is not an image (content-type {content_type!r})")

        data = response.content
        if not data:
            raise UpstreamError("Empty image content")

        return data, content_type

    @classmethod
    async def _ask_gemini(cls, image_url: str, settings: Settings) -> str:
        model = cls._get_gemini_model(settings)
        image_bytes, mime_type = await cls._fetch_image(image_url)

        try:
            response = await asyncio.to_thread(
                model.generate_content,
                [PROMPT, {"mime_type": mime_type, "data": image_bytes}],
            )
        except Exception as exc:
            raise UpstreamError(f"Gemini request failed: {exc}") from exc

        return cls._extract_gemini_text(response)

    @classmethod
    async def _ask_model(cls, image_url: Any) -> str:
        if not isinstance(image_url, str):
            raise UpstreamError(f"imageUrl must be a string, got {type(image_url).__name__}")

        settings = get_settings()
        logger.debug("Asking %s vision model", settings.vision_provider)

        if settings.vision_provider == "openai":
            return await cls._ask_openai(image_url, settings)
        if settings.vision_provider == "gemini":
            return await cls._ask_gemini(image_url, settings)
        raise ConfigurationError(f"Unknown VISION_PROVIDER {settings.vision_provider!r}")

    @classmethod
    async def classify_image(cls, payload: AnalyzeImageRequest) -> AnalyzeImageResponse:
        if not payload.imageUrl:
            raise HTTPException(status_code=400, detail="Image URL is required")

        try:
            answer = await cls._ask_model(payload.imageUrl)
        except Exception as exc:
            logger.exception("Error analyzing image: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to analyze image") from exc

        is_pizza = cls.is_pizza_answer(answer)
        logger.info("Model answered %r, isPizza=%s", answer, is_pizza)
        return AnalyzeImageResponse(isPizza=is_pizza)
