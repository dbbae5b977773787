import os
from pydantic import BaseModel, Field
from dotenv import load_dotenv

# load .env once at startup; values are still read per request
load_dotenv()

class Settings(BaseModel):
    vision_provider: str = Field(default="openai", alias="VISION_PROVIDER")
    openai_api_key: str | None = Field(default=None, alias="OPENAI_API_KEY")
    openai_vision_model: str = Field(default="gpt-4-turbo", alias="OPENAI_VISION_MODEL")
    gemini_api_key: str | None = Field(default=None, alias="GEMINI_API_KEY")
    gemini_vision_model: str = Field(
        default="gemini-1.5-flash", alias="GEMINI_VISION_MODEL"
    )

    @classmethod
    def from_env(cls):
        data = {
            "VISION_PROVIDER": os.getenv("VISION_PROVIDER", "openai").strip().lower(),
            "OPENAI_API_KEY": os.getenv("OPENAI_API_KEY"),
            "OPENAI_VISION_MODEL": os.getenv("OPENAI_VISION_MODEL", "gpt-4-turbo"),
            "GEMINI_API_KEY": os.getenv("GEMINI_API_KEY"),
            "GEMINI_VISION_MODEL": os.getenv(
                "GEMINI_VISION_MODEL", "gemini-1.5-flash"
            ),
        }
        return cls.model_validate(data)


def get_settings() -> Settings:
    return Settings.from_env()
