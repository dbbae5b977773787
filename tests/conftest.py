from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from app.main import app


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test from a known provider configuration."""
    for name in (
        "VISION_PROVIDER",
        "OPENAI_API_KEY",
        "OPENAI_VISION_MODEL",
        "GEMINI_API_KEY",
        "GEMINI_VISION_MODEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def client():
    return TestClient(app)


def make_completion(content):
    """Build an object shaped like an OpenAI chat completion."""
    completion = MagicMock()
    completion.choices = [MagicMock()]
    completion.choices[0].message.content = content
    return completion


@pytest.fixture
def openai_client(mocker, monkeypatch):
    """Patch AsyncOpenAI and return the client instance the service will use."""
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    openai_cls = mocker.patch("app.services.pizza_classifier.AsyncOpenAI")
    instance = openai_cls.return_value
    instance.__aenter__.return_value = instance
    instance.chat.completions.create = AsyncMock(return_value=make_completion("yes"))
    return instance


@pytest.fixture
def openai_create(openai_client):
    """The mocked `chat.completions.create`."""
    return openai_client.chat.completions.create


@pytest.fixture
def completion():
    return make_completion
