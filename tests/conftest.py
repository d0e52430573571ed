from types import SimpleNamespace

import httpx
import openai
import pytest
from fastapi.testclient import TestClient
from openai.types.chat import ChatCompletion

import main
from config.settings import GatewaySettings
from src.recipe_generation.recipe_generation import RecipeGenerator


class FakeCompletions:
    """Stands in for client.chat.completions; replays queued outcomes in order."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if not self.outcomes:
            raise AssertionError("unexpected gateway call")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeGateway:
    """In-memory stand-in for the OpenAI-compatible gateway client."""

    def __init__(self, *outcomes):
        self.completions = FakeCompletions(outcomes)
        self.chat = SimpleNamespace(completions=self.completions)
        self.options = []

    def with_options(self, **kwargs):
        self.options.append(kwargs)
        return self

    @property
    def calls(self):
        return self.completions.calls


def completion(content=None, images=None):
    message = {"role": "assistant", "content": content}
    if images is not None:
        message["images"] = images
    return ChatCompletion.model_validate({
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 0,
        "model": "test-model",
        "choices": [{"index": 0, "finish_reason": "stop", "message": message}],
    })


def image_completion(url):
    return completion(
        content="Here is your image.",
        images=[{"type": "image_url", "image_url": {"url": url}}],
    )


def status_error(status_code, text="upstream failure"):
    request = httpx.Request("POST", "https://gateway.test/v1/chat/completions")
    response = httpx.Response(status_code, request=request, text=text)
    return openai.APIStatusError(f"Error code: {status_code}", response=response, body=None)


@pytest.fixture
def settings():
    return GatewaySettings(api_key="test-key", base_url="https://gateway.test/v1")


@pytest.fixture
def make_client(settings):
    """Builds a TestClient whose handler talks to a FakeGateway."""

    def _make(*outcomes, gateway_settings=None):
        gateway = FakeGateway(*outcomes)
        generator_settings = gateway_settings or settings
        main.app.dependency_overrides[main.get_recipe_generator] = (
            lambda: RecipeGenerator(generator_settings, client=gateway)
        )
        return TestClient(main.app), gateway

    yield _make
    main.app.dependency_overrides.clear()
