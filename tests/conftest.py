import sys
import os
from types import SimpleNamespace

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import httpx
import openai
import pytest
import requests
from video_context.config import Settings


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def status_error(status: int, text: str):
    request = httpx.Request("POST", "https://llm.test/v1/chat/completions")
    response = httpx.Response(status, request=request, text=text)
    cls = openai.BadRequestError if status == 400 else openai.APIStatusError
    return cls(f"Error code: {status} - {text}", response=response, body=None)


def connection_error():
    return openai.APIConnectionError(request=httpx.Request("POST", "https://llm.test/v1/chat/completions"))


class FakeCompletions:
    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return completion(outcome)


class FakeClient:
    """Stands in for openai.OpenAI; each outcome is a content string or an exception."""

    def __init__(self, *outcomes):
        self.completions = FakeCompletions(outcomes)
        self.chat = SimpleNamespace(completions=self.completions)

    @property
    def calls(self):
        return self.completions.calls


class FakeResponse:
    def __init__(self, json_data=None, text="", status_code=200):
        self._json = json_data
        self.text = text
        self.status_code = status_code
        self.encoding = None

    def json(self):
        return self._json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    """requests.Session replacement routing GET by URL."""

    def __init__(self, routes):
        self.routes = routes
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append((url, params))
        outcome = self.routes[url]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def llm_config():
    return Settings(
        LLM_API_KEY="test-key",
        LLM_BASE_URL="https://llm.test/v1",
        LLM_MODEL="test-model",
        _env_file=None
    )


@pytest.fixture
def unconfigured():
    return Settings(LLM_API_KEY="", _env_file=None)
