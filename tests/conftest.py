import pytest
from fastapi.testclient import TestClient

from main import create_app
from services.errors import CompletionServiceError
from services.link_store import LinkStore


class FakeCompletion:
    """Stands in for the Gemini client: canned reply or canned failure."""

    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def store():
    return LinkStore()


@pytest.fixture
def completion():
    return FakeCompletion(error=CompletionServiceError("service unavailable"))


@pytest.fixture
def client(store, completion):
    return TestClient(create_app(link_store=store, completion_service=completion))
