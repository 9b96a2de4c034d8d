from types import SimpleNamespace

import pytest

from config import reset_settings
from intent import IntentResult, intent_points
from models import Lead, Offer
from storage import InMemoryStore


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    monkeypatch.delenv("DATABASE_PATH", raising=False)
    monkeypatch.delenv("OPENAI_BASE_URL", raising=False)
    reset_settings()
    yield
    reset_settings()


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(role="assistant", content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(index=0, message=message)])


class FakeOpenAI:
    """Stands in for openai.OpenAI; only chat.completions.create is used."""

    def __init__(self, content=None, error=None):
        self.completions = FakeCompletions(content, error)
        self.chat = SimpleNamespace(completions=self.completions)


class StubClassifier:
    def __init__(self, intent="High", reasoning="stub"):
        self.intent = intent
        self.reasoning = reasoning
        self.calls = 0

    def classify(self, lead, offer):
        self.calls += 1
        return IntentResult(intent=self.intent, reasoning=self.reasoning, points=intent_points(self.intent))


@pytest.fixture
def offer():
    return Offer(name="X", value_props=["a", "b"], ideal_use_cases=["c"])


@pytest.fixture
def jane():
    return Lead(name="Jane", role="VP Sales", company="Acme", industry="SaaS", location="NY", linkedin_bio="bio")


@pytest.fixture
def store():
    return InMemoryStore()
