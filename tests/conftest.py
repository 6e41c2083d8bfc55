import random
import sys
import threading
from pathlib import Path

import pytest

# Make the project root importable without installing the package
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from farm_assistant.common.custom_exception import UpstreamAPIError
from farm_assistant.common.local_store import LocalStore
from farm_assistant.components.chat_session import ChatSession
from farm_assistant.components.identification_history import IdentificationHistory
from farm_assistant.components.identification_normalizer import IdentificationNormalizer
from farm_assistant.components.keyword_classifier import KeywordClassifier


class FakeChatLLM:
    """Stands in for GeminiLLM: returns a fixed reply or raises"""

    def __init__(self, reply="Scout the field and spray early.", error=None):
        self.reply = reply
        self.error = error
        self.prompts = []
        self.release = None  # threading.Event that holds invoke() until set
        self.started = threading.Event()

    def invoke(self, prompt, **kwargs):
        self.prompts.append(prompt)
        self.started.set()
        if self.release is not None:
            self.release.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return self.reply


class FakeIdentificationProvider:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def identify(self, image, prompt, country, mime_type="image/jpeg"):
        self.calls.append({"image": image, "prompt": prompt, "country": country, "mime_type": mime_type})
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def pest_payload():
    return {
        "name": "**Fall Armyworm**",
        "confidence": "92%",
        "type": "pest",
        "description": "A *destructive* caterpillar.",
        "causes": ["**Migration** of moths", "Warm *weather*"],
        "plants_affected": ["*Maize*", "Sorghum"],
        "control_measures": {
            "chemical": [{"name": "**Duduthrin**", "brands": ["*Duduthrin*", "Tata Alpha"]}],
            "organic": [{"name": "Neem *Oil*"}],
            "cultural": ["*Plant* early"],
        },
    }


@pytest.fixture
def store():
    return LocalStore()


@pytest.fixture
def chat_llm():
    return FakeChatLLM()


@pytest.fixture
def provider(pest_payload):
    return FakeIdentificationProvider(result=pest_payload)


@pytest.fixture
def history(store):
    return IdentificationHistory(store)


@pytest.fixture
def make_session(chat_llm, provider, history):
    def _make(llm=None, identification_provider=None, **kwargs):
        return ChatSession(
            chat_llm=llm or chat_llm,
            identification_provider=identification_provider or provider,
            normalizer=IdentificationNormalizer(rng=random.Random(7)),
            classifier=KeywordClassifier(),
            country=lambda: "Kenya",
            history=kwargs.pop("history", history),
            **kwargs,
        )
    return _make


@pytest.fixture
def upstream_down():
    return UpstreamAPIError("Gemini API error: quota exceeded", status_code=429)


@pytest.fixture
def identified_record(pest_payload):
    return IdentificationNormalizer(rng=random.Random(7)).normalize(pest_payload)
