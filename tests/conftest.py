import os
import tempfile

os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="workplan_rag_logs_"))

import pytest

from core.models import Passage
from core.retry import RetryPolicy
from orchestration.service import QAService
from orchestration.synthesizer import AnswerSynthesizer
from rag.embedder import EmbeddingService
from rag.index_manager import IndexManager
from rag.retriever import Retriever
from rag.vector_index import VectorIndex

VOCAB = ("educación", "salud", "seguridad", "empleo")
FIXED_ANSWER = "Ambos partidos proponen ampliar la educación técnica."


class ProviderHTTPError(Exception):
    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"provider returned HTTP {status_code}")


class KeywordEmbeddingProvider:
    """Deterministic bag-of-keywords vectors."""

    name = "fake"

    def __init__(self, model="keyword-v1", fail_times=0, status_code=503):
        self.model = model
        self.fail_times = fail_times
        self.status_code = status_code
        self.calls = []

    @staticmethod
    def vector(text):
        lower = text.lower()
        return [float(lower.count(word)) for word in VOCAB] + [0.1]

    def embed(self, texts):
        self.calls.append(list(texts))
        if self.fail_times:
            self.fail_times -= 1
            raise ProviderHTTPError(self.status_code)
        return [self.vector(t) for t in texts]


class FakeChatProvider:
    name = "fake"
    model = "fake-chat"

    def __init__(self, answer=FIXED_ANSWER, fail_times=0, status_code=503):
        self.answer = answer
        self.fail_times = fail_times
        self.status_code = status_code
        self.calls = []

    def complete(self, system_prompt, user_prompt, temperature, max_tokens):
        self.calls.append({
            "system_prompt": system_prompt,
            "user_prompt": user_prompt,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        if self.fail_times:
            self.fail_times -= 1
            raise ProviderHTTPError(self.status_code)
        return self.answer


@pytest.fixture
def retry_policy():
    return RetryPolicy(max_attempts=3, base_delay=0, max_delay=0, jitter=0)


@pytest.fixture
def passages():
    return [
        Passage("pt_adn.pdf", 1, "Plan de educación: más escuelas y educación técnica.", "adn"),
        Passage("pt_adn.pdf", 2, "Salud pública gratuita en todos los cantones.", "adn"),
        Passage("pt_r5.pdf", 1, "Seguridad ciudadana con más policías.", "r5"),
        Passage("pt_r5.pdf", 3, "Empleo juvenil y educación dual.", "r5"),
    ]


@pytest.fixture
def embedding_provider():
    return KeywordEmbeddingProvider()


@pytest.fixture
def chat_provider():
    return FakeChatProvider()


@pytest.fixture
def embedder(embedding_provider, retry_policy):
    return EmbeddingService(embedding_provider, retry_policy, batch_size=2)


@pytest.fixture
def index(passages, embedder):
    return VectorIndex.build(passages, embedder)


@pytest.fixture
def synthesizer(chat_provider, retry_policy):
    return AnswerSynthesizer(
        chat_provider,
        retry_policy,
        temperature=0.2,
        max_tokens=256,
        language="Spanish",
        no_context_answer="Sin información.",
    )


@pytest.fixture
def build_calls():
    return []


@pytest.fixture
def qa_service(passages, embedder, synthesizer, build_calls):
    def build():
        build_calls.append(1)
        return VectorIndex.build(passages, embedder)

    return QAService(
        index_manager=IndexManager(build),
        retriever=Retriever(embedder, top_k=2),
        synthesizer=synthesizer,
    )
