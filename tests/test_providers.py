import numpy as np
import pytest

from core.exceptions import ConfigurationError
import rag.providers as providers
from rag.providers import (
    GeminiChatProvider,
    GeminiEmbeddingProvider,
    HuggingFaceChatProvider,
    HuggingFaceEmbeddingProvider,
    OpenAIChatProvider,
    OpenAIEmbeddingProvider,
    build_chat_provider,
    build_embedding_provider,
)


class _Obj:
    def __init__(self, **kwargs):
        self.__dict__.update(kwargs)


def test_factories_select_adapter_by_name():
    embedder = build_embedding_provider("openai", "text-embedding-3-small", "sk-test", 5)
    chat = build_chat_provider("huggingface", "meta-llama/Meta-Llama-3-8B-Instruct", "", 5)

    assert isinstance(embedder, OpenAIEmbeddingProvider)
    assert isinstance(chat, HuggingFaceChatProvider)
    assert embedder.model == "text-embedding-3-small"


def test_unknown_provider_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        build_embedding_provider("cohere", "embed", "key", 5)
    with pytest.raises(ConfigurationError):
        build_chat_provider("cohere", "command", "key", 5)


@pytest.mark.parametrize("provider_cls", [OpenAIChatProvider, GeminiChatProvider])
def test_keyed_providers_require_api_key(provider_cls):
    provider = provider_cls(model="m", api_key="", timeout=5)

    with pytest.raises(ConfigurationError):
        provider.client


def test_huggingface_embeddings_are_pooled_to_one_vector():
    class FakeClient:
        def feature_extraction(self, text):
            if text == "tokens":
                return np.array([[[1.0, 3.0], [3.0, 5.0]]])
            return np.array([0.5, 0.5])

    provider = HuggingFaceEmbeddingProvider("model", None, 5)
    provider._client = FakeClient()

    assert provider.embed(["tokens", "pooled"]) == [[2.0, 4.0], [0.5, 0.5]]


def test_openai_embeddings_follow_response_index():
    class FakeEmbeddings:
        def create(self, model, input):
            return _Obj(data=[
                _Obj(index=1, embedding=[0.0, 1.0]),
                _Obj(index=0, embedding=[1.0, 0.0]),
            ])

    provider = OpenAIEmbeddingProvider("text-embedding-3-small", "sk-test", 5)
    provider._client = _Obj(embeddings=FakeEmbeddings())

    assert provider.embed(["a", "b"]) == [[1.0, 0.0], [0.0, 1.0]]


def test_huggingface_chat_sends_system_and_user_messages():
    sent = {}

    class FakeClient:
        def chat_completion(self, messages, max_tokens, temperature):
            sent.update(messages=messages, max_tokens=max_tokens, temperature=temperature)
            return _Obj(choices=[_Obj(message=_Obj(content="Hola"))])

    provider = HuggingFaceChatProvider("model", None, 5)
    provider._client = FakeClient()

    assert provider.complete("sys", "user", temperature=0.1, max_tokens=64) == "Hola"
    assert [m["role"] for m in sent["messages"]] == ["system", "user"]
    assert sent["temperature"] == 0.1


class _Recorder:
    def __init__(self):
        self.kwargs = None

    def __call__(self, **kwargs):
        self.kwargs = kwargs
        return _Obj(**kwargs)


@pytest.mark.parametrize("provider_cls", [HuggingFaceEmbeddingProvider, HuggingFaceChatProvider])
def test_huggingface_client_carries_timeout(monkeypatch, provider_cls):
    recorder = _Recorder()
    monkeypatch.setattr(providers, "InferenceClient", recorder)

    provider_cls("model", "hf_token", 7.5).client

    assert recorder.kwargs["timeout"] == 7.5
    assert recorder.kwargs["token"] == "hf_token"
    assert recorder.kwargs["model"] == "model"


@pytest.mark.parametrize("provider_cls", [OpenAIEmbeddingProvider, OpenAIChatProvider])
def test_openai_client_carries_timeout_without_vendor_retries(monkeypatch, provider_cls):
    recorder = _Recorder()
    monkeypatch.setattr(providers, "OpenAI", recorder)

    provider_cls("model", "sk-test", 12).client

    assert recorder.kwargs["timeout"] == 12
    assert recorder.kwargs["max_retries"] == 0


@pytest.mark.parametrize("provider_cls", [GeminiEmbeddingProvider, GeminiChatProvider])
def test_gemini_client_timeout_is_in_milliseconds(monkeypatch, provider_cls):
    recorder = _Recorder()
    monkeypatch.setattr(providers.genai, "Client", recorder)

    provider_cls("model", "gm-key", 2.5).client

    assert recorder.kwargs["api_key"] == "gm-key"
    assert recorder.kwargs["http_options"].timeout == 2500
