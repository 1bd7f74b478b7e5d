"""
Adapters for the hosted embedding and chat-completion services.

Every adapter exposes the same two-method surface, so the rest of the
system never touches a vendor client directly:

- EmbeddingProvider.embed(texts) -> one vector per text
- ChatProvider.complete(system_prompt, user_prompt, temperature, max_tokens) -> text

Vendor clients are created on first use and with their own retry logic
turned off; retries are owned by `core.retry`.
"""

from typing import List, Optional, Protocol, Sequence

import google.genai as genai
import numpy as np
from google.genai import types
from huggingface_hub import InferenceClient
from openai import OpenAI

from core.exceptions import ConfigurationError
from core.logger import get_logger

logger = get_logger("rag.providers")


class EmbeddingProvider(Protocol):
    name: str
    model: str

    def embed(self, texts: Sequence[str]) -> List[List[float]]:
        ...


class ChatProvider(Protocol):
    name: str
    model: str

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        ...


def _require_key(provider: str, api_key: Optional[str]) -> str:
    if not api_key:
        raise ConfigurationError(
            "Missing API key for provider",
            context={"provider": provider},
        )
    return api_key


# ---------- Hugging Face Inference ----------

class HuggingFaceEmbeddingProvider:
    name = "huggingface"

    def __init__(self, model: str, api_key: Optional[str], timeout: float):
        self.model = model
        self.api_key = api_key or None
        self.timeout = timeout
        self._client = None

    @property
    def client(self):
        if self._client is None:
            self._client = InferenceClient(
                model=self.model,
                token=self.api_key,
                timeout=self.timeout,
            )
        return self._client

    def embed(self, texts: Sequence[str]) -> List[List[float]]:
        vectors = []
        for text in texts:
            output = np.asarray(self.client.feature_extraction(text), dtype=np.float32)
            # token-level output: mean-pool into one sentence vector
            while output.ndim > 1:
                output = output.mean(axis=0)
            vectors.append(output.tolist())
        return vectors


class HuggingFaceChatProvider:
    name = "huggingface"

    def __init__(self, model: str, api_key: Optional[str], timeout: float):
        self.model = model
        self.api_key = api_key or None
        self.timeout = timeout
        self._client = None

    @property
    def client(self):
        if self._client is None:
            self._client = InferenceClient(
                model=self.model,
                token=self.api_key,
                timeout=self.timeout,
            )
        return self._client

    def complete(self, system_prompt, user_prompt, temperature, max_tokens) -> str:
        response = self.client.chat_completion(
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            max_tokens=max_tokens,
            temperature=temperature,
        )
        return response.choices[0].message.content or ""


# ---------- OpenAI ----------

class OpenAIEmbeddingProvider:
    name = "openai"

    def __init__(self, model: str, api_key: Optional[str], timeout: float):
        self.model = model
        self.api_key = api_key
        self.timeout = timeout
        self._client = None

    @property
    def client(self):
        if self._client is None:
            self._client = OpenAI(
                api_key=_require_key(self.name, self.api_key),
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    def embed(self, texts: Sequence[str]) -> List[List[float]]:
        response = self.client.embeddings.create(
            model=self.model,
            input=list(texts),
        )
        return [item.embedding for item in sorted(response.data, key=lambda d: d.index)]


class OpenAIChatProvider:
    name = "openai"

    def __init__(self, model: str, api_key: Optional[str], timeout: float):
        self.model = model
        self.api_key = api_key
        self.timeout = timeout
        self._client = None

    @property
    def client(self):
        if self._client is None:
            self._client = OpenAI(
                api_key=_require_key(self.name, self.api_key),
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    def complete(self, system_prompt, user_prompt, temperature, max_tokens) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return response.choices[0].message.content or ""


# ---------- Gemini ----------

def _gemini_client(api_key: Optional[str], timeout: float):
    return genai.Client(
        api_key=_require_key("gemini", api_key),
        # milliseconds
        http_options=types.HttpOptions(timeout=int(timeout * 1000)),
    )


class GeminiEmbeddingProvider:
    name = "gemini"

    def __init__(self, model: str, api_key: Optional[str], timeout: float):
        self.model = model
        self.api_key = api_key
        self.timeout = timeout
        self._client = None

    @property
    def client(self):
        if self._client is None:
            self._client = _gemini_client(self.api_key, self.timeout)
        return self._client

    def embed(self, texts: Sequence[str]) -> List[List[float]]:
        result = self.client.models.embed_content(
            model=self.model,
            contents=list(texts),
        )
        return [list(e.values) for e in result.embeddings]


class GeminiChatProvider:
    name = "gemini"

    def __init__(self, model: str, api_key: Optional[str], timeout: float):
        self.model = model
        self.api_key = api_key
        self.timeout = timeout
        self._client = None

    @property
    def client(self):
        if self._client is None:
            self._client = _gemini_client(self.api_key, self.timeout)
        return self._client

    def complete(self, system_prompt, user_prompt, temperature, max_tokens) -> str:
        response = self.client.models.generate_content(
            model=self.model,
            contents=user_prompt,
            config=types.GenerateContentConfig(
                system_instruction=system_prompt,
                temperature=temperature,
                max_output_tokens=max_tokens,
            ),
        )
        return response.text or ""


EMBEDDING_PROVIDERS = {
    "huggingface": HuggingFaceEmbeddingProvider,
    "openai": OpenAIEmbeddingProvider,
    "gemini": GeminiEmbeddingProvider,
}

CHAT_PROVIDERS = {
    "huggingface": HuggingFaceChatProvider,
    "openai": OpenAIChatProvider,
    "gemini": GeminiChatProvider,
}


def build_embedding_provider(name: str, model: str, api_key: Optional[str], timeout: float) -> EmbeddingProvider:
    if name not in EMBEDDING_PROVIDERS:
        raise ConfigurationError("Unknown embedding provider", context={"provider": name})

    logger.info("event=EMBEDDING_PROVIDER_SELECTED | provider=%s | model=%s", name, model)
    return EMBEDDING_PROVIDERS[name](model=model, api_key=api_key, timeout=timeout)


def build_chat_provider(name: str, model: str, api_key: Optional[str], timeout: float) -> ChatProvider:
    if name not in CHAT_PROVIDERS:
        raise ConfigurationError("Unknown chat provider", context={"provider": name})

    logger.info("event=CHAT_PROVIDER_SELECTED | provider=%s | model=%s", name, model)
    return CHAT_PROVIDERS[name](model=model, api_key=api_key, timeout=timeout)
