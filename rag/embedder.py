from typing import List, Sequence

import numpy as np

from core.logger import get_logger
from core.exceptions import EmbeddingProviderError
from core.retry import RetryPolicy, call_with_retry
from rag.providers import EmbeddingProvider


logger = get_logger("rag.embedder")


class EmbeddingService:
    """
    Embeds text through a hosted provider.

    Guarantees:
    - one provider/model per service; index and queries share it
    - L2-normalized float32 vectors, so dot product == cosine similarity
    - bounded retries per batch, then EmbeddingProviderError
    """

    def __init__(
        self,
        provider: EmbeddingProvider,
        retry_policy: RetryPolicy,
        batch_size: int = 32,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")

        self.provider = provider
        self.retry_policy = retry_policy
        self.batch_size = batch_size

    @property
    def model_id(self) -> str:
        return f"{self.provider.name}:{self.provider.model}"

    def _embed_batch(self, batch: List[str]) -> np.ndarray:
        try:
            vectors = call_with_retry(
                lambda: self.provider.embed(batch),
                self.retry_policy,
                operation="EMBEDDING",
            )
        except Exception as e:
            raise EmbeddingProviderError(
                "Embedding generation failed",
                error=e,
                context={
                    "text_count": len(batch),
                    "model": self.model_id,
                },
            ) from e

        matrix = np.asarray(vectors, dtype=np.float32)

        if matrix.ndim != 2 or matrix.shape[0] != len(batch):
            raise EmbeddingProviderError(
                "Embedding provider returned an unexpected shape",
                context={"expected": len(batch), "shape": matrix.shape},
            )

        return matrix

    @staticmethod
    def _normalize(matrix: np.ndarray) -> np.ndarray:
        norms = np.linalg.norm(matrix, axis=1, keepdims=True)
        norms[norms == 0] = 1.0
        return matrix / norms

    def embed_texts(self, texts: Sequence[str]) -> np.ndarray:
        if not texts:
            raise ValueError("embed_texts received empty input")

        texts = list(texts)
        batches = []

        for start in range(0, len(texts), self.batch_size):
            batch = self._embed_batch(texts[start:start + self.batch_size])

            if batches and batch.shape[1] != batches[0].shape[1]:
                raise EmbeddingProviderError(
                    "Embedding dimension changed between batches",
                    context={
                        "expected": batches[0].shape[1],
                        "got": batch.shape[1],
                    },
                )
            batches.append(batch)

        embeddings = self._normalize(np.vstack(batches))

        logger.info(
            "event=EMBEDDINGS_GENERATED | count=%d | batches=%d | model=%s",
            len(texts),
            len(batches),
            self.model_id,
        )

        return embeddings

    def embed_query(self, text: str) -> np.ndarray:
        return self.embed_texts([text])[0]
