from typing import List, Optional, Sequence, Tuple

import numpy as np

from core.logger import get_logger
from core.models import Passage, RetrievedPassage
from rag.embedder import EmbeddingService

logger = get_logger("rag.vector_index")


class VectorIndex:
    """
    In-memory cosine-similarity index over passages.

    Lifecycle:
    - Built once from a full passage list via `build`
    - Never mutated afterwards: no add, no remove, vectors are read-only
    """

    def __init__(
        self,
        passages: Sequence[Passage],
        embeddings: np.ndarray,
        model_id: Optional[str] = None,
    ):
        embeddings = np.asarray(embeddings, dtype=np.float32)

        if embeddings.ndim != 2:
            raise ValueError("Embeddings must be 2D")

        if len(embeddings) != len(passages):
            raise ValueError("Embedding/passage length mismatch")

        self._passages: Tuple[Passage, ...] = tuple(passages)
        self._embeddings = embeddings.copy()
        self._embeddings.flags.writeable = False
        self.model_id = model_id

    @classmethod
    def build(cls, passages: Sequence[Passage], embedder: EmbeddingService) -> "VectorIndex":
        if not passages:
            logger.warning("event=INDEX_EMPTY | passages=0")
            return cls([], np.zeros((0, 0), dtype=np.float32), model_id=embedder.model_id)

        logger.info("event=INDEX_EMBED_START | passages=%d", len(passages))

        embeddings = embedder.embed_texts([p.text for p in passages])
        index = cls(passages, embeddings, model_id=embedder.model_id)

        logger.info(
            "event=INDEX_BUILT | vectors=%d | dim=%d | model=%s",
            len(index),
            index.dimension,
            index.model_id,
        )
        return index

    def __len__(self) -> int:
        return len(self._passages)

    @property
    def dimension(self) -> int:
        return self._embeddings.shape[1]

    @property
    def passages(self) -> Tuple[Passage, ...]:
        return self._passages

    def search(self, query_vector: np.ndarray, k: int) -> List[RetrievedPassage]:
        """Top-k passages by descending score; equal scores keep ingestion order."""
        if k < 1:
            raise ValueError("k must be >= 1")

        if not self._passages:
            return []

        query = np.asarray(query_vector, dtype=np.float32).reshape(-1)
        if query.shape[0] != self.dimension:
            raise ValueError(
                f"Query dimension mismatch: expected {self.dimension}, got {query.shape[0]}"
            )

        scores = self._embeddings @ query
        order = np.argsort(-scores, kind="stable")[:k]

        return [
            RetrievedPassage(
                passage=self._passages[idx],
                score=float(scores[idx]),
                rank=rank,
            )
            for rank, idx in enumerate(order, start=1)
        ]
