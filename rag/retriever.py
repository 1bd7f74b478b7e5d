from typing import List, Optional

from core.exceptions import RetrievalError
from core.logger import get_logger
from core.models import RetrievedPassage
from rag.embedder import EmbeddingService
from rag.vector_index import VectorIndex

logger = get_logger("rag.retriever")


class Retriever:
    def __init__(self, embedder: EmbeddingService, top_k: int = 4):
        if top_k < 1:
            raise ValueError("top_k must be >= 1")

        self.embedder = embedder
        self.top_k = top_k

    def retrieve(
        self,
        index: VectorIndex,
        question: str,
        k: Optional[int] = None,
    ) -> List[RetrievedPassage]:
        k = self.top_k if k is None else k
        if k < 1:
            raise ValueError("k must be >= 1")

        if len(index) == 0:
            logger.info("event=RETRIEVAL_EMPTY_INDEX")
            return []

        # Vectors from different models live in different spaces
        if index.model_id != self.embedder.model_id:
            raise RetrievalError(
                "Index was built with a different embedding model",
                context={
                    "index_model": index.model_id,
                    "query_model": self.embedder.model_id,
                },
            )

        query_vector = self.embedder.embed_query(question)

        try:
            context = index.search(query_vector, k)
        except ValueError as e:
            raise RetrievalError(
                "Similarity search failed",
                error=e,
                context={"k": k, "index_size": len(index)},
            ) from e

        logger.info(
            "event=RETRIEVAL_COMPLETE | k=%d | returned=%d | top_score=%.4f",
            k,
            len(context),
            context[0].score if context else 0.0,
        )
        return context
