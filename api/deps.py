from functools import lru_cache

from api.config import settings
from core.exceptions import ConfigurationError
from core.logger import get_logger
from core.retry import RetryPolicy
from orchestration.service import QAService
from orchestration.synthesizer import AnswerSynthesizer
from rag.embedder import EmbeddingService
from rag.index_manager import IndexManager, build_index_from_pdfs
from rag.providers import build_chat_provider, build_embedding_provider
from rag.retriever import Retriever

logger = get_logger("api.deps")


def build_retry_policy() -> RetryPolicy:
    return RetryPolicy(
        max_attempts=settings.MAX_RETRIES,
        base_delay=settings.RETRY_BASE_DELAY,
        max_delay=settings.RETRY_MAX_DELAY,
    )


def _build_qa_service() -> QAService:
    retry_policy = build_retry_policy()

    _embedder = EmbeddingService(
        build_embedding_provider(
            settings.EMBEDDING_PROVIDER,
            settings.EMBEDDING_MODEL,
            settings.EMBEDDING_API_KEY,
            settings.PROVIDER_TIMEOUT_SECONDS,
        ),
        retry_policy,
        batch_size=settings.EMBEDDING_BATCH_SIZE,
    )

    _synthesizer = AnswerSynthesizer(
        build_chat_provider(
            settings.LLM_PROVIDER,
            settings.LLM_MODEL_ID,
            settings.LLM_API_KEY,
            settings.PROVIDER_TIMEOUT_SECONDS,
        ),
        retry_policy,
        temperature=settings.TEMPERATURE,
        max_tokens=settings.MAX_ANSWER_TOKENS,
        language=settings.ANSWER_LANGUAGE,
        no_context_answer=settings.NO_CONTEXT_ANSWER,
    )

    _index_manager = IndexManager(
        lambda: build_index_from_pdfs(settings.PDF_PATHS, _embedder)
    )

    return QAService(
        index_manager=_index_manager,
        retriever=Retriever(_embedder, top_k=settings.RETRIEVAL_K),
        synthesizer=_synthesizer,
    )


@lru_cache(maxsize=1)
def get_qa_service() -> QAService:
    """Process-wide service; the index inside it is built lazily on first question."""
    try:
        return _build_qa_service()

    except ValueError as e:
        logger.exception("event=SERVICE_CONFIG_INVALID")
        raise ConfigurationError(
            "Invalid service configuration",
            error=e,
            context={
                "MAX_RETRIES": settings.MAX_RETRIES,
                "EMBEDDING_BATCH_SIZE": settings.EMBEDDING_BATCH_SIZE,
                "RETRIEVAL_K": settings.RETRIEVAL_K,
            },
        ) from e
