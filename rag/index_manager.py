import threading
from concurrent.futures import Future
from enum import Enum
from typing import Callable, Optional, Sequence

from core.logger import get_logger
from ingestion.loader import load_documents
from rag.embedder import EmbeddingService
from rag.vector_index import VectorIndex

logger = get_logger("rag.index_manager")


class IndexState(str, Enum):
    UNINITIALIZED = "UNINITIALIZED"
    BUILDING = "BUILDING"
    READY = "READY"


def build_index_from_pdfs(
    pdf_paths: Sequence[str],
    embedder: EmbeddingService,
) -> VectorIndex:
    passages = load_documents(pdf_paths)
    return VectorIndex.build(passages, embedder)


class IndexManager:
    """
    Process-wide owner of the vector index.

    Lifecycle:
    - UNINITIALIZED -> BUILDING on the first `get_index` call
    - BUILDING -> READY on success; the index is then reused forever
    - BUILDING -> UNINITIALIZED on failure, so a later call can retry

    At most one build runs at a time. Callers arriving during a build
    wait on the same future and observe its result or its error.
    """

    def __init__(self, build_fn: Callable[[], VectorIndex]):
        self._build_fn = build_fn
        self._lock = threading.Lock()
        self._state = IndexState.UNINITIALIZED
        self._index: Optional[VectorIndex] = None
        self._inflight: Optional[Future] = None
        self.build_count = 0

    def status(self) -> IndexState:
        return self._state

    def get_index(self) -> VectorIndex:
        if self._state is IndexState.READY:
            return self._index

        with self._lock:
            if self._state is IndexState.READY:
                return self._index

            if self._state is IndexState.BUILDING:
                future = self._inflight
                owner = False
            else:
                future = Future()
                self._inflight = future
                self._state = IndexState.BUILDING
                self.build_count += 1
                owner = True

        if not owner:
            logger.info("event=INDEX_BUILD_WAIT")
            return future.result()

        logger.info("event=INDEX_BUILD_START | attempt=%d", self.build_count)

        try:
            index = self._build_fn()

        except BaseException as e:
            logger.exception("event=INDEX_BUILD_FAILED")
            with self._lock:
                self._state = IndexState.UNINITIALIZED
                self._inflight = None
            future.set_exception(e)
            raise

        with self._lock:
            self._index = index
            self._state = IndexState.READY
            self._inflight = None
        future.set_result(index)

        logger.info("event=INDEX_READY | passages=%d", len(index))
        return index
