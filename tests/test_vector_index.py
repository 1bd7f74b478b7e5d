import numpy as np
import pytest

from core.models import Passage
from rag.vector_index import VectorIndex


def _passages(n):
    return [Passage("doc.pdf", i + 1, f"page {i + 1}") for i in range(n)]


def test_build_keeps_every_passage_in_order(index, passages):
    assert len(index) == len(passages)
    assert index.passages == tuple(passages)
    assert index.dimension == 5
    assert index.model_id == "fake:keyword-v1"


def test_build_with_no_passages_skips_provider(embedder, embedding_provider):
    index = VectorIndex.build([], embedder)

    assert len(index) == 0
    assert embedding_provider.calls == []


def test_vectors_are_read_only(index):
    with pytest.raises(ValueError):
        index._embeddings[0, 0] = 42.0


def test_search_returns_top_k_by_descending_score():
    embeddings = np.array([[0.0, 1.0], [0.6, 0.8], [1.0, 0.0], [0.8, 0.6]])
    index = VectorIndex(_passages(4), embeddings)

    results = index.search(np.array([1.0, 0.0]), k=3)

    assert [r.passage.position for r in results] == [3, 4, 2]
    assert [r.rank for r in results] == [1, 2, 3]
    scores = [r.score for r in results]
    assert scores == sorted(scores, reverse=True)


def test_ties_keep_ingestion_order():
    embeddings = np.array([[0.0, 1.0], [1.0, 0.0], [1.0, 0.0], [1.0, 0.0]])
    index = VectorIndex(_passages(4), embeddings)

    results = index.search(np.array([1.0, 0.0]), k=2)

    assert [r.passage.position for r in results] == [2, 3]


def test_k_larger_than_index_returns_everything():
    index = VectorIndex(_passages(2), np.eye(2))

    assert len(index.search(np.array([1.0, 0.0]), k=10)) == 2


def test_search_on_empty_index_returns_empty():
    index = VectorIndex([], np.zeros((0, 0)))

    assert index.search(np.array([1.0, 0.0]), k=3) == []


def test_search_rejects_dimension_mismatch():
    index = VectorIndex(_passages(2), np.eye(2))

    with pytest.raises(ValueError):
        index.search(np.array([1.0, 0.0, 0.0]), k=1)


def test_search_rejects_non_positive_k():
    index = VectorIndex(_passages(2), np.eye(2))

    with pytest.raises(ValueError):
        index.search(np.array([1.0, 0.0]), k=0)


def test_constructor_rejects_length_mismatch():
    with pytest.raises(ValueError):
        VectorIndex(_passages(3), np.eye(2))
