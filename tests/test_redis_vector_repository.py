"""
Tests for the Redis vector store (redisvl index mocked).
"""

from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from rag_pipeline.entities import SearchFilter
from rag_pipeline.repositories import RedisVectorRepository


@pytest.fixture
def index():
    """Mocked redisvl SearchIndex."""
    with patch("rag_pipeline.repositories.redis_vector_repository.SearchIndex") as mock_cls:
        instance = MagicMock()
        instance.exists.return_value = False
        mock_cls.from_dict.return_value = instance
        yield instance


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def repository(index, client):
    return RedisVectorRepository(redis_client=client, index_name="templates", dimension=4)


def test_index_is_created_when_missing(repository, index):
    index.create.assert_called_once_with(overwrite=False)
    assert repository.index_name == "templates"


def test_existing_index_is_reused(client):
    with patch("rag_pipeline.repositories.redis_vector_repository.SearchIndex") as mock_cls:
        mock_cls.from_dict.return_value.exists.return_value = True
        RedisVectorRepository(redis_client=client, index_name="templates", dimension=4)

        mock_cls.from_dict.return_value.create.assert_not_called()
        schema = mock_cls.from_dict.call_args.args[0]

    vector_field = next(f for f in schema["fields"] if f["type"] == "vector")
    assert vector_field["attrs"]["dims"] == 4
    assert vector_field["attrs"]["metric"] == "COSINE"


def test_build_filter_with_category():
    expression = str(RedisVectorRepository.build_filter(SearchFilter("title", "blog", 3)))

    assert "@section:{title}" in expression
    assert "@category:{blog}" in expression
    assert "@rating:[3" in expression


def test_build_filter_without_category():
    expression = str(RedisVectorRepository.build_filter(SearchFilter("content", "general", 4)))

    assert "@section:{content}" in expression
    assert "category" not in expression
    assert "@rating:[4" in expression


def test_similarity_search_converts_distance_to_score(repository, index):
    index.query.return_value = [
        {"doc_id": "a", "content": "far", "section": "title", "rating": "4", "metadata": "{}", "vector_distance": "0.6"},
        {"doc_id": "b", "content": "near", "section": "title", "rating": "5", "metadata": '{"author": "x"}', "vector_distance": "0.1"},
    ]

    documents = repository.similarity_search([0.1, 0.2, 0.3, 0.4], SearchFilter("title"), 0.3, 5)

    assert [d.id for d in documents] == ["b", "a"]
    assert documents[0].score == pytest.approx(0.9)
    assert documents[0].metadata == {"author": "x", "section": "title", "rating": 5.0}
    query = index.query.call_args.args[0]
    assert query.distance_threshold == pytest.approx(0.7)


def test_add_stores_float32_vectors(repository, index):
    ids = repository.add(
        [("doc-1", "Ten Tips", {"section": "title", "category": "blog", "rating": 5, "author": "x"})],
        [[0.1, 0.2, 0.3, 0.4]],
    )

    assert ids == ["doc-1"]
    records = index.load.call_args.args[0]
    assert index.load.call_args.kwargs == {"id_field": "doc_id"}
    record = records[0]
    assert record["section"] == "title"
    assert record["rating"] == 5.0
    assert record["metadata"] == '{"author": "x"}'
    np.testing.assert_allclose(np.frombuffer(record["embedding"], dtype=np.float32), [0.1, 0.2, 0.3, 0.4], rtol=1e-6)


def test_add_rejects_wrong_dimension(repository):
    with pytest.raises(ValueError, match="dimension 3"):
        repository.add([("doc-1", "text", {})], [[0.1, 0.2, 0.3]])


def test_delete_uses_prefixed_keys(repository, client):
    client.delete.return_value = 2

    assert repository.delete(["a", "b"]) == 2
    client.delete.assert_called_once_with("templates:a", "templates:b")
