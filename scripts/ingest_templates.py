#!/usr/bin/env python3
"""
Load exemplar templates into the vector store.

The input is a JSON array of objects:

    {"id": "title-001", "text": "...", "metadata": {"section": "title", "category": "blog", "rating": 5}}

Usage:
    python scripts/ingest_templates.py scripts/sample_templates.json
"""

import argparse
import asyncio
import json
import time
from pathlib import Path
from typing import Any

from rag_pipeline.errors import PipelineError
from rag_pipeline.repositories import GeminiEmbeddingProvider, RedisVectorRepository
from rag_pipeline.services import CacheService, EmbeddingService, RetrievalService
from rag_pipeline.services.cache_service import EMBEDDINGS, SEARCH


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def load_documents(path: Path) -> list[tuple[str, str, dict[str, Any]]]:
    """Read (id, text, metadata) triples from a JSON file."""
    records = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(records, list):
        raise ValueError(f"{path} must contain a JSON array")

    documents = []
    for index, record in enumerate(records):
        text = (record.get("text") or "").strip()
        if not text:
            print(f"  ✗ Skipping record {index}: empty text")
            continue
        doc_id = str(record.get("id") or f"{path.stem}-{index:04d}")
        documents.append((doc_id, text, dict(record.get("metadata") or {})))
    return documents


async def ingest(path: Path, batch_size: int) -> None:
    """Embed and store every document in ``path``."""
    print_section(f"Ingesting {path.name}")

    documents = load_documents(path)
    print(f"\n📝 Loaded {len(documents)} documents")

    caches = CacheService.create()
    provider = GeminiEmbeddingProvider.create()
    store = RedisVectorRepository.create()
    retriever = RetrievalService.create(
        embeddings=EmbeddingService.create(provider=provider, cache=caches.region(EMBEDDINGS)),
        store=store,
        cache=caches.region(SEARCH),
    )

    start = time.perf_counter()
    try:
        total = await retriever.batch_ingest(documents, batch_size=batch_size)
    finally:
        await provider.close()

    print(f"\n  ✓ Ingested {total} documents in {time.perf_counter() - start:.1f}s")
    print(f"  Index now holds {store.count_all()} documents")


def main() -> None:
    parser = argparse.ArgumentParser(description="Load exemplar templates into the vector store")
    parser.add_argument("path", type=Path, help="JSON file with exemplar documents")
    parser.add_argument("--batch-size", type=int, default=50, help="Documents per embedding call")
    args = parser.parse_args()

    try:
        asyncio.run(ingest(args.path, args.batch_size))
    except PipelineError as e:
        print(f"\n❌ Error ({e.kind.value}): {e.message}")
        print("\nCheck GEMINI_API_KEY and that REDIS_URL points to a running Redis.")
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
