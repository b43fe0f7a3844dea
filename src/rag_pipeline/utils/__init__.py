"""Utility modules for the RAG pipeline."""

from .logger import get_logger
from .text import clean_markdown, stable_hash, strip_code_fences

__all__ = [
    "get_logger",
    "clean_markdown",
    "stable_hash",
    "strip_code_fences",
]
