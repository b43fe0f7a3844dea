"""Prompt templates and assembly functions.

Templates live in a lookup table keyed by (task, locale); the assembler
functions are pure and only fill them in.

Usage:
    ```python
    from rag_pipeline.prompts import Locale, build_title_prompt

    prompt = build_title_prompt("caching tips", ["10 Caching Tips"], Locale.VI)
    ```
"""

from .assembler import (
    build_content_prompt,
    build_cv_analysis_prompt,
    build_cv_rewrite_prompt,
    build_description_prompt,
    build_job_match_prompt,
    build_title_prompt,
    format_examples,
)
from .templates import TEMPLATES, Locale, PromptTask, get_template

__all__ = [
    "TEMPLATES",
    "Locale",
    "PromptTask",
    "get_template",
    "format_examples",
    "build_title_prompt",
    "build_description_prompt",
    "build_content_prompt",
    "build_cv_analysis_prompt",
    "build_cv_rewrite_prompt",
    "build_job_match_prompt",
]
