"""Pipeline orchestrator.

Runs one request through Extract -> Retrieve -> Assemble -> Generate ->
Clean -> Restore and is the single boundary where failures become
``PipelineError``. Callers never see raw transport exceptions.
"""

from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from rag_pipeline.config import settings
from rag_pipeline.dto import CVAnalysisReport, JobMatchReport
from rag_pipeline.entities import PipelineRun, PipelineState
from rag_pipeline.errors import (
    InternalError,
    NotFoundError,
    PipelineError,
    RateLimitedError,
    UpstreamMalformedError,
)
from rag_pipeline.prompts import (
    Locale,
    build_content_prompt,
    build_cv_analysis_prompt,
    build_cv_rewrite_prompt,
    build_description_prompt,
    build_job_match_prompt,
    build_title_prompt,
)
from rag_pipeline.protocols import CacheStore, EmbeddingProvider, RateLimiter, TextGenerator, VectorStore
from rag_pipeline.repositories import GeminiEmbeddingProvider, GeminiTextGenerator, RedisVectorRepository
from rag_pipeline.utils.logger import get_logger
from rag_pipeline.utils.text import clean_markdown, stable_hash, strip_code_fences

from .cache_service import EMBEDDINGS, JOB_MATCH, RESULTS, SEARCH, CacheService
from .content_preservation_service import ContentPreservationService
from .embedding_service import EmbeddingService
from .retrieval_service import RetrievalService

logger = get_logger(__name__)

T = TypeVar("T")
ReportT = TypeVar("ReportT", bound=BaseModel)

BLOG_CATEGORY = "blog"
CV_CATEGORY = "cv"
JOB_MATCH_CATEGORY = "job_match"


class PipelineService:
    """One method per task type; each runs the full RAG sequence.

    Business logic per request:
    1. Check the rate limit (if a limiter is injected) and the input
    2. Serve from the result cache when possible
    3. Extract embedded images (content-bearing tasks)
    4. Retrieve exemplars (single search, or parallel per section)
    5. Assemble the prompt and generate
    6. Clean the output (markdown artifacts, or JSON fences + validation)
    7. Restore embedded images
    No stage is retried.

    Example:
        ```python
        pipeline = PipelineService.create()
        title = await pipeline.analyze_title("why caching matters")
        report = await pipeline.match_job({"skills": "Python, Redis"}, job_description)
        ```
    """

    def __init__(
        self,
        retriever: RetrievalService,
        generator: TextGenerator,
        caches: CacheService,
        preservation: ContentPreservationService | None = None,
        rate_limiter: RateLimiter | None = None,
        top_k: int | None = None,
        on_transition: Callable[[PipelineRun], None] | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            retriever: Vector retriever (required).
            generator: Generation gateway (required).
            caches: Cache regions; uses "results" and "job_match" (required).
            preservation: Image extraction/restoration. Defaults to a new instance.
            rate_limiter: Optional limiter consulted before each request.
            top_k: Exemplars per search. Defaults to settings.retrieval_top_k.
            on_transition: Callback invoked after every state change.
        """
        self._retriever = retriever
        self._generator = generator
        self._caches = caches
        self._results: CacheStore = caches.region(RESULTS)
        self._job_matches: CacheStore = caches.region(JOB_MATCH)
        self._preservation = preservation or ContentPreservationService()
        self._rate_limiter = rate_limiter
        self._top_k = top_k if top_k is not None else settings.retrieval_top_k
        self._on_transition = on_transition

    @classmethod
    def create(
        cls,
        caches: CacheService | None = None,
        vector_store: VectorStore | None = None,
        embedding_provider: EmbeddingProvider | None = None,
        generator: TextGenerator | None = None,
        rate_limiter: RateLimiter | None = None,
    ) -> "PipelineService":
        """Factory method wiring the default Redis + Gemini stack.

        Any component can be replaced by passing it explicitly.

        Returns:
            Configured PipelineService instance
        """
        caches = caches or CacheService.create()
        embeddings = EmbeddingService.create(
            provider=embedding_provider or GeminiEmbeddingProvider.create(),
            cache=caches.region(EMBEDDINGS),
        )
        retriever = RetrievalService.create(
            embeddings=embeddings,
            store=vector_store or RedisVectorRepository.create(),
            cache=caches.region(SEARCH),
        )
        return cls(
            retriever=retriever,
            generator=generator or GeminiTextGenerator.create(),
            caches=caches,
            rate_limiter=rate_limiter,
        )

    # ── Public API ───────────────────────────────────────────────────

    async def analyze_title(self, title: str, locale: Locale | str = Locale.EN) -> str:
        """Generate an improved blog title.

        Raises:
            PipelineError: On any failure (NotFoundError for a blank title)
        """
        locale = Locale.parse(locale)
        run = self._start("title")

        async def steps() -> str:
            self._precheck(run, title, "Title is empty")
            return await self._generate_text(
                run,
                cache_key=f"ai:title:{stable_hash(title, locale.value)}",
                text=title,
                section="title",
                category=BLOG_CATEGORY,
                build_prompt=lambda text, examples: build_title_prompt(text, examples, locale),
            )

        return await self._guard(run, steps)

    async def analyze_description(
        self,
        title: str,
        description: str,
        locale: Locale | str = Locale.EN,
    ) -> str:
        """Generate a meta description for a post.

        Raises:
            PipelineError: On any failure (NotFoundError for a blank description)
        """
        locale = Locale.parse(locale)
        run = self._start("description")

        async def steps() -> str:
            self._precheck(run, description, "Description is empty")
            return await self._generate_text(
                run,
                cache_key=f"ai:description:{stable_hash(title or '', description, locale.value)}",
                text=description,
                query=f"{title or ''} {description}".strip(),
                section="description",
                category=BLOG_CATEGORY,
                build_prompt=lambda text, examples: build_description_prompt(
                    title or "", text, examples, locale
                ),
            )

        return await self._guard(run, steps)

    async def analyze_content(self, content: str, locale: Locale | str = Locale.EN) -> str:
        """Enhance long-form content, keeping embedded images intact.

        Raises:
            PipelineError: On any failure (NotFoundError for blank content)
        """
        locale = Locale.parse(locale)
        run = self._start("content")

        async def steps() -> str:
            self._precheck(run, content, "Content is empty")
            return await self._generate_text(
                run,
                cache_key=f"ai:content:{stable_hash(content, locale.value)}",
                text=content,
                section="content",
                category=BLOG_CATEGORY,
                build_prompt=lambda text, examples: build_content_prompt(text, examples, locale),
                preserve_content=True,
            )

        return await self._guard(run, steps)

    async def rewrite_cv_section(
        self,
        section: str,
        text: str,
        job_title: str | None = None,
        key_requirements: Sequence[str] | None = None,
        locale: Locale | str = Locale.EN,
    ) -> str:
        """Rewrite one CV section using the STAR framework.

        Raises:
            PipelineError: On any failure (NotFoundError for blank text)
        """
        locale = Locale.parse(locale)
        run = self._start("cv_rewrite")
        requirements = list(key_requirements or [])

        async def steps() -> str:
            self._precheck(run, text, "CV section is empty")
            return await self._generate_text(
                run,
                cache_key=f"ai:cv_rewrite:{stable_hash(section, text, job_title or '', requirements, locale.value)}",
                text=text,
                section=section,
                category=CV_CATEGORY,
                build_prompt=lambda clean, examples: build_cv_rewrite_prompt(
                    section, clean, examples, job_title, requirements, locale
                ),
                preserve_content=True,
            )

        return await self._guard(run, steps)

    async def analyze_cv(
        self,
        cv_sections: Mapping[str, str],
        locale: Locale | str = Locale.EN,
    ) -> CVAnalysisReport:
        """Score a CV and produce actionable suggestions.

        Args:
            cv_sections: CV text per section (summary, experience, ...)
            locale: Output locale

        Raises:
            PipelineError: On any failure (NotFoundError if every section is blank)
        """
        locale = Locale.parse(locale)
        run = self._start("cv_analysis")

        async def steps() -> CVAnalysisReport:
            self._check_rate_limit(run)
            sections = self._non_empty_sections(cv_sections)
            return await self._generate_report(
                run,
                cache=self._results,
                cache_key=f"ai:cv_analysis:{stable_hash(sections, locale.value)}",
                sections=sections,
                category=CV_CATEGORY,
                build_prompt=lambda examples: build_cv_analysis_prompt(sections, examples, locale),
                report_type=CVAnalysisReport,
            )

        return await self._guard(run, steps)

    async def match_job(
        self,
        cv_sections: Mapping[str, str],
        job_description: str,
        locale: Locale | str = Locale.EN,
    ) -> JobMatchReport:
        """Match a CV against a job description.

        Args:
            cv_sections: CV text per section
            job_description: The job description
            locale: Output locale

        Raises:
            PipelineError: On any failure (NotFoundError for a blank CV or JD)
        """
        locale = Locale.parse(locale)
        run = self._start("job_match")

        async def steps() -> JobMatchReport:
            self._precheck(run, job_description, "Job description is empty")
            sections = self._non_empty_sections(cv_sections)
            return await self._generate_report(
                run,
                cache=self._job_matches,
                cache_key=f"ai:job_match:{stable_hash(sections, job_description, locale.value)}",
                sections=sections,
                category=JOB_MATCH_CATEGORY,
                build_prompt=lambda examples: build_job_match_prompt(
                    sections, job_description, examples, locale
                ),
                report_type=JobMatchReport,
            )

        return await self._guard(run, steps)

    async def close(self) -> None:
        """Close HTTP clients held by the generator and embedding provider."""
        for component in (self._generator, self._retriever.embeddings.provider):
            close = getattr(component, "close", None)
            if close is not None:
                await close()

    # ── Stages ───────────────────────────────────────────────────────

    async def _generate_text(
        self,
        run: PipelineRun,
        *,
        cache_key: str,
        text: str,
        section: str,
        category: str,
        build_prompt: Callable[[str, list[str]], str],
        query: str | None = None,
        preserve_content: bool = False,
    ) -> str:
        cached = self._results.get(cache_key)
        if isinstance(cached, str):
            logger.info("Serving cached %s result", run.task)
            self._advance(run, PipelineState.COMPLETED)
            return cached

        placeholder_map: dict[str, str] = {}
        if preserve_content:
            self._advance(run, PipelineState.EXTRACTING)
            extracted = self._preservation.extract(text)
            self._preservation.validate(extracted)
            text = extracted.clean_text
            placeholder_map = extracted.placeholder_map
            logger.info("Extracted %d images from %s input", extracted.image_count, run.task)

        self._advance(run, PipelineState.RETRIEVING)
        documents = await self._retriever.search(query or text, section, category, self._top_k)
        logger.debug("Found %d %s exemplars", len(documents), section)

        self._advance(run, PipelineState.GENERATING)
        prompt = build_prompt(text, [doc.text for doc in documents])
        generated = await self._generator.generate(prompt)

        self._advance(run, PipelineState.CLEANING)
        result = clean_markdown(generated)
        if not result:
            raise UpstreamMalformedError("Model returned empty text")

        if preserve_content:
            self._advance(run, PipelineState.RESTORING)
            result = self._preservation.restore(result, placeholder_map)

        self._results.set(cache_key, result)
        self._complete(run)
        return result

    async def _generate_report(
        self,
        run: PipelineRun,
        *,
        cache: CacheStore,
        cache_key: str,
        sections: dict[str, str],
        category: str,
        build_prompt: Callable[[dict[str, list[str]]], str],
        report_type: type[ReportT],
    ) -> ReportT:
        cached = cache.get(cache_key)
        if isinstance(cached, dict):
            logger.info("Serving cached %s report", run.task)
            self._advance(run, PipelineState.COMPLETED)
            return report_type.model_validate(cached)

        self._advance(run, PipelineState.RETRIEVING)
        by_section = await self._retriever.search_multiple_sections_parallel(sections, category, self._top_k)

        self._advance(run, PipelineState.GENERATING)
        prompt = build_prompt({name: [doc.text for doc in docs] for name, docs in by_section.items()})
        generated = await self._generator.generate(prompt)

        self._advance(run, PipelineState.CLEANING)
        try:
            report = report_type.model_validate_json(strip_code_fences(generated))
        except ValidationError as e:
            raise UpstreamMalformedError(f"Model returned an invalid {run.task} report") from e

        cache.set(cache_key, report.model_dump(mode="json", by_alias=True))
        self._complete(run)
        return report

    # ── State machine helpers ────────────────────────────────────────

    def _start(self, task: str) -> PipelineRun:
        run = PipelineRun(task=task)
        logger.info("Received %s request", task)
        self._notify(run)
        return run

    def _advance(self, run: PipelineRun, state: PipelineState) -> None:
        run.advance(state)
        logger.debug("%s request -> %s", run.task, state.value)
        self._notify(run)

    def _complete(self, run: PipelineRun) -> None:
        self._advance(run, PipelineState.COMPLETED)
        logger.info("Completed %s request in %.0f ms", run.task, run.elapsed_ms)

    def _notify(self, run: PipelineRun) -> None:
        if self._on_transition is not None:
            self._on_transition(run)

    async def _guard(self, run: PipelineRun, steps: Callable[[], Awaitable[T]]) -> T:
        """Run the task steps, converting every failure to PipelineError."""
        try:
            return await steps()
        except PipelineError as e:
            self._fail(run, e)
            raise
        except Exception as e:
            error = InternalError(f"Failed to process {run.task} request")
            self._fail(run, error, cause=e)
            raise error from e

    def _fail(self, run: PipelineRun, error: PipelineError, cause: Exception | None = None) -> None:
        if error.failed_at is None:
            error.failed_at = run.state.value
        if not run.state.is_terminal:
            run.fail(error.kind.value)
            self._notify(run)

        if cause is not None:
            logger.error("%s request failed at %s", run.task, error.failed_at, exc_info=cause)
        else:
            logger.error("%s request failed at %s: %s", run.task, error.failed_at, error.message)

    def _check_rate_limit(self, run: PipelineRun) -> None:
        if self._rate_limiter is None:
            return
        window = settings.rate_limit_window
        if not self._rate_limiter.is_allowed(f"ai:{run.task}", settings.rate_limit_requests, window):
            raise RateLimitedError("Rate limit exceeded. Please try again later.", retry_after=float(window))

    def _precheck(self, run: PipelineRun, value: str | None, message: str) -> None:
        self._check_rate_limit(run)
        if value is None or not value.strip():
            raise NotFoundError(message)

    @staticmethod
    def _non_empty_sections(cv_sections: Mapping[str, str]) -> dict[str, str]:
        sections = {name: text for name, text in (cv_sections or {}).items() if text and text.strip()}
        if not sections:
            raise NotFoundError("CV has no content")
        return sections
