"""Content-preservation transform.

Inline images (typically ``data:`` URIs with large base64 payloads) are
swapped for short placeholder tokens before text is sent to the model,
then swapped back afterwards. The model never sees the payloads, so they
cannot be truncated or corrupted.

Known limitation: matching is regex-based. A ``src`` value containing an
escaped quote ends at the first quote character, and ``<img>`` tags
without a quoted ``src`` are left untouched.
"""

import re

from rag_pipeline.entities import ExtractionResult
from rag_pipeline.utils.logger import get_logger

logger = get_logger(__name__)

IMAGE_TAG_PATTERN = re.compile(
    r"""<img[^>]*?\s+src=["']([^"']+)["'][^>]*?>""",
    re.IGNORECASE | re.DOTALL,
)
PLACEHOLDER_FORMAT = "{{{{IMAGE_{index}}}}}"
PLACEHOLDER_PATTERN = re.compile(r"\{\{IMAGE_\d+\}\}")


def placeholder(index: int) -> str:
    """Return the placeholder token for an image index (``{{IMAGE_<n>}}``)."""
    return PLACEHOLDER_FORMAT.format(index=index)


class ContentPreservationService:
    """Extracts and restores embedded images around a generation step.

    Stateless; one ExtractionResult is created per request.

    Example:
        ```python
        preservation = ContentPreservationService()
        extracted = preservation.extract(html)
        generated = await generator.generate(extracted.clean_text)
        html_out = preservation.restore(generated, extracted.placeholder_map)
        ```
    """

    def extract(self, html: str | None) -> ExtractionResult:
        """Replace each image tag with a placeholder.

        Placeholders are numbered from 0 in left-to-right order of the
        tags in the input.

        Args:
            html: Source text (may be None or empty)

        Returns:
            The clean text and the placeholder -> original tag map
        """
        if not html:
            return ExtractionResult(clean_text=html or "", placeholder_map={})

        placeholder_map: dict[str, str] = {}

        def _substitute(match: re.Match) -> str:
            token = placeholder(len(placeholder_map))
            placeholder_map[token] = match.group(0)
            return token

        clean_text = IMAGE_TAG_PATTERN.sub(_substitute, html)

        if placeholder_map:
            logger.debug("Extracted %d images from content", len(placeholder_map))
        return ExtractionResult(clean_text=clean_text, placeholder_map=placeholder_map)

    def restore(self, text: str | None, placeholder_map: dict[str, str] | None) -> str:
        """Put the original tags back in place of their placeholders.

        Every occurrence of a placeholder is replaced. A placeholder
        missing from ``text`` is logged and skipped, so its image is
        simply absent from the output.

        Args:
            text: Generated text containing placeholders
            placeholder_map: Map returned by ``extract``

        Returns:
            Text with images restored
        """
        if not text or not placeholder_map:
            return text or ""

        found = set(PLACEHOLDER_PATTERN.findall(text))
        restored = 0
        for token in placeholder_map:
            if token in found:
                restored += 1
            else:
                logger.warning("Placeholder %s not found in generated content", token)

        # Single pass: restored tags are never rescanned for placeholders.
        text = PLACEHOLDER_PATTERN.sub(lambda m: placeholder_map.get(m.group(0), m.group(0)), text)

        logger.info("Restored %d out of %d images", restored, len(placeholder_map))
        return text

    def validate(self, result: ExtractionResult | None) -> bool:
        """Check that placeholders 0..n-1 appear in both the text and the map.

        Args:
            result: An extraction result

        Returns:
            True if consistent
        """
        if result is None:
            return False

        for index in range(len(result.placeholder_map)):
            token = placeholder(index)
            if token not in result.clean_text or token not in result.placeholder_map:
                logger.warning("Extraction is missing placeholder %s", token)
                return False
        return True
