"""Extraction result domain entity."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ExtractionResult:
    """Text with embedded images swapped for placeholder tokens.

    Attributes:
        clean_text: Input text with each image tag replaced by ``{{IMAGE_n}}``
        placeholder_map: Placeholder -> original tag, in order of appearance
    """

    clean_text: str
    placeholder_map: dict[str, str] = field(default_factory=dict)

    @property
    def image_count(self) -> int:
        return len(self.placeholder_map)

    @property
    def has_images(self) -> bool:
        return bool(self.placeholder_map)
