"""Search filter domain entity."""

from dataclasses import dataclass

GENERAL_CATEGORY = "general"


@dataclass(frozen=True)
class SearchFilter:
    """Metadata filter applied to every similarity search.

    ``category`` is dropped when it is empty or the catch-all "general"
    value, so general searches match every category.

    Attributes:
        section: Exact section match (title, description, content, ...)
        category: Exact category match, or None
        min_rating: Minimum value of the ``rating`` metadata field
    """

    section: str
    category: str | None = None
    min_rating: int = 3

    def __post_init__(self) -> None:
        if not self.category or self.category.strip().lower() == GENERAL_CATEGORY:
            object.__setattr__(self, "category", None)

    def __str__(self) -> str:
        clauses = [f"section == '{self.section}'"]
        if self.category:
            clauses.append(f"category == '{self.category}'")
        clauses.append(f"rating >= {self.min_rating}")
        return " AND ".join(clauses)
