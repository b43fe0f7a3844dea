"""Prompt assembly.

Pure functions: no network, no cache, no logging. Each one picks the
template for its task and locale and fills in the user input and the
retrieved exemplars (verbatim, in retrieval order).
"""

from collections.abc import Mapping, Sequence

from .templates import NO_EXAMPLES, Locale, PromptTask, get_template

_SECTION_LABELS = {
    Locale.EN: "Section",
    Locale.VI: "Phần",
}
_NOT_SPECIFIED = {
    Locale.EN: ("General position", "Not specified"),
    Locale.VI: ("Vị trí chung", "Không xác định"),
}


def format_examples(
    exemplars: Sequence[str],
    locale: Locale,
    separator: str = "\n- ",
    prefix: str = "- ",
) -> str:
    """Join exemplars into a list block.

    Args:
        exemplars: Exemplar texts in retrieval order
        locale: Output locale (for the empty-list message)
        separator: Separator between exemplars
        prefix: Text placed before the first exemplar

    Returns:
        The formatted block
    """
    items = [e for e in exemplars if e]
    if not items:
        return NO_EXAMPLES[locale]
    return prefix + separator.join(items)


def format_sectioned_examples(
    exemplars_by_section: Mapping[str, Sequence[str]],
    locale: Locale,
) -> str:
    """Group exemplars under a header per section.

    Sections without exemplars are skipped; if none has any, the
    locale's "no examples" message is returned.
    """
    label = _SECTION_LABELS[locale]
    blocks = [
        f"[{label}: {section}]\n{format_examples(items, locale)}"
        for section, items in exemplars_by_section.items()
        if any(items)
    ]
    return "\n\n".join(blocks) if blocks else NO_EXAMPLES[locale]


def format_sections(sections: Mapping[str, str]) -> str:
    """Render CV sections as ``## name`` blocks."""
    return "\n\n".join(f"## {name}\n{text.strip()}" for name, text in sections.items() if text and text.strip())


def build_title_prompt(title: str, exemplars: Sequence[str], locale: Locale | str = Locale.EN) -> str:
    locale = Locale.parse(locale)
    return get_template(PromptTask.TITLE, locale).format(
        title=title,
        examples=format_examples(exemplars, locale),
    )


def build_description_prompt(
    title: str,
    description: str,
    exemplars: Sequence[str],
    locale: Locale | str = Locale.EN,
) -> str:
    locale = Locale.parse(locale)
    return get_template(PromptTask.DESCRIPTION, locale).format(
        title=title,
        description=description,
        examples=format_examples(exemplars, locale),
    )


def build_content_prompt(content: str, exemplars: Sequence[str], locale: Locale | str = Locale.EN) -> str:
    locale = Locale.parse(locale)
    return get_template(PromptTask.CONTENT, locale).format(
        content=content,
        examples=format_examples(exemplars, locale, separator="\n\nExample:\n", prefix=""),
    )


def build_cv_rewrite_prompt(
    section: str,
    text: str,
    exemplars: Sequence[str],
    job_title: str | None = None,
    key_requirements: Sequence[str] | None = None,
    locale: Locale | str = Locale.EN,
) -> str:
    """Build the STAR rewrite prompt for one CV section.

    Args:
        section: Section name (summary, experience, education, skills)
        text: Current section text
        exemplars: Strong examples of the same section
        job_title: Target position, if known
        key_requirements: Key requirements from the job description
        locale: Output locale

    Returns:
        The assembled prompt
    """
    locale = Locale.parse(locale)
    default_title, default_requirements = _NOT_SPECIFIED[locale]
    requirements = ", ".join(r for r in (key_requirements or []) if r) or default_requirements

    return get_template(PromptTask.CV_REWRITE, locale).format(
        section=section,
        text=text,
        job_title=job_title or default_title,
        requirements=requirements,
        examples=format_examples(exemplars, locale),
    )


def build_cv_analysis_prompt(
    cv_sections: Mapping[str, str],
    exemplars_by_section: Mapping[str, Sequence[str]],
    locale: Locale | str = Locale.EN,
) -> str:
    """Build the CV analysis prompt (JSON output with scoring rules).

    Args:
        cv_sections: CV text per section
        exemplars_by_section: Exemplars per section, from the parallel search
        locale: Output locale

    Returns:
        The assembled prompt
    """
    locale = Locale.parse(locale)
    return get_template(PromptTask.CV_ANALYSIS, locale).format(
        cv=format_sections(cv_sections),
        examples=format_sectioned_examples(exemplars_by_section, locale),
    )


def build_job_match_prompt(
    cv_sections: Mapping[str, str],
    job_description: str,
    exemplars_by_section: Mapping[str, Sequence[str]],
    locale: Locale | str = Locale.EN,
) -> str:
    """Build the CV vs. job description matching prompt.

    Args:
        cv_sections: CV text per section
        job_description: The job description
        exemplars_by_section: Exemplars per section
        locale: Output locale

    Returns:
        The assembled prompt
    """
    locale = Locale.parse(locale)
    return get_template(PromptTask.JOB_MATCH, locale).format(
        cv=format_sections(cv_sections),
        job_description=job_description.strip(),
        examples=format_sectioned_examples(exemplars_by_section, locale),
    )
