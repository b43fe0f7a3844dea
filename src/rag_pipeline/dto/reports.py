"""Structured reports returned by the CV analysis and job-match tasks."""

from typing import Any

from pydantic import BaseModel, Field


class Suggestion(BaseModel):
    """A single actionable suggestion."""

    id: str | None = Field(None, description="Suggestion id (uuid)")
    type: str = Field("improvement", description="improvement, warning or error")
    section: str = Field("general", description="CV section the suggestion applies to")
    line_number: int | None = Field(None, alias="lineNumber")
    message: str = Field(..., description="The issue found")
    suggestion: str = Field("", description="Short instruction for the user")
    data: Any = Field(None, description="Content ready to apply (shape depends on section)")
    applied: bool = False

    model_config = {"extra": "ignore", "populate_by_name": True}


class CVAnalysisReport(BaseModel):
    """Result of ``analyze_cv``."""

    overall_score: int = Field(..., alias="overallScore", ge=0, le=100)
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    suggestions: list[Suggestion] = Field(default_factory=list)

    model_config = {"extra": "ignore", "populate_by_name": True}


class DetailedScores(BaseModel):
    """Weighted sub-scores of a job match."""

    skills_match: float = Field(0, alias="skillsMatch", description="0-40")
    experience_match: float = Field(0, alias="experienceMatch", description="0-30")
    education_match: float = Field(0, alias="educationMatch", description="0-15")
    cultural_fit: float = Field(0, alias="culturalFit", description="0-10")
    keywords_optimization: float = Field(0, alias="keywordsOptimization", description="0-5")

    model_config = {"extra": "ignore", "populate_by_name": True}


class JobMatchReport(BaseModel):
    """Result of ``match_job``."""

    overall_match_score: int = Field(..., alias="overallMatchScore", ge=0, le=100)
    detailed_scores: DetailedScores = Field(default_factory=DetailedScores, alias="detailedScores")
    missing_keywords: list[str] = Field(default_factory=list, alias="missingKeywords")
    suggestions: list[Suggestion] = Field(default_factory=list)

    model_config = {"extra": "ignore", "populate_by_name": True}
