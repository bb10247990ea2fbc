from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

SuggestionType = Literal["replace", "add", "enhance"]
Impact = Literal["high", "medium", "low"]
Category = Literal["skills", "experience", "keywords", "formatting"]
ExportFormat = Literal["pdf", "docx", "rtf"]

JOB_DESCRIPTION_MAX_CHARS = 10000


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class KeywordMatch(CamelModel):
    keyword: str = Field(min_length=1)
    count: int = Field(ge=1)


class Suggestion(CamelModel):
    id: str = Field(min_length=1)
    type: SuggestionType
    keyword: str = ""
    location: str = ""
    original_text: str = ""
    suggested_text: str = ""
    reason: str = ""
    impact: Impact = "medium"
    category: Category = "keywords"

    @model_validator(mode="after")
    def _replace_requires_original_text(self) -> "Suggestion":
        if self.type == "replace" and not self.original_text.strip():
            raise ValueError("replace suggestions require a non-empty originalText")
        return self


class ContextualInsights(CamelModel):
    resume_strengths: list[str] = Field(default_factory=list)
    improvement_areas: list[str] = Field(default_factory=list)
    overall_tone: str = ""
    experience_level: str = ""


class AnalysisResult(CamelModel):
    match_score: int = Field(ge=0, le=100)
    matched_keywords: list[KeywordMatch] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    suggestions: list[Suggestion] = Field(default_factory=list)
    contextual_insights: ContextualInsights | None = None
    resume_text: str = ""


class AnalyzeTextRequest(CamelModel):
    resume_text: str = Field(min_length=1, max_length=100000)
    job_description: str = Field(min_length=1, max_length=JOB_DESCRIPTION_MAX_CHARS)

    @field_validator("job_description")
    @classmethod
    def _job_description_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Job description is required")
        return value


class SuggestionPreferences(CamelModel):
    focus: Category | None = None
    impact: Impact | None = None


class RegenerateSuggestionsRequest(AnalyzeTextRequest):
    preferences: SuggestionPreferences | None = None


class RegenerateSuggestionsResponse(CamelModel):
    suggestions: list[Suggestion]
    contextual_insights: ContextualInsights | None = None


class ApplySuggestionRequest(CamelModel):
    resume_text: str = Field(min_length=1, max_length=100000)
    suggestion: Suggestion
    applied_suggestion_ids: list[str] = Field(default_factory=list, max_length=500)


class ApplySuggestionResponse(CamelModel):
    updated_resume: str
    applied_suggestion: Suggestion
    applied_suggestion_ids: list[str]


class ExportRequest(CamelModel):
    resume_text: str = Field(min_length=1, max_length=100000)
    file_name: str | None = Field(default=None, max_length=200)
