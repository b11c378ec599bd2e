"""Pydantic schemas for JSON replies from the text-generation service.

Replies are validated here, at the boundary, before anything is turned into
domain objects. Enumerations are normalized leniently (an unknown category
becomes "technical"); structural mismatches are rejected.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _ReplyModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", str_strip_whitespace=True)


class SkillEntry(_ReplyModel):
    name: str
    category: str = "technical"

    @field_validator("category", mode="before")
    @classmethod
    def _category_or_default(cls, value):
        return value if isinstance(value, str) and value.strip() else "technical"


class RequirementEntry(_ReplyModel):
    text: str
    type: str = "other"
    years_required: Optional[int] = Field(default=None, ge=0, alias="yearsRequired")
    is_required: bool = Field(default=True, alias="isRequired")

    @field_validator("type", mode="before")
    @classmethod
    def _type_or_other(cls, value):
        return value if isinstance(value, str) and value.strip() else "other"


class JobExtraction(_ReplyModel):
    """Shape requested from the service when parsing a job posting."""
    title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    seniority_level: Optional[str] = Field(default=None, alias="seniorityLevel")
    required_skills: list[SkillEntry] = Field(default_factory=list, alias="requiredSkills")
    preferred_skills: list[SkillEntry] = Field(default_factory=list, alias="preferredSkills")
    responsibilities: list[str] = Field(default_factory=list)
    requirements: list[RequirementEntry] = Field(default_factory=list)
    benefits: list[str] = Field(default_factory=list)

    @field_validator("required_skills", "preferred_skills", mode="before")
    @classmethod
    def _bare_names(cls, value):
        # Models sometimes return ["Python", ...] instead of objects.
        if value is None:
            return []
        if isinstance(value, list):
            return [{"name": v} if isinstance(v, str) else v for v in value]
        return value

    @field_validator("responsibilities", "benefits", "requirements", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return [] if value is None else value


class GapQuestionDraft(_ReplyModel):
    """Shape requested from the service for one contextual gap question."""
    question: str = Field(min_length=1)
    context: str = ""
    suggested_answer_format: Optional[str] = Field(default=None, alias="suggestedAnswerFormat")
