"""Core models and algorithms for coverage matching and gap analysis."""

from .models import (
    SkillCategory,
    Priority,
    SeniorityLevel,
    CoverageStatus,
    RequirementType,
    QuestionType,
    SkillDefinition,
    ExtractedSkill,
    ExtractedRequirement,
    SalaryRange,
    ParsedJobDescription,
    Basics,
    WorkExperience,
    Education,
    Project,
    Skill,
    Certification,
    CareerData,
    CoverageItem,
    CoverageCounts,
    CoverageMap,
    GapQuestion,
    GapQuestionResponse,
    GapAnalysis,
)
from .taxonomy import SkillTaxonomy, DEFAULT_TAXONOMY
from .jd_parser import JobDescriptionParser
from .matcher import CoverageMatcher
from .gap_questions import GapQuestionGenerator
from .gap_responses import GapResponseProcessor, GapResponseResult

__all__ = [
    "SkillCategory",
    "Priority",
    "SeniorityLevel",
    "CoverageStatus",
    "RequirementType",
    "QuestionType",
    "SkillDefinition",
    "ExtractedSkill",
    "ExtractedRequirement",
    "SalaryRange",
    "ParsedJobDescription",
    "Basics",
    "WorkExperience",
    "Education",
    "Project",
    "Skill",
    "Certification",
    "CareerData",
    "CoverageItem",
    "CoverageCounts",
    "CoverageMap",
    "GapQuestion",
    "GapQuestionResponse",
    "GapAnalysis",
    "SkillTaxonomy",
    "DEFAULT_TAXONOMY",
    "JobDescriptionParser",
    "CoverageMatcher",
    "GapQuestionGenerator",
    "GapResponseProcessor",
    "GapResponseResult",
]
