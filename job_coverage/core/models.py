"""
Core data models for coverage matching and gap analysis.

Career data follows the JSON Resume schema (camelCase on the wire), extended
with skillsUsed/toolsUsed on work entries and technologies on projects.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class SkillCategory(Enum):
    """Taxonomy category of a skill."""
    TECHNICAL = "technical"
    SOFT = "soft"
    TOOL = "tool"
    DOMAIN = "domain"
    CERTIFICATION = "certification"

    @classmethod
    def parse(cls, value, default: "SkillCategory" = None) -> "SkillCategory":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return default or cls.TECHNICAL


class Priority(Enum):
    """Requirement priority. P1 is a must-have."""
    P1 = "P1"
    P2 = "P2"
    P3 = "P3"
    P4 = "P4"

    @property
    def order(self) -> int:
        return int(self.value[1])

    @classmethod
    def parse(cls, value, default: "Priority" = None) -> "Priority":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return default or cls.P2


class SeniorityLevel(Enum):
    """Seniority of the advertised role."""
    ENTRY = "entry"
    MID = "mid"
    SENIOR = "senior"
    LEAD = "lead"
    EXECUTIVE = "executive"

    @classmethod
    def parse(cls, value) -> Optional["SeniorityLevel"]:
        if value is None or isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


class CoverageStatus(Enum):
    """How well one requirement is covered by the candidate."""
    FULL = "FULL"
    PARTIAL = "PARTIAL"
    GAP = "GAP"


class RequirementType(Enum):
    """Kind of free-text requirement."""
    EXPERIENCE = "experience"
    EDUCATION = "education"
    CERTIFICATION = "certification"
    OTHER = "other"

    @classmethod
    def parse(cls, value) -> "RequirementType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.OTHER


class QuestionType(Enum):
    """What a gap question is probing for."""
    EXPERIENCE = "experience"
    PROJECT = "project"
    TRAINING = "training"
    TRANSFERABLE = "transferable"


def _get(data: dict, camel: str, snake: str = None, default=None):
    """Read a key in either camelCase or snake_case."""
    if camel in data and data[camel] is not None:
        return data[camel]
    if snake and snake in data and data[snake] is not None:
        return data[snake]
    return default


def _str(value) -> str:
    """Strings pass through; anything else counts as absent."""
    return value if isinstance(value, str) else ""


def _opt_str(value) -> Optional[str]:
    return value if isinstance(value, str) else None


def _opt_float(value) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _str_list(value) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if v is not None and str(v).strip()]


# ---------------------------------------------------------------------------
# Taxonomy and job description
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SkillDefinition:
    """Canonical taxonomy entry for a skill."""
    name: str
    category: SkillCategory
    aliases: tuple[str, ...] = ()
    related_skills: tuple[str, ...] = ()


@dataclass(frozen=True)
class ExtractedSkill:
    """A skill pulled out of a job posting."""
    name: str
    priority: Priority = Priority.P2
    category: SkillCategory = SkillCategory.TECHNICAL
    context: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "name": self.name,
            "priority": self.priority.value,
            "category": self.category.value,
        }
        if self.context:
            data["context"] = self.context
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ExtractedSkill":
        return cls(
            name=str(data.get("name", "")).strip(),
            priority=Priority.parse(data.get("priority")),
            category=SkillCategory.parse(data.get("category")),
            context=data.get("context") or None,
        )


@dataclass(frozen=True)
class ExtractedRequirement:
    """A requirement sentence from a job posting."""
    text: str
    type: RequirementType = RequirementType.OTHER
    years_required: Optional[int] = None
    is_required: bool = True

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "type": self.type.value,
            "yearsRequired": self.years_required,
            "isRequired": self.is_required,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ExtractedRequirement":
        years = _get(data, "yearsRequired", "years_required")
        try:
            years = max(0, int(years)) if years is not None else None
        except (TypeError, ValueError):
            years = None
        return cls(
            text=str(data.get("text", "")),
            type=RequirementType.parse(data.get("type")),
            years_required=years,
            is_required=bool(_get(data, "isRequired", "is_required", True)),
        )


@dataclass
class SalaryRange:
    """Advertised compensation range."""
    min: Optional[int] = None
    max: Optional[int] = None
    currency: Optional[str] = None

    def to_dict(self) -> dict:
        return {"min": self.min, "max": self.max, "currency": self.currency}

    @classmethod
    def from_dict(cls, data: dict) -> "SalaryRange":
        return cls(min=data.get("min"), max=data.get("max"), currency=data.get("currency"))


@dataclass
class ParsedJobDescription:
    """Structured requirement set extracted from a job posting."""
    title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    seniority_level: Optional[SeniorityLevel] = None
    required_skills: list[ExtractedSkill] = field(default_factory=list)
    preferred_skills: list[ExtractedSkill] = field(default_factory=list)
    responsibilities: list[str] = field(default_factory=list)
    requirements: list[ExtractedRequirement] = field(default_factory=list)
    benefits: list[str] = field(default_factory=list)
    salary_range: Optional[SalaryRange] = None
    extraction_method: str = "rule_based"  # assisted, rule_based

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "seniorityLevel": self.seniority_level.value if self.seniority_level else None,
            "requiredSkills": [s.to_dict() for s in self.required_skills],
            "preferredSkills": [s.to_dict() for s in self.preferred_skills],
            "responsibilities": list(self.responsibilities),
            "requirements": [r.to_dict() for r in self.requirements],
            "benefits": list(self.benefits),
            "salaryRange": self.salary_range.to_dict() if self.salary_range else None,
            "extractionMethod": self.extraction_method,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ParsedJobDescription":
        salary = _get(data, "salaryRange", "salary_range")
        return cls(
            title=data.get("title") or None,
            company=data.get("company") or None,
            location=data.get("location") or None,
            seniority_level=SeniorityLevel.parse(_get(data, "seniorityLevel", "seniority_level")),
            required_skills=[
                ExtractedSkill.from_dict(s)
                for s in _get(data, "requiredSkills", "required_skills", [])
                if isinstance(s, dict)
            ],
            preferred_skills=[
                ExtractedSkill.from_dict(s)
                for s in _get(data, "preferredSkills", "preferred_skills", [])
                if isinstance(s, dict)
            ],
            responsibilities=_str_list(data.get("responsibilities")),
            requirements=[
                ExtractedRequirement.from_dict(r)
                for r in data.get("requirements") or []
                if isinstance(r, dict)
            ],
            benefits=_str_list(data.get("benefits")),
            salary_range=SalaryRange.from_dict(salary) if isinstance(salary, dict) else None,
            extraction_method=_get(data, "extractionMethod", "extraction_method", "rule_based"),
        )


# ---------------------------------------------------------------------------
# Career data (JSON Resume)
# ---------------------------------------------------------------------------

@dataclass
class Basics:
    """Name, contact details and summary."""
    name: str = ""
    label: str = ""
    email: str = ""
    phone: str = ""
    url: str = ""
    summary: str = ""
    location: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "label": self.label,
            "email": self.email,
            "phone": self.phone,
            "url": self.url,
            "summary": self.summary,
            "location": dict(self.location),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Basics":
        location = data.get("location")
        return cls(
            name=_str(data.get("name")),
            label=_str(data.get("label")),
            email=_str(data.get("email")),
            phone=_str(data.get("phone")),
            url=_str(data.get("url")),
            summary=_str(data.get("summary")),
            location=location if isinstance(location, dict) else {},
        )


@dataclass
class WorkExperience:
    """A work experience entry."""
    company: str = ""
    position: str = ""
    start_date: Optional[str] = None  # YYYY-MM
    end_date: Optional[str] = None  # absent means ongoing
    summary: str = ""
    highlights: list[str] = field(default_factory=list)
    skills_used: list[str] = field(default_factory=list)
    tools_used: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "company": self.company,
            "position": self.position,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "summary": self.summary,
            "highlights": list(self.highlights),
            "skillsUsed": list(self.skills_used),
            "toolsUsed": list(self.tools_used),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkExperience":
        return cls(
            company=_str(data.get("company")),
            position=_str(data.get("position")),
            start_date=_opt_str(_get(data, "startDate", "start_date")),
            end_date=_opt_str(_get(data, "endDate", "end_date")),
            summary=_str(data.get("summary")),
            highlights=_str_list(data.get("highlights")),
            skills_used=_str_list(_get(data, "skillsUsed", "skills_used")),
            tools_used=_str_list(_get(data, "toolsUsed", "tools_used")),
        )


@dataclass
class Education:
    """An educational credential."""
    institution: str = ""
    area: str = ""
    study_type: str = ""
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    score: str = ""
    courses: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "institution": self.institution,
            "area": self.area,
            "studyType": self.study_type,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "score": self.score,
            "courses": list(self.courses),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Education":
        return cls(
            institution=_str(data.get("institution")),
            area=_str(data.get("area")),
            study_type=_str(_get(data, "studyType", "study_type")),
            start_date=_opt_str(_get(data, "startDate", "start_date")),
            end_date=_opt_str(_get(data, "endDate", "end_date")),
            score=str(data.get("score") or ""),
            courses=_str_list(data.get("courses")),
        )


@dataclass
class Project:
    """A personal, freelance, open source or academic project."""
    name: str = ""
    description: str = ""
    url: str = ""
    highlights: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    technologies: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "url": self.url,
            "highlights": list(self.highlights),
            "keywords": list(self.keywords),
            "technologies": list(self.technologies),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Project":
        return cls(
            name=_str(data.get("name")),
            description=_str(data.get("description")),
            url=_str(data.get("url")),
            highlights=_str_list(data.get("highlights")),
            keywords=_str_list(data.get("keywords")),
            technologies=_str_list(data.get("technologies")),
        )


@dataclass
class Skill:
    """A skill the candidate lists directly."""
    name: str
    level: str = ""
    category: Optional[str] = None
    keywords: list[str] = field(default_factory=list)
    years_experience: Optional[float] = None

    def to_dict(self) -> dict:
        data = {
            "name": self.name,
            "level": self.level,
            "keywords": list(self.keywords),
        }
        if self.category:
            data["category"] = self.category
        if self.years_experience is not None:
            data["yearsExperience"] = self.years_experience
        return data

    @classmethod
    def from_dict(cls, data) -> "Skill":
        if isinstance(data, str):
            return cls(name=data)
        return cls(
            name=_str(data.get("name")),
            level=_str(data.get("level")),
            category=_opt_str(data.get("category")),
            keywords=_str_list(data.get("keywords")),
            years_experience=_opt_float(_get(data, "yearsExperience", "years_experience")),
        )


@dataclass
class Certification:
    """A professional certification."""
    name: str
    issuer: str = ""
    date: Optional[str] = None
    skills_validated: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "issuer": self.issuer,
            "date": self.date,
            "skillsValidated": list(self.skills_validated),
        }

    @classmethod
    def from_dict(cls, data) -> "Certification":
        if isinstance(data, str):
            return cls(name=data)
        return cls(
            name=_str(data.get("name")),
            issuer=_str(data.get("issuer")),
            date=_opt_str(data.get("date")),
            skills_validated=_str_list(_get(data, "skillsValidated", "skills_validated")),
        )


@dataclass
class CareerData:
    """The candidate's full career profile."""
    basics: Basics = field(default_factory=Basics)
    work: list[WorkExperience] = field(default_factory=list)
    education: list[Education] = field(default_factory=list)
    projects: list[Project] = field(default_factory=list)
    skills: list[Skill] = field(default_factory=list)
    certifications: list[Certification] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "basics": self.basics.to_dict(),
            "work": [w.to_dict() for w in self.work],
            "education": [e.to_dict() for e in self.education],
            "projects": [p.to_dict() for p in self.projects],
            "skills": [s.to_dict() for s in self.skills],
            "certifications": [c.to_dict() for c in self.certifications],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CareerData":
        def entries(key):
            value = data.get(key)
            return value if isinstance(value, list) else []

        basics = data.get("basics")
        return cls(
            basics=Basics.from_dict(basics) if isinstance(basics, dict) else Basics(),
            work=[WorkExperience.from_dict(w) for w in entries("work") if isinstance(w, dict)],
            education=[Education.from_dict(e) for e in entries("education") if isinstance(e, dict)],
            projects=[Project.from_dict(p) for p in entries("projects") if isinstance(p, dict)],
            # Entries without a usable name are dropped
            skills=[
                s for s in (Skill.from_dict(x) for x in entries("skills") if isinstance(x, (dict, str)))
                if s.name.strip()
            ],
            certifications=[
                c for c in (
                    Certification.from_dict(x) for x in entries("certifications") if isinstance(x, (dict, str))
                )
                if c.name.strip()
            ],
        )


# ---------------------------------------------------------------------------
# Coverage and gap analysis
# ---------------------------------------------------------------------------

@dataclass
class CoverageItem:
    """Evaluation of one job requirement."""
    requirement: str
    category: str  # skill, experience, education, other
    priority: Priority
    status: CoverageStatus
    evidence: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "requirement": self.requirement,
            "category": self.category,
            "priority": self.priority.value,
            "status": self.status.value,
            "evidence": list(self.evidence),
        }


@dataclass
class CoverageCounts:
    """FULL / PARTIAL / GAP counts for one partition."""
    full: int = 0
    partial: int = 0
    gap: int = 0

    @property
    def total(self) -> int:
        return self.full + self.partial + self.gap

    def to_dict(self) -> dict:
        return {"full": self.full, "partial": self.partial, "gap": self.gap}


@dataclass
class CoverageMap:
    """Per-requirement coverage plus the aggregate score."""
    items: list[CoverageItem] = field(default_factory=list)
    overall_score: int = 0  # 0-100
    required_coverage: CoverageCounts = field(default_factory=CoverageCounts)
    preferred_coverage: CoverageCounts = field(default_factory=CoverageCounts)

    def to_dict(self) -> dict:
        return {
            "items": [i.to_dict() for i in self.items],
            "overallScore": self.overall_score,
            "requiredCoverage": self.required_coverage.to_dict(),
            "preferredCoverage": self.preferred_coverage.to_dict(),
        }


@dataclass
class GapQuestion:
    """A follow-up question aimed at unrecorded evidence."""
    id: str
    skill_name: str
    question: str
    context: str
    question_type: QuestionType
    priority: Priority
    suggested_answer_format: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "skillName": self.skill_name,
            "question": self.question,
            "context": self.context,
            "questionType": self.question_type.value,
            "suggestedAnswerFormat": self.suggested_answer_format,
            "priority": self.priority.value,
        }


@dataclass
class GapQuestionResponse:
    """The user's answer to one gap question."""
    question_id: str
    answer: str
    has_experience: bool
    years_of_experience: Optional[float] = None
    context: Optional[str] = None
    skill_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "GapQuestionResponse":
        years = _get(data, "yearsOfExperience", "years_of_experience")
        try:
            years = float(years) if years is not None else None
        except (TypeError, ValueError):
            years = None
        return cls(
            question_id=str(_get(data, "questionId", "question_id", "")),
            answer=str(data.get("answer") or ""),
            has_experience=_get(data, "hasExperience", "has_experience", False) is True,
            years_of_experience=years,
            context=data.get("context"),
            skill_name=_get(data, "skillName", "skill_name"),
        )


@dataclass
class GapAnalysis:
    """Ranked gap questions and gap counts."""
    questions: list[GapQuestion] = field(default_factory=list)
    total_gaps: int = 0
    critical_gaps: int = 0
    addressable_gaps: int = 0
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "questions": [q.to_dict() for q in self.questions],
            "totalGaps": self.total_gaps,
            "criticalGaps": self.critical_gaps,
            "addressableGaps": self.addressable_gaps,
            "warnings": list(self.warnings),
        }
