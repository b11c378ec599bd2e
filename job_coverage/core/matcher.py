"""
Coverage Matching Engine - evaluates a candidate's career data against a
parsed job description.

For every required and preferred skill, and every experience requirement
with a year count, it decides FULL / PARTIAL / GAP and cites the evidence.
The overall score weighs required coverage at 70% and preferred at 30%.

The engine performs no I/O. Given the same taxonomy and reference date it
returns identical output for identical input.
"""

from datetime import date
from typing import Optional
import math
import re

from .models import (
    CareerData,
    CoverageCounts,
    CoverageItem,
    CoverageMap,
    CoverageStatus,
    ExtractedRequirement,
    ExtractedSkill,
    ParsedJobDescription,
    Priority,
    RequirementType,
)
from .patterns import find_tech_skills
from .taxonomy import DEFAULT_TAXONOMY, SkillTaxonomy

RELATED_PREFIX = "Related:"

_YEAR_MONTH = re.compile(r"^\s*(\d{4})(?:-(\d{1,2}))?")


def round_half_up(value: float) -> int:
    """Round .5 up for positive values (Python's round() rounds to even)."""
    # Trim float noise first so 52.49999999999999 counts as 52.5
    return int(math.floor(round(value, 9) + 0.5))


def parse_year_month(value: Optional[str]) -> Optional[tuple[int, int]]:
    """Parse 'YYYY-MM' (or 'YYYY', or 'YYYY-MM-DD') into (year, month)."""
    if not value or not isinstance(value, str):
        return None
    match = _YEAR_MONTH.match(value)
    if not match:
        return None
    year = int(match.group(1))
    month = int(match.group(2)) if match.group(2) else 1
    if not 1 <= month <= 12:
        return None
    return year, month


class CoverageMatcher:
    """Builds coverage maps for (career data, job description) pairs."""

    REQUIRED_WEIGHT = 0.7
    PREFERRED_WEIGHT = 0.3
    PARTIAL_CREDIT = 0.5
    # Experience counts as PARTIAL from this share of the required years
    EXPERIENCE_PARTIAL_RATIO = 0.7

    def __init__(
        self,
        taxonomy: SkillTaxonomy = DEFAULT_TAXONOMY,
        today: Optional[date] = None,
    ):
        """
        Initialize the matcher.

        Args:
            taxonomy: Skill taxonomy used for canonicalization
            today: Reference date for ongoing roles (default: the current date)
        """
        self.taxonomy = taxonomy
        self.today = today

    def generate_coverage_map(
        self,
        career_data: CareerData,
        job: ParsedJobDescription,
    ) -> CoverageMap:
        """Compute per-requirement coverage and the overall score."""
        user_skills = {s.lower() for s in self.extract_user_skills(career_data)}
        user_years = self.calculate_years_experience(career_data)

        items: list[CoverageItem] = []

        for skill in list(job.required_skills) + list(job.preferred_skills):
            items.append(self._skill_item(skill, career_data, user_skills))

        for requirement in job.requirements:
            if (
                requirement.type == RequirementType.EXPERIENCE
                and requirement.years_required is not None
            ):
                items.append(self._experience_item(requirement, user_years))

        required_coverage = self._count([i for i in items if i.priority == Priority.P1])
        preferred_coverage = self._count([i for i in items if i.priority != Priority.P1])

        return CoverageMap(
            items=items,
            overall_score=self._overall_score(required_coverage, preferred_coverage),
            required_coverage=required_coverage,
            preferred_coverage=preferred_coverage,
        )

    def extract_user_skills(self, career_data: CareerData) -> set[str]:
        """Canonical names of every skill the candidate shows anywhere."""
        normalize = self.taxonomy.normalize_skill_name
        skills = set()

        for skill in career_data.skills:
            skills.add(normalize(skill.name))

        for work in career_data.work:
            skills.update(normalize(s) for s in work.skills_used)
            skills.update(normalize(t) for t in work.tools_used)
            for highlight in work.highlights:
                skills.update(normalize(s) for s in find_tech_skills(highlight))

        for project in career_data.projects:
            skills.update(normalize(t) for t in project.technologies)
            skills.update(normalize(k) for k in project.keywords)

        skills.discard("")
        return skills

    def calculate_years_experience(self, career_data: CareerData) -> int:
        """
        Total years of work experience, rounded.

        Overlapping roles add up. Entries with an unparsable start or end
        date contribute nothing.
        """
        today = self.today or date.today()
        total_months = 0

        for work in career_data.work:
            start = parse_year_month(work.start_date)
            if start is None:
                continue

            if work.end_date:
                end = parse_year_month(work.end_date)
                if end is None:
                    continue
            else:
                end = (today.year, today.month)

            months = (end[0] * 12 + end[1]) - (start[0] * 12 + start[1])
            total_months += max(0, months)

        return round_half_up(total_months / 12)

    def find_evidence(self, skill_name: str, career_data: CareerData) -> list[str]:
        """
        Human-readable provenance for a skill.

        Work entries come first (direct, or "Related:" when only a related
        skill shows up in that entry), then projects, certifications and the
        skills list.
        """
        normalize = self.taxonomy.normalize_skill_name
        canonical = normalize(skill_name).lower()
        if not canonical:
            return []

        related = {
            normalize(r).lower()
            for r in self.taxonomy.get_related_skills(skill_name)
        }
        related.discard("")

        evidence = []

        for work in career_data.work:
            highlights = [h.lower() for h in work.highlights]
            used = [normalize(s).lower() for s in work.skills_used]
            tools = [normalize(t).lower() for t in work.tools_used]

            has_skill = (
                canonical in used
                or canonical in tools
                or any(canonical in h for h in highlights)
            )

            if has_skill:
                evidence.append(f"{work.position} at {work.company}")
                continue

            has_related = bool(related) and (
                any(s in related for s in used)
                or any(r in h for h in highlights for r in related)
            )
            if has_related:
                evidence.append(f"{RELATED_PREFIX} {work.position} at {work.company}")

        for project in career_data.projects:
            has_skill = (
                any(normalize(t).lower() == canonical for t in project.technologies)
                or any(normalize(k).lower() == canonical for k in project.keywords)
                or canonical in project.description.lower()
            )
            if has_skill:
                evidence.append(f"Project: {project.name}")

        for certification in career_data.certifications:
            if (
                canonical in certification.name.lower()
                or any(normalize(s).lower() == canonical for s in certification.skills_validated)
            ):
                evidence.append(f"Certification: {certification.name}")

        for skill in career_data.skills:
            if normalize(skill.name).lower() == canonical:
                evidence.append(f"Skill: {skill.name}")

        return evidence

    def _skill_item(
        self,
        skill: ExtractedSkill,
        career_data: CareerData,
        user_skills: set[str],
    ) -> CoverageItem:
        evidence = self.find_evidence(skill.name, career_data)
        has_related = any(
            self.taxonomy.normalize_skill_name(r).lower() in user_skills
            for r in self.taxonomy.get_related_skills(skill.name)
        )

        if any(not e.startswith(RELATED_PREFIX) for e in evidence):
            status = CoverageStatus.FULL
        elif evidence or has_related:
            status = CoverageStatus.PARTIAL
        else:
            status = CoverageStatus.GAP

        return CoverageItem(
            requirement=skill.name,
            category="skill",
            priority=skill.priority,
            status=status,
            evidence=evidence,
        )

    def _experience_item(self, requirement: ExtractedRequirement, user_years: int) -> CoverageItem:
        years_required = requirement.years_required

        if user_years >= years_required:
            status = CoverageStatus.FULL
        elif user_years >= years_required * self.EXPERIENCE_PARTIAL_RATIO:
            status = CoverageStatus.PARTIAL
        else:
            status = CoverageStatus.GAP

        return CoverageItem(
            requirement=f"{years_required}+ years experience",
            category="experience",
            priority=Priority.P1 if requirement.is_required else Priority.P2,
            status=status,
            evidence=[f"{user_years} years of professional experience"],
        )

    def _count(self, items: list[CoverageItem]) -> CoverageCounts:
        return CoverageCounts(
            full=sum(1 for i in items if i.status == CoverageStatus.FULL),
            partial=sum(1 for i in items if i.status == CoverageStatus.PARTIAL),
            gap=sum(1 for i in items if i.status == CoverageStatus.GAP),
        )

    def _partition_score(self, counts: CoverageCounts) -> float:
        credit = counts.full + counts.partial * self.PARTIAL_CREDIT
        return credit / max(1, counts.total)

    def _overall_score(self, required: CoverageCounts, preferred: CoverageCounts) -> int:
        """
        Weighted score in 0..100.

        An empty required partition scores 0. When the posting lists no
        preferred items at all, required coverage carries the full weight.
        """
        required_score = self._partition_score(required)

        if preferred.total == 0 and required.total > 0:
            weighted = required_score
        else:
            weighted = (
                required_score * self.REQUIRED_WEIGHT
                + self._partition_score(preferred) * self.PREFERRED_WEIGHT
            )

        return max(0, min(100, round_half_up(weighted * 100)))
