"""
Gap Response Processor - folds the candidate's answers to gap questions
back into their career data.
"""

from dataclasses import dataclass, field
from typing import Optional
import copy
import logging
import re

from .models import CareerData, GapQuestionResponse, Skill
from .taxonomy import DEFAULT_TAXONOMY, SkillTaxonomy


QUESTION_ID_PATTERN = re.compile(
    r"^gap-(?P<slug>[a-z0-9-]+?)-"
    r"(?P<kind>experience|project|training|transferable|llm|fallback)-"
    r"(?P<token>[0-9a-z]+)$"
)


@dataclass
class GapResponseResult:
    """Updated career data plus the skills that were added."""
    career_data: CareerData
    skills_added: list[str] = field(default_factory=list)
    skipped: int = 0


class GapResponseProcessor:
    """Applies gap question responses to CareerData."""

    ADVANCED_YEARS = 3

    def __init__(self, taxonomy: SkillTaxonomy = DEFAULT_TAXONOMY):
        self.taxonomy = taxonomy
        self.logger = logging.getLogger(self.__class__.__name__)

    def apply(
        self,
        responses: list[GapQuestionResponse],
        career_data: CareerData,
    ) -> GapResponseResult:
        """
        Add a skill entry for every affirmative answer.

        The input CareerData is not modified. Existing skills are never
        overwritten, so applying the same responses twice adds nothing the
        second time. Responses whose skill cannot be determined are skipped.

        Args:
            responses: The candidate's answers
            career_data: Current career data

        Returns:
            GapResponseResult with an updated deep copy of the career data
        """
        updated = copy.deepcopy(career_data)
        existing = {s.name.strip().lower() for s in updated.skills}
        existing.update(
            self.taxonomy.normalize_skill_name(s.name).lower() for s in updated.skills
        )
        result = GapResponseResult(career_data=updated)

        for response in responses:
            if not response.has_experience or not response.answer.strip():
                continue

            skill_name = self.resolve_skill_name(response)
            if not skill_name:
                self.logger.debug(f"Skipping response with unrecognized id: {response.question_id}")
                result.skipped += 1
                continue

            if skill_name.lower() in existing:
                continue

            years = response.years_of_experience
            updated.skills.append(
                Skill(
                    name=skill_name,
                    level="advanced" if years is not None and years >= self.ADVANCED_YEARS else "intermediate",
                    keywords=[],
                )
            )
            existing.add(skill_name.lower())
            result.skills_added.append(skill_name)

        if result.skills_added:
            self.logger.info(f"Added {len(result.skills_added)} skills from gap responses")

        return result

    def resolve_skill_name(self, response: GapQuestionResponse) -> Optional[str]:
        """
        Canonical skill name for a response: the explicit skill_name if
        given, otherwise the slug embedded in the question id.
        """
        if response.skill_name and response.skill_name.strip():
            return self.taxonomy.normalize_skill_name(response.skill_name)

        match = QUESTION_ID_PATTERN.match(response.question_id or "")
        if not match:
            return None

        slug = match.group("slug")
        definition = self.taxonomy.find_by_slug(slug)
        if definition:
            return definition.name

        words = re.sub(r"-+", " ", slug).strip()
        if not words:
            return None
        return self.taxonomy.normalize_skill_name(words)
