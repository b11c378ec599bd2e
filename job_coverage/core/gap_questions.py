"""
Gap Question Generator - Turns GAP and weak PARTIAL coverage items into
follow-up questions that help the candidate surface unrecorded experience.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Optional
import logging
import uuid

from .matcher import RELATED_PREFIX, CoverageMatcher
from .models import (
    CareerData,
    CoverageItem,
    CoverageMap,
    CoverageStatus,
    GapAnalysis,
    GapQuestion,
    Priority,
    QuestionType,
)
from .taxonomy import slugify
from job_coverage.llm.base import TextGenerator, TextGenerationError
from job_coverage.llm.schemas import GapQuestionDraft
from job_coverage.llm.structured import request_structured


QUESTION_TEMPLATES = {
    QuestionType.EXPERIENCE: [
        "Have you worked with {skill} in any professional capacity, even if it wasn't a primary responsibility?",
        "Did any of your previous roles involve {skill}, perhaps as a secondary tool or technology?",
        "Have you used {skill} to solve problems in your work, even informally?",
    ],
    QuestionType.PROJECT: [
        "Have you built any personal or side projects using {skill}?",
        "Did any academic or bootcamp projects involve {skill}?",
        "Have you contributed to open source projects that use {skill}?",
    ],
    QuestionType.TRAINING: [
        "Have you completed any courses, certifications, or training programs for {skill}?",
        "Are you currently learning {skill}? If so, what's your progress?",
        "Have you attended workshops, bootcamps, or conferences focused on {skill}?",
    ],
    QuestionType.TRANSFERABLE: [
        "You have experience with related technologies. Have you worked directly with {skill}?",
        "Have you worked with technologies similar to {skill}? The skills may transfer.",
        "Have you solved similar problems to those that {skill} addresses, using different tools?",
    ],
}

ANSWER_FORMATS = {
    QuestionType.EXPERIENCE: "Describe when and how you used this skill professionally.",
    QuestionType.PROJECT: "Describe the project, your role, and how you used this skill.",
    QuestionType.TRAINING: "Include course name, provider, and completion date if applicable.",
    QuestionType.TRANSFERABLE: "Describe any direct experience, even brief.",
}

GAP_QUESTION_PROMPT = """You are helping a job seeker identify hidden experience. Given a skill gap and their background, generate ONE targeted question to uncover relevant experience they may have overlooked.

Rules:
- Be specific and context-aware
- Reference their existing experience when possible
- Focus on practical experience, not theoretical knowledge
- Don't assume they lack the skill - help them recall relevant experience
- Keep questions concise and direct

Return ONLY valid JSON:
{
  "question": "Your question here",
  "context": "Brief explanation of why this question matters",
  "suggestedAnswerFormat": "What kind of answer would be helpful"
}

Skill Gap: {skill}
Priority: {priority}
User's Background Summary:
- Current/Recent Role: {current_role}
- Years of Experience: {years}
- Known Skills: {skills}
- Recent Projects: {projects}
"""

# Id kinds beyond the question types
LLM_KIND = "llm"
FALLBACK_KIND = "fallback"


def make_question_id(skill_name: str, kind: str) -> str:
    """Build a question id of the form gap-{slug}-{kind}-{token}."""
    return f"gap-{slugify(skill_name)}-{kind}-{uuid.uuid4().hex[:12]}"


def _fill(template: str, **values) -> str:
    # str.format would trip over the JSON braces in the prompt
    for key, value in values.items():
        template = template.replace("{" + key + "}", str(value))
    return template


class GapQuestionGenerator:
    """Generates gap questions from a coverage map."""

    MAX_LLM_QUESTIONS = 5
    MAX_CONTEXT_SKILLS = 10
    MAX_CONTEXT_PROJECTS = 3

    def __init__(
        self,
        text_generator: Optional[TextGenerator] = None,
        matcher: Optional[CoverageMatcher] = None,
        max_llm_questions: int = MAX_LLM_QUESTIONS,
        parallel: bool = False,
        max_attempts: int = 2,
        temperature: float = 0.7,
    ):
        """
        Initialize the generator.

        Args:
            text_generator: External service for contextual questions, or None
            matcher: Used to compute total years for the question context
            max_llm_questions: Cap on service calls per analysis
            parallel: Issue the capped service calls through a thread pool
            max_attempts: Requests allowed per question when replies are invalid
            temperature: Sampling temperature for contextual questions
        """
        self.text_generator = text_generator
        self.matcher = matcher or CoverageMatcher()
        self.max_llm_questions = max_llm_questions
        self.parallel = parallel
        self.max_attempts = max_attempts
        self.temperature = temperature
        self.logger = logging.getLogger(self.__class__.__name__)

    def generate(
        self,
        coverage_map: CoverageMap,
        career_data: CareerData,
        use_llm: bool = True,
    ) -> GapAnalysis:
        """
        Build the gap analysis for a coverage map. Never raises for
        external-service problems.

        Args:
            coverage_map: Freshly computed coverage map
            career_data: The candidate's career data
            use_llm: Whether to ask the service for contextual questions

        Returns:
            GapAnalysis with questions sorted by priority
        """
        if not use_llm or self.text_generator is None:
            return self.generate_rule_based(coverage_map)

        try:
            return self.generate_with_llm(coverage_map, career_data)
        except Exception as e:
            self.logger.error(f"Assisted gap question generation failed: {e}, using rule-based")
            analysis = self.generate_rule_based(coverage_map)
            analysis.warnings.append(
                "Contextual questions were unavailable; showing standard questions instead."
            )
            return analysis

    def generate_rule_based(self, coverage_map: CoverageMap) -> GapAnalysis:
        """Template questions for every GAP and related-evidence PARTIAL item."""
        questions = []

        for item in self._gaps(coverage_map):
            questions.append(self._template_question(item, QuestionType.EXPERIENCE))

            if item.category == "skill":
                questions.append(self._template_question(item, QuestionType.PROJECT))

            if item.priority == Priority.P1:
                questions.append(self._template_question(item, QuestionType.TRAINING))

        for item in self._related_partials(coverage_map):
            questions.append(self._template_question(item, QuestionType.TRANSFERABLE))

        return self._analysis(questions, coverage_map)

    def generate_with_llm(self, coverage_map: CoverageMap, career_data: CareerData) -> GapAnalysis:
        """
        Contextual questions for the first critical gaps, template questions
        for everything else.

        A failed request only affects its own skill, which gets a template
        question instead.
        """
        critical = [g for g in self._gaps(coverage_map) if g.priority == Priority.P1]
        critical = critical[:self.max_llm_questions]
        background = self._background(career_data)
        warnings: list[str] = []

        if self.parallel and len(critical) > 1:
            questions = self._ask_parallel(critical, background, warnings)
        else:
            questions = [self._ask(item, background, warnings) for item in critical]

        covered = {item.requirement for item in critical}
        rule_based = self.generate_rule_based(coverage_map)
        questions.extend(
            q for q in rule_based.questions
            if q.priority != Priority.P1 or q.skill_name not in covered
        )

        return self._analysis(questions, coverage_map, warnings)

    def _ask_parallel(
        self,
        items: list[CoverageItem],
        background: dict,
        warnings: list[str],
    ) -> list[GapQuestion]:
        """Ask for several questions at once; results keep the input order."""
        with ThreadPoolExecutor(max_workers=len(items)) as executor:
            futures = [
                executor.submit(self._ask, item, background, warnings)
                for item in items
            ]
            return [future.result() for future in futures]

    def _ask(self, item: CoverageItem, background: dict, warnings: list[str]) -> GapQuestion:
        """One contextual question, or the template question if the service fails."""
        prompt = _fill(
            GAP_QUESTION_PROMPT,
            skill=item.requirement,
            priority=item.priority.value,
            **background,
        )

        try:
            draft = request_structured(
                self.text_generator,
                prompt,
                GapQuestionDraft,
                temperature=self.temperature,
                max_attempts=self.max_attempts,
            )
        except TextGenerationError as e:
            self.logger.warning(f"Failed to generate question for {item.requirement}: {e}")
            warnings.append(f"Used a standard question for {item.requirement}.")
            return self._fallback_question(item)
        except Exception as e:
            self.logger.error(f"Unexpected error generating question for {item.requirement}: {e}")
            warnings.append(f"Used a standard question for {item.requirement}.")
            return self._fallback_question(item)

        return GapQuestion(
            id=make_question_id(item.requirement, LLM_KIND),
            skill_name=item.requirement,
            question=draft.question,
            context=draft.context,
            question_type=QuestionType.EXPERIENCE,
            priority=item.priority,
            suggested_answer_format=draft.suggested_answer_format,
        )

    def _fallback_question(self, item: CoverageItem) -> GapQuestion:
        return GapQuestion(
            id=make_question_id(item.requirement, FALLBACK_KIND),
            skill_name=item.requirement,
            question=_fill(QUESTION_TEMPLATES[QuestionType.EXPERIENCE][0], skill=item.requirement),
            context="This required skill has no matching evidence in your profile.",
            question_type=QuestionType.EXPERIENCE,
            priority=item.priority,
            suggested_answer_format=ANSWER_FORMATS[QuestionType.EXPERIENCE],
        )

    def _template_question(self, item: CoverageItem, question_type: QuestionType) -> GapQuestion:
        if question_type == QuestionType.EXPERIENCE:
            kind = "required" if item.priority == Priority.P1 else "preferred"
            context = f"This {kind} skill has no matching evidence in your profile."
        elif question_type == QuestionType.PROJECT:
            context = "Personal or academic projects can demonstrate practical knowledge."
        elif question_type == QuestionType.TRAINING:
            context = "Formal training or certifications can help address this critical skill gap."
        else:
            context = f"We found related experience: {', '.join(item.evidence)}"

        return GapQuestion(
            id=make_question_id(item.requirement, question_type.value),
            skill_name=item.requirement,
            question=_fill(QUESTION_TEMPLATES[question_type][0], skill=item.requirement),
            context=context,
            question_type=question_type,
            priority=item.priority,
            suggested_answer_format=ANSWER_FORMATS[question_type],
        )

    def _background(self, career_data: CareerData) -> dict:
        """Candidate summary supplied with every contextual question request."""
        if career_data.work:
            recent = career_data.work[0]
            current_role = f"{recent.position} at {recent.company}"
        else:
            current_role = "Not specified"

        skills = [s.name for s in career_data.skills[:self.MAX_CONTEXT_SKILLS]]
        projects = [p.name for p in career_data.projects[:self.MAX_CONTEXT_PROJECTS]]

        return {
            "current_role": current_role,
            "years": self.matcher.calculate_years_experience(career_data),
            "skills": ", ".join(skills) or "Not specified",
            "projects": ", ".join(projects) or "None listed",
        }

    @staticmethod
    def _gaps(coverage_map: CoverageMap) -> list[CoverageItem]:
        return [i for i in coverage_map.items if i.status == CoverageStatus.GAP]

    @staticmethod
    def _related_partials(coverage_map: CoverageMap) -> list[CoverageItem]:
        return [
            i for i in coverage_map.items
            if i.status == CoverageStatus.PARTIAL
            and any(e.startswith(RELATED_PREFIX) for e in i.evidence)
        ]

    def _analysis(
        self,
        questions: list[GapQuestion],
        coverage_map: CoverageMap,
        warnings: Optional[list[str]] = None,
    ) -> GapAnalysis:
        gaps = self._gaps(coverage_map)
        # sorted() is stable, so discovery order holds within a priority
        questions = sorted(questions, key=lambda q: q.priority.order)

        return GapAnalysis(
            questions=questions,
            total_gaps=len(gaps),
            critical_gaps=sum(1 for g in gaps if g.priority == Priority.P1),
            addressable_gaps=len(gaps) + len(self._related_partials(coverage_map)),
            warnings=list(warnings or []),
        )
