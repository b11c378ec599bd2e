"""
Job Description Parser - Turns raw job-posting text into a structured
requirement set.

Two strategies, chosen by the caller:
- assisted: the external text-generation service extracts a fixed JSON shape
- rule-based: deterministic regex extraction, also used as the fallback
  whenever the assisted path fails
"""

from typing import Optional
import logging
import re

from bs4 import BeautifulSoup

from .models import (
    ExtractedRequirement,
    ExtractedSkill,
    ParsedJobDescription,
    Priority,
    RequirementType,
    SalaryRange,
    SeniorityLevel,
    SkillCategory,
)
from .patterns import (
    BULLET_LINE,
    BULLET_MARKER,
    PREFERRED_PATTERNS,
    REQUIRED_PATTERNS,
    SENIORITY_PATTERNS,
    find_tech_skills,
    skill_mention_pattern,
)
from .taxonomy import DEFAULT_TAXONOMY, SkillTaxonomy
from job_coverage.llm.base import TextGenerator, TextGenerationError
from job_coverage.llm.schemas import JobExtraction
from job_coverage.llm.structured import request_structured


JD_PARSE_PROMPT = """You are a job description parser. Extract structured information from the following job description.

Return ONLY valid JSON with this exact structure (no markdown, no explanation):
{
  "title": "job title or null",
  "company": "company name or null",
  "location": "location or null",
  "seniorityLevel": "entry|mid|senior|lead|executive or null",
  "requiredSkills": [{"name": "skill name", "category": "technical|soft|tool|domain|certification"}],
  "preferredSkills": [{"name": "skill name", "category": "technical|soft|tool|domain|certification"}],
  "responsibilities": ["responsibility 1", "responsibility 2"],
  "requirements": [{"text": "requirement text", "type": "experience|education|certification|other", "yearsRequired": number or null, "isRequired": true|false}],
  "benefits": ["benefit 1", "benefit 2"]
}

Rules:
- requiredSkills: Skills marked as "must have", "required", "mandatory", or in Requirements section
- preferredSkills: Skills marked as "nice to have", "preferred", "bonus", or single mentions
- For technical skills: programming languages, frameworks, databases, cloud platforms, tools
- For soft skills: communication, leadership, teamwork, problem-solving
- Extract years of experience requirements when mentioned
- Determine seniority from title keywords (Junior, Senior, Lead, etc.) or years required

Job Description:
"""

_HTML_TAG = re.compile(r"<\s*(?:p|br|div|li|ul|ol|h[1-6]|span|strong|b|em|table)\b[^>]*>", re.IGNORECASE)
_ESCAPED_HTML_TAG = re.compile(r"&lt;\s*/?\s*[a-z][a-z0-9]*\b.*?&gt;", re.IGNORECASE)
_BLOCK_TAGS = ["p", "div", "ul", "ol", "tr", "h1", "h2", "h3", "h4", "h5", "h6"]

_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")
_CLAUSE_SPLIT = re.compile(r"[,;:]\s*|\s+[-–]\s+")

_SALARY = re.compile(
    r"([$€£])\s?(\d[\d,]*(?:\.\d+)?)\s?([kK])?"
    r"(?:\s*(?:-|–|to)\s*[$€£]?\s?(\d[\d,]*(?:\.\d+)?)\s?([kK])?)?"
)
_CURRENCIES = {"$": "USD", "€": "EUR", "£": "GBP"}


class JobDescriptionParser:
    """Parses job postings into ParsedJobDescription objects."""

    MAX_RESPONSIBILITIES = 10
    # Preferred skills beyond this many (in service order) drop from P2 to P3
    PREFERRED_P2_LIMIT = 3

    def __init__(
        self,
        text_generator: Optional[TextGenerator] = None,
        taxonomy: SkillTaxonomy = DEFAULT_TAXONOMY,
        max_attempts: int = 2,
        temperature: float = 0.3,
    ):
        """
        Initialize the parser.

        Args:
            text_generator: External service for the assisted path, or None
            taxonomy: Skill taxonomy used to categorize rule-based finds
            max_attempts: Requests allowed per posting when replies are invalid
            temperature: Sampling temperature for the assisted path
        """
        self.text_generator = text_generator
        self.taxonomy = taxonomy
        self.max_attempts = max_attempts
        self.temperature = temperature
        self.logger = logging.getLogger(self.__class__.__name__)

    def parse(self, raw_description: str, use_llm: bool = True) -> ParsedJobDescription:
        """
        Parse a job posting. Never raises.

        Args:
            raw_description: Posting text (plain text or HTML)
            use_llm: Whether to try the assisted path first

        Returns:
            A well-formed ParsedJobDescription (possibly with empty lists)
        """
        text = self._to_plain_text(raw_description or "")

        if use_llm and self.text_generator is not None:
            return self.parse_with_llm(text)

        return self.parse_rule_based(text)

    # ------------------------------------------------------------------
    # Assisted path
    # ------------------------------------------------------------------

    def parse_with_llm(self, text: str) -> ParsedJobDescription:
        """Extract with the text-generation service, falling back to rules."""
        if self.text_generator is None:
            return self.parse_rule_based(text)

        try:
            extraction = request_structured(
                self.text_generator,
                JD_PARSE_PROMPT + text,
                JobExtraction,
                temperature=self.temperature,
                max_attempts=self.max_attempts,
            )
        except TextGenerationError as e:
            self.logger.warning(f"Assisted parsing failed: {e}, using rule-based parser")
            return self.parse_rule_based(text)
        except Exception as e:
            self.logger.error(f"Unexpected error from text generator: {e}, using rule-based parser")
            return self.parse_rule_based(text)

        return self._from_extraction(extraction)

    def _from_extraction(self, extraction: JobExtraction) -> ParsedJobDescription:
        """Convert a validated service reply into a ParsedJobDescription."""
        required_skills = [
            ExtractedSkill(
                name=entry.name,
                priority=Priority.P1,
                category=SkillCategory.parse(entry.category),
            )
            for entry in extraction.required_skills
            if entry.name
        ]

        preferred_entries = [entry for entry in extraction.preferred_skills if entry.name]
        preferred_skills = [
            ExtractedSkill(
                name=entry.name,
                priority=Priority.P2 if i < self.PREFERRED_P2_LIMIT else Priority.P3,
                category=SkillCategory.parse(entry.category),
            )
            for i, entry in enumerate(preferred_entries)
        ]

        requirements = [
            ExtractedRequirement(
                text=entry.text,
                type=RequirementType.parse(entry.type),
                years_required=entry.years_required,
                is_required=entry.is_required,
            )
            for entry in extraction.requirements
            if entry.text
        ]

        return ParsedJobDescription(
            title=extraction.title or None,
            company=extraction.company or None,
            location=extraction.location or None,
            seniority_level=SeniorityLevel.parse(extraction.seniority_level),
            required_skills=required_skills,
            preferred_skills=preferred_skills,
            responsibilities=[r for r in extraction.responsibilities if r],
            requirements=requirements,
            benefits=[b for b in extraction.benefits if b],
            extraction_method="assisted",
        )

    # ------------------------------------------------------------------
    # Rule-based path
    # ------------------------------------------------------------------

    def parse_rule_based(self, text: str) -> ParsedJobDescription:
        """Deterministic regex extraction."""
        lines = [line.strip() for line in text.split("\n") if line.strip()]

        required_skills = []
        preferred_skills = []

        for skill_name in find_tech_skills(text):
            is_required, context = self._classify_skill(text, skill_name)
            definition = self.taxonomy.find_skill(skill_name)

            skill = ExtractedSkill(
                name=skill_name,
                priority=Priority.P1 if is_required else Priority.P2,
                category=definition.category if definition else SkillCategory.TECHNICAL,
                context=context,
            )

            if is_required:
                required_skills.append(skill)
            else:
                preferred_skills.append(skill)

        responsibilities = [
            BULLET_MARKER.sub("", line)
            for line in lines
            if BULLET_LINE.match(line)
        ][:self.MAX_RESPONSIBILITIES]

        return ParsedJobDescription(
            seniority_level=self._detect_seniority(text),
            required_skills=required_skills,
            preferred_skills=preferred_skills,
            responsibilities=responsibilities,
            requirements=[],
            salary_range=self._extract_salary(text),
            extraction_method="rule_based",
        )

    def _detect_seniority(self, text: str) -> Optional[SeniorityLevel]:
        """First seniority group (entry → executive) with a matching pattern."""
        for level, patterns in SENIORITY_PATTERNS.items():
            if any(p.search(text) for p in patterns):
                return level
        return None

    def _classify_skill(self, text: str, skill_name: str) -> tuple[bool, Optional[str]]:
        """
        Decide whether a skill is required, based on the cue phrases around
        each mention.

        The clause holding the mention is checked first, taking the cue
        nearest to the mention. A clause without cues inherits the last cue
        of an earlier clause in the same sentence. A bullet line without
        cues takes the cue of the section header above it ("Required:",
        "Nice to have:"). Otherwise a sentence counts as required if it
        contains a required phrase anywhere.

        Returns:
            (is_required, context) where context is the deciding clause
        """
        mention = skill_mention_pattern(skill_name)
        first_context = None
        section_cue = None

        for line in text.split("\n"):
            line = line.strip()
            if not line:
                continue

            is_bullet = bool(BULLET_LINE.match(line))
            if line.endswith(":") or (not is_bullet and not find_tech_skills(line)):
                section_cue = self._inherited_cue([line])

            if not mention.search(line):
                continue
            if is_bullet:
                line = BULLET_MARKER.sub("", line)

            for sentence in _SENTENCE_SPLIT.split(line):
                if not sentence or not mention.search(sentence):
                    continue

                clauses = [c.strip() for c in _CLAUSE_SPLIT.split(sentence)]

                for index, clause in enumerate(clauses):
                    for match in mention.finditer(clause):
                        if first_context is None:
                            first_context = clause

                        verdict = self._nearest_cue(clause, match.start(), match.end())
                        if verdict is None:
                            verdict = self._inherited_cue(clauses[:index])
                        if verdict is None and is_bullet:
                            verdict = section_cue
                        if verdict is None:
                            verdict = any(p.search(sentence) for p in REQUIRED_PATTERNS)

                        if verdict:
                            return True, clause

        return False, first_context

    def _nearest_cue(self, clause: str, start: int, end: int) -> Optional[bool]:
        """True/False for the required/preferred cue closest to a mention."""
        best = None
        for is_required, pattern in _cue_patterns():
            for cue in pattern.finditer(clause):
                if cue.end() <= start:
                    distance = start - cue.end()
                elif cue.start() >= end:
                    distance = cue.start() - end
                else:
                    distance = 0
                if best is None or distance < best[0]:
                    best = (distance, is_required)
        return best[1] if best else None

    def _inherited_cue(self, earlier_clauses: list[str]) -> Optional[bool]:
        """The last cue found in the closest earlier clause that has one."""
        for clause in reversed(earlier_clauses):
            last = None
            for is_required, pattern in _cue_patterns():
                for cue in pattern.finditer(clause):
                    if last is None or cue.start() > last[0]:
                        last = (cue.start(), is_required)
            if last is not None:
                return last[1]
        return None

    def _extract_salary(self, text: str) -> Optional[SalaryRange]:
        """Parse the first '$120k - $150k' style range in the text."""
        match = _SALARY.search(text)
        if not match:
            return None

        symbol, low, low_k, high, high_k = match.groups()
        # "$120-150k" puts the multiplier only on the upper bound
        low_value = self._salary_number(low, low_k or (high_k if high else None))
        high_value = self._salary_number(high, high_k) if high else low_value

        if low_value is None:
            return None

        return SalaryRange(min=low_value, max=high_value, currency=_CURRENCIES.get(symbol))

    def _salary_number(self, number: Optional[str], thousands: Optional[str]) -> Optional[int]:
        if not number:
            return None
        try:
            value = float(number.replace(",", ""))
        except ValueError:
            return None
        if thousands:
            value *= 1000
        return int(value)

    # ------------------------------------------------------------------
    # Input cleanup
    # ------------------------------------------------------------------

    def _to_plain_text(self, raw: str) -> str:
        """Flatten HTML postings (as served by ATS job boards) to text."""
        if _ESCAPED_HTML_TAG.search(raw):
            raw = BeautifulSoup(raw, "html.parser").get_text()

        if not _HTML_TAG.search(raw):
            return raw

        soup = BeautifulSoup(raw, "html.parser")

        for br in soup.find_all("br"):
            br.replace_with("\n")

        for item in soup.find_all("li"):
            item.replace_with(f"\n- {item.get_text(' ', strip=True)}\n")

        for block in soup.find_all(_BLOCK_TAGS):
            block.append("\n")

        text = soup.get_text()
        lines = (re.sub(r"[ \t]+", " ", line).strip() for line in text.split("\n"))
        return "\n".join(line for line in lines if line)


def _cue_patterns():
    for pattern in REQUIRED_PATTERNS:
        yield True, pattern
    for pattern in PREFERRED_PATTERNS:
        yield False, pattern
