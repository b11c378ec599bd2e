"""
Coverage Service - The request workflows that tie parsing, matching and gap
analysis to the profile and job stores.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

from job_coverage.core.gap_questions import GapQuestionGenerator
from job_coverage.core.gap_responses import GapResponseProcessor
from job_coverage.core.jd_parser import JobDescriptionParser
from job_coverage.core.matcher import CoverageMatcher
from job_coverage.core.models import (
    CareerData,
    CoverageMap,
    GapAnalysis,
    GapQuestionResponse,
    ParsedJobDescription,
)
from job_coverage.core.taxonomy import DEFAULT_TAXONOMY
from job_coverage.llm import create_text_generator
from job_coverage.storage import JobStore, ProfileStore


class CoverageError(Exception):
    """Base error for the coverage workflows."""


class JobNotFoundError(CoverageError):
    """The user has no job with the given id."""

    def __init__(self, job_id: str):
        super().__init__(f"Job not found: {job_id}")
        self.job_id = job_id


class ProfileNotFoundError(CoverageError):
    """The user has no career data yet."""

    def __init__(self, user_id: str):
        super().__init__(f"No profile for user '{user_id}'. Please complete your profile first.")
        self.user_id = user_id


@dataclass
class GapSubmissionResult:
    """Outcome of folding gap responses into a profile."""
    coverage_map: CoverageMap
    previous_score: int
    skills_added: list[str] = field(default_factory=list)

    @property
    def new_score(self) -> int:
        return self.coverage_map.overall_score

    def to_dict(self) -> dict:
        return {
            "success": True,
            "newScore": self.new_score,
            "previousScore": self.previous_score,
            "skillsAdded": list(self.skills_added),
            "coverageMap": self.coverage_map.to_dict(),
        }


class CoverageService:
    """Runs the add-job, coverage, gap-question and gap-answer workflows."""

    def __init__(
        self,
        profile_store: ProfileStore,
        job_store: JobStore,
        parser: Optional[JobDescriptionParser] = None,
        matcher: Optional[CoverageMatcher] = None,
        gap_generator: Optional[GapQuestionGenerator] = None,
        response_processor: Optional[GapResponseProcessor] = None,
        use_llm: bool = True,
    ):
        """
        Initialize the service.

        Args:
            profile_store: CareerData store
            job_store: Parsed job store
            parser: Job description parser (default: rule-based only)
            matcher: Coverage matcher
            gap_generator: Gap question generator (default: rule-based only)
            response_processor: Gap response processor
            use_llm: Default strategy when a call does not choose one
        """
        self.profile_store = profile_store
        self.job_store = job_store
        self.matcher = matcher or CoverageMatcher()
        self.parser = parser or JobDescriptionParser(taxonomy=self.matcher.taxonomy)
        self.gap_generator = gap_generator or GapQuestionGenerator(matcher=self.matcher)
        self.response_processor = response_processor or GapResponseProcessor(self.matcher.taxonomy)
        self.use_llm = use_llm
        self.logger = logging.getLogger(self.__class__.__name__)

    @classmethod
    def from_config(cls, config) -> "CoverageService":
        """Build a service with stores and text generator from a Config."""
        data_dir = config.get_data_dir()
        text_generator = create_text_generator(config)
        max_attempts = int(config.get("llm.max_attempts", 2))

        matcher = CoverageMatcher(taxonomy=DEFAULT_TAXONOMY)
        return cls(
            profile_store=ProfileStore(str(data_dir / "profiles")),
            job_store=JobStore(str(data_dir / "jobs")),
            parser=JobDescriptionParser(
                text_generator=text_generator,
                taxonomy=matcher.taxonomy,
                max_attempts=max_attempts,
            ),
            matcher=matcher,
            gap_generator=GapQuestionGenerator(
                text_generator=text_generator,
                matcher=matcher,
                max_llm_questions=int(config.get("llm.max_gap_questions", 5)),
                parallel=bool(config.get("llm.parallel", False)),
                max_attempts=max_attempts,
            ),
            response_processor=GapResponseProcessor(matcher.taxonomy),
            use_llm=config.use_llm(),
        )

    def add_job(
        self,
        user_id: str,
        raw_description: str,
        use_llm: Optional[bool] = None,
    ) -> tuple[str, ParsedJobDescription]:
        """
        Parse a job posting and save it for the user.

        When use_llm is not given, the assisted parser is used only if the
        text generator answers its availability check.

        Returns:
            (job_id, parsed job)
        """
        if not raw_description or not raw_description.strip():
            raise CoverageError("Job description is empty")

        if use_llm is None:
            use_llm = self.use_llm and self._generator_available()

        job = self.parser.parse(raw_description, use_llm=use_llm)
        job_id = self.job_store.save(user_id, job, raw_description=raw_description)

        self.logger.info(
            f"Parsed job {job_id} ({job.extraction_method}): "
            f"{len(job.required_skills)} required, {len(job.preferred_skills)} preferred skills"
        )
        return job_id, job

    def get_coverage(self, user_id: str, job_id: str) -> CoverageMap:
        """Coverage map of the user's profile against one saved job."""
        career_data, job = self._load(user_id, job_id)
        return self.matcher.generate_coverage_map(career_data, job)

    def get_gap_questions(
        self,
        user_id: str,
        job_id: str,
        use_llm: Optional[bool] = None,
    ) -> tuple[GapAnalysis, CoverageMap]:
        """Fresh coverage map plus the gap questions derived from it."""
        career_data, job = self._load(user_id, job_id)
        coverage_map = self.matcher.generate_coverage_map(career_data, job)

        if use_llm is None:
            use_llm = self.use_llm

        analysis = self.gap_generator.generate(coverage_map, career_data, use_llm=use_llm)
        return analysis, coverage_map

    def submit_gap_responses(
        self,
        user_id: str,
        job_id: str,
        responses: list[GapQuestionResponse],
    ) -> GapSubmissionResult:
        """
        Fold gap answers into the profile, save it, and rescore the job.

        The profile is written back as a whole record, and only when at
        least one skill was added.
        """
        career_data, job = self._load(user_id, job_id)
        previous = self.matcher.generate_coverage_map(career_data, job)

        result = self.response_processor.apply(responses, career_data)

        if result.skills_added:
            self.profile_store.upsert(user_id, result.career_data)

        coverage_map = self.matcher.generate_coverage_map(result.career_data, job)
        self.logger.info(
            f"Gap responses for job {job_id}: score {previous.overall_score} -> "
            f"{coverage_map.overall_score}, {len(result.skills_added)} skills added"
        )

        return GapSubmissionResult(
            coverage_map=coverage_map,
            previous_score=previous.overall_score,
            skills_added=result.skills_added,
        )

    def _load(self, user_id: str, job_id: str) -> tuple[CareerData, ParsedJobDescription]:
        job = self.job_store.get(user_id, job_id)
        if job is None:
            raise JobNotFoundError(job_id)

        career_data = self.profile_store.get(user_id)
        if career_data is None:
            raise ProfileNotFoundError(user_id)

        return career_data, job

    def _generator_available(self) -> bool:
        generator = self.parser.text_generator
        if generator is None:
            return False
        try:
            return generator.is_available()
        except Exception as e:
            self.logger.warning(f"Availability check for {generator.name} failed: {e}")
            return False
