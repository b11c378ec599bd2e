from __future__ import annotations

import pytest

from job_coverage.core.gap_questions import GapQuestionGenerator
from job_coverage.core.jd_parser import JobDescriptionParser
from job_coverage.core.models import CareerData, CoverageStatus, GapQuestionResponse, Skill
from job_coverage.service import (
    CoverageError,
    CoverageService,
    JobNotFoundError,
    ProfileNotFoundError,
)
from job_coverage.storage import JobStore, ProfileStore
from job_coverage.utils.config import Config

POSTING = (
    "Looking for a Senior Backend Engineer, 5+ years required, "
    "must have Python and AWS, nice to have Docker"
)


def _service(tmp_path, matcher, generator=None, use_llm=True):
    return CoverageService(
        profile_store=ProfileStore(str(tmp_path / "profiles")),
        job_store=JobStore(str(tmp_path / "jobs")),
        parser=JobDescriptionParser(text_generator=generator, taxonomy=matcher.taxonomy),
        matcher=matcher,
        gap_generator=GapQuestionGenerator(text_generator=generator, matcher=matcher),
        use_llm=use_llm,
    )


def _with_profile(service, career=None):
    service.profile_store.upsert("alice", career or CareerData(skills=[Skill(name="Python")]))
    job_id, _ = service.add_job("alice", POSTING, use_llm=False)
    return job_id


def test_add_job_rule_based(tmp_path, matcher):
    service = _service(tmp_path, matcher)
    job_id, job = service.add_job("alice", POSTING)

    assert job.extraction_method == "rule_based"
    assert service.job_store.get("alice", job_id) == job
    assert service.job_store.get_record("alice", job_id).raw_description == POSTING


def test_add_job_skips_unavailable_generator(tmp_path, matcher, fake_generator_cls):
    generator = fake_generator_cls(["{}"], available=False)
    _, job = _service(tmp_path, matcher, generator).add_job("alice", POSTING)

    assert generator.calls == []
    assert job.extraction_method == "rule_based"


def test_add_job_rejects_empty_description(tmp_path, matcher):
    with pytest.raises(CoverageError):
        _service(tmp_path, matcher).add_job("alice", "   ")


def test_missing_job_and_profile(tmp_path, matcher):
    service = _service(tmp_path, matcher)

    with pytest.raises(JobNotFoundError):
        service.get_coverage("alice", "nope")

    job_id, _ = service.add_job("alice", POSTING)
    with pytest.raises(ProfileNotFoundError):
        service.get_coverage("alice", job_id)


def test_get_coverage(tmp_path, matcher):
    service = _service(tmp_path, matcher)
    job_id = _with_profile(service)
    coverage = service.get_coverage("alice", job_id)

    statuses = {item.requirement: item.status for item in coverage.items}
    assert statuses == {
        "Python": CoverageStatus.FULL,
        "AWS": CoverageStatus.GAP,
        "Docker": CoverageStatus.GAP,
    }
    assert coverage.overall_score == 35


def test_get_gap_questions(tmp_path, matcher):
    service = _service(tmp_path, matcher, use_llm=False)
    job_id = _with_profile(service)
    analysis, coverage = service.get_gap_questions("alice", job_id)

    assert [q.skill_name for q in analysis.questions] == ["AWS"] * 3 + ["Docker"] * 2
    assert analysis.total_gaps == 2
    assert analysis.critical_gaps == 1
    assert coverage.overall_score == 35


def test_submit_gap_responses_raises_score_and_saves(tmp_path, matcher):
    service = _service(tmp_path, matcher, use_llm=False)
    job_id = _with_profile(service)
    analysis, _ = service.get_gap_questions("alice", job_id)
    aws = next(q for q in analysis.questions if q.skill_name == "AWS")

    result = service.submit_gap_responses("alice", job_id, [
        GapQuestionResponse(aws.id, "Ran our stack on EC2 for two years", True, years_of_experience=2),
    ])

    assert result.previous_score == 35
    assert result.new_score == 70
    assert result.skills_added == ["AWS"]
    assert [s.name for s in service.profile_store.get("alice").skills] == ["Python", "AWS"]

    payload = result.to_dict()
    assert payload["success"] is True
    assert (payload["previousScore"], payload["newScore"]) == (35, 70)


def test_submit_without_experience_changes_nothing(tmp_path, matcher):
    service = _service(tmp_path, matcher, use_llm=False)
    job_id = _with_profile(service)
    stored = service.profile_store.get("alice")

    result = service.submit_gap_responses("alice", job_id, [
        GapQuestionResponse("gap-aws-experience-abc123", "I have used it for years", False),
    ])

    assert result.new_score == result.previous_score == 35
    assert result.skills_added == []
    assert service.profile_store.get("alice") == stored


def test_from_config(tmp_path, monkeypatch):
    monkeypatch.delenv("OLLAMA_BASE_URL", raising=False)
    config = Config(str(tmp_path / "config.json"))
    config.set("storage.data_dir", str(tmp_path / "data"))
    config.set("llm.enabled", False)

    service = CoverageService.from_config(config)

    assert service.use_llm is False
    assert service.parser.text_generator is None
    assert service.profile_store.storage_path == tmp_path / "data" / "profiles"
