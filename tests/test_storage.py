from __future__ import annotations

import pytest

from job_coverage.core.models import (
    CareerData,
    ExtractedRequirement,
    ExtractedSkill,
    ParsedJobDescription,
    Priority,
    RequirementType,
    SalaryRange,
    SeniorityLevel,
    Skill,
    SkillCategory,
    WorkExperience,
)
from job_coverage.storage import JobStore, ProfileStore
from job_coverage.storage.base import safe_name


def _job():
    return ParsedJobDescription(
        title="Backend Engineer",
        company="Acme",
        seniority_level=SeniorityLevel.SENIOR,
        required_skills=[ExtractedSkill("Python", Priority.P1, SkillCategory.TECHNICAL, "must have Python")],
        preferred_skills=[ExtractedSkill("Docker", Priority.P2, SkillCategory.TOOL)],
        requirements=[ExtractedRequirement("5+ years", RequirementType.EXPERIENCE, 5)],
        salary_range=SalaryRange(120000, 150000, "USD"),
        extraction_method="rule_based",
    )


def test_profile_upsert_replaces_whole_record(tmp_path):
    store = ProfileStore(str(tmp_path / "profiles"))
    assert store.get("alice") is None

    store.upsert("alice", CareerData(
        work=[WorkExperience(company="Acme", position="Dev", skills_used=["Go"])],
        skills=[Skill(name="Python")],
    ))
    store.upsert("alice", CareerData(skills=[Skill(name="Rust", level="advanced")]))

    loaded = store.get("alice")
    assert loaded.work == []
    assert [(s.name, s.level) for s in loaded.skills] == [("Rust", "advanced")]
    assert store.exists("alice")


def test_profile_round_trip_keeps_extensions(tmp_path):
    store = ProfileStore(str(tmp_path))
    career = CareerData(work=[
        WorkExperience(company="Acme", position="Dev", start_date="2020-01", tools_used=["Docker"]),
    ])
    store.upsert("bob", career)

    assert store.get("bob") == career


def test_unreadable_profile_is_skipped(tmp_path):
    store = ProfileStore(str(tmp_path))
    (tmp_path / "carol.json").write_text("{ not json", encoding="utf-8")

    assert store.get("carol") is None


def test_job_round_trip_is_verbatim(tmp_path):
    store = JobStore(str(tmp_path / "jobs"))
    job = _job()
    job_id = store.save("alice", job, raw_description="raw posting")

    assert store.get("alice", job_id) == job
    assert store.get_record("alice", job_id).raw_description == "raw posting"


def test_jobs_are_scoped_per_user(tmp_path):
    store = JobStore(str(tmp_path))
    job_id = store.save("alice", _job())

    assert store.get("bob", job_id) is None
    assert store.get("alice", "missing") is None


def test_list_jobs_skips_unreadable_files(tmp_path):
    store = JobStore(str(tmp_path))
    first = store.save("alice", _job())
    second = store.save("alice", ParsedJobDescription(title="Data Engineer"))
    (tmp_path / "alice" / "broken.json").write_text("[]", encoding="utf-8")

    jobs = store.list_jobs("alice")
    assert {j.id for j in jobs} == {first, second}
    assert store.list_jobs("nobody") == []


def test_remove_job(tmp_path):
    store = JobStore(str(tmp_path))
    job_id = store.save("alice", _job())

    assert store.remove("alice", job_id) is True
    assert store.remove("alice", job_id) is False
    assert store.get("alice", job_id) is None


def test_safe_name():
    assert safe_name("user@example.com") == "user_example.com"
    assert safe_name("../etc/passwd") == ".._etc_passwd"
    with pytest.raises(ValueError):
        safe_name("..")
    with pytest.raises(ValueError):
        safe_name("   ")
