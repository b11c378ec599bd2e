from __future__ import annotations

import json

from job_coverage.core.jd_parser import JobDescriptionParser
from job_coverage.core.models import Priority, RequirementType, SeniorityLevel, SkillCategory
from job_coverage.llm.base import TextGenerationError

SCENARIO_D = (
    "Looking for a Senior Backend Engineer, 5+ years required, "
    "must have Python and AWS, nice to have Docker"
)

ASSISTED_REPLY = json.dumps({
    "title": "Backend Engineer",
    "company": "Acme",
    "location": None,
    "seniorityLevel": "senior",
    "requiredSkills": ["Python", {"name": "AWS", "category": "bogus"}],
    "preferredSkills": [
        {"name": "Docker", "category": "tool"},
        {"name": "Terraform", "category": "tool"},
        {"name": "Redis", "category": "technical"},
        {"name": "GraphQL", "category": "technical"},
    ],
    "responsibilities": None,
    "requirements": [
        {"text": "5+ years of backend experience", "type": "experience", "yearsRequired": 5, "isRequired": True},
    ],
    "benefits": ["Remote friendly"],
})


def _names(skills):
    return [s.name for s in skills]


def test_rule_based_scenario_d():
    job = JobDescriptionParser().parse(SCENARIO_D, use_llm=False)

    assert job.seniority_level == SeniorityLevel.SENIOR
    assert _names(job.required_skills) == ["Python", "AWS"]
    assert all(s.priority == Priority.P1 for s in job.required_skills)
    assert _names(job.preferred_skills) == ["Docker"]
    assert job.preferred_skills[0].priority == Priority.P2
    assert job.preferred_skills[0].context == "nice to have Docker"
    assert job.requirements == []
    assert job.extraction_method == "rule_based"


def test_rule_based_does_not_call_generator(fake_generator_cls):
    generator = fake_generator_cls([ASSISTED_REPLY])
    job = JobDescriptionParser(text_generator=generator).parse(SCENARIO_D, use_llm=False)

    assert generator.calls == []
    assert job.extraction_method == "rule_based"


def test_rule_based_category_comes_from_taxonomy():
    job = JobDescriptionParser().parse("Required: Kubernetes and Python", use_llm=False)
    categories = {s.name: s.category for s in job.required_skills}

    assert categories["Kubernetes"] == SkillCategory.TOOL
    assert categories["Python"] == SkillCategory.TECHNICAL


def test_rule_based_detects_symbol_names():
    job = JobDescriptionParser().parse("Experience with C# is required.", use_llm=False)
    assert "C#" in _names(job.required_skills)


def test_rule_based_responsibilities():
    lines = [f"- Task number {i}" for i in range(12)]
    text = "Responsibilities:\n" + "\n".join(lines) + "\n1. Numbered task"
    job = JobDescriptionParser().parse(text, use_llm=False)

    assert len(job.responsibilities) == 10
    assert job.responsibilities[0] == "Task number 0"


def test_seniority_groups_checked_in_order():
    parser = JobDescriptionParser()
    assert parser.parse("Junior developer wanted", use_llm=False).seniority_level == SeniorityLevel.ENTRY
    assert parser.parse("Staff engineer", use_llm=False).seniority_level == SeniorityLevel.LEAD
    assert parser.parse("Director of Engineering", use_llm=False).seniority_level == SeniorityLevel.EXECUTIVE
    assert parser.parse("Software engineer", use_llm=False).seniority_level is None


def test_salary_range():
    parser = JobDescriptionParser()

    salary = parser.parse("Salary: $120k - $150k per year", use_llm=False).salary_range
    assert (salary.min, salary.max, salary.currency) == (120000, 150000, "USD")

    salary = parser.parse("Pay band €120-150k", use_llm=False).salary_range
    assert (salary.min, salary.max, salary.currency) == (120000, 150000, "EUR")

    assert parser.parse("Competitive pay", use_llm=False).salary_range is None


def test_html_posting_is_flattened():
    html = (
        "<h2>What you'll do</h2>"
        "<ul><li>Build services with Python</li><li>Own deployments</li></ul>"
        "<p>Must have Python.</p><p>Docker is a plus.</p>"
    )
    job = JobDescriptionParser().parse(html, use_llm=False)

    assert job.responsibilities == ["Build services with Python", "Own deployments"]
    assert _names(job.required_skills) == ["Python"]
    assert _names(job.preferred_skills) == ["Docker"]


def test_bullets_take_their_section_header_cue():
    text = (
        "Senior Backend Engineer\n\n"
        "Required Qualifications:\n- Python\n- AWS\n\n"
        "Nice to have:\n- Docker\n\n"
        "About the team\n- You will work with Kubernetes"
    )
    job = JobDescriptionParser().parse(text, use_llm=False)

    assert _names(job.required_skills) == ["Python", "AWS"]
    assert _names(job.preferred_skills) == ["Docker", "Kubernetes"]
    assert job.preferred_skills[0].context == "Docker"


def test_bullet_cue_beats_section_header():
    text = "Requirements:\n- Python is required\n- GraphQL is a plus"
    job = JobDescriptionParser().parse(text, use_llm=False)

    assert _names(job.required_skills) == ["Python"]
    assert _names(job.preferred_skills) == ["GraphQL"]


def test_empty_posting_is_well_formed():
    job = JobDescriptionParser().parse("", use_llm=False)

    assert job.required_skills == []
    assert job.preferred_skills == []
    assert job.responsibilities == []
    assert job.seniority_level is None


def test_assisted_parse(fake_generator_cls):
    generator = fake_generator_cls([ASSISTED_REPLY])
    job = JobDescriptionParser(text_generator=generator).parse("posting text")

    assert job.extraction_method == "assisted"
    assert job.title == "Backend Engineer"
    assert job.seniority_level == SeniorityLevel.SENIOR
    assert _names(job.required_skills) == ["Python", "AWS"]
    assert job.required_skills[1].category == SkillCategory.TECHNICAL
    assert [s.priority for s in job.preferred_skills] == [
        Priority.P2, Priority.P2, Priority.P2, Priority.P3,
    ]
    assert job.responsibilities == []
    assert job.requirements[0].type == RequirementType.EXPERIENCE
    assert job.requirements[0].years_required == 5

    call = generator.calls[0]
    assert call["format"] == "json"
    assert call["temperature"] == 0.3
    assert call["prompt"].endswith("posting text")


def test_assisted_parse_retries_with_feedback(fake_generator_cls):
    generator = fake_generator_cls(["this is not json", ASSISTED_REPLY])
    job = JobDescriptionParser(text_generator=generator, max_attempts=2).parse("posting text")

    assert job.extraction_method == "assisted"
    assert len(generator.calls) == 2
    assert "previous reply was rejected" in generator.calls[1]["prompt"]


def test_assisted_parse_strips_code_fence(fake_generator_cls):
    generator = fake_generator_cls(["```json\n" + ASSISTED_REPLY + "\n```"])
    job = JobDescriptionParser(text_generator=generator).parse("posting text")

    assert job.extraction_method == "assisted"


def test_invalid_replies_fall_back_to_rules(fake_generator_cls):
    bad = json.dumps({"requiredSkills": "Python"})
    generator = fake_generator_cls([bad, bad])
    job = JobDescriptionParser(text_generator=generator, max_attempts=2).parse(SCENARIO_D)

    assert len(generator.calls) == 2
    assert job.extraction_method == "rule_based"
    assert _names(job.required_skills) == ["Python", "AWS"]


def test_service_error_falls_back_to_rules(fake_generator_cls):
    generator = fake_generator_cls([TextGenerationError("connection refused")])
    job = JobDescriptionParser(text_generator=generator).parse(SCENARIO_D)

    assert job.extraction_method == "rule_based"
    assert _names(job.preferred_skills) == ["Docker"]


def test_unexpected_error_falls_back_to_rules(fake_generator_cls):
    generator = fake_generator_cls([RuntimeError("boom")])
    job = JobDescriptionParser(text_generator=generator).parse(SCENARIO_D)

    assert job.extraction_method == "rule_based"
    assert job.seniority_level == SeniorityLevel.SENIOR
