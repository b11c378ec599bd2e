from __future__ import annotations

import copy

from job_coverage.core.gap_questions import make_question_id
from job_coverage.core.gap_responses import GapResponseProcessor
from job_coverage.core.models import CareerData, GapQuestionResponse, Skill


def _response(question_id, answer="Yes, I used it at Acme", has_experience=True, years=None, skill_name=None):
    return GapQuestionResponse(
        question_id=question_id,
        answer=answer,
        has_experience=has_experience,
        years_of_experience=years,
        skill_name=skill_name,
    )


def _skill_names(career_data):
    return [s.name for s in career_data.skills]


def test_scenario_e_no_experience_leaves_skills_unchanged():
    career = CareerData(skills=[Skill(name="Python")])
    responses = [
        _response("gap-kubernetes-experience-abc123", answer="I have used it for years", has_experience=False),
    ]
    result = GapResponseProcessor().apply(responses, career)

    assert _skill_names(result.career_data) == ["Python"]
    assert result.skills_added == []


def test_affirmative_response_adds_skill():
    result = GapResponseProcessor().apply(
        [_response(make_question_id("Kubernetes", "experience"), years=4)],
        CareerData(),
    )

    skill = result.career_data.skills[0]
    assert (skill.name, skill.level, skill.keywords) == ("Kubernetes", "advanced", [])
    assert result.skills_added == ["Kubernetes"]


def test_level_depends_on_years():
    processor = GapResponseProcessor()
    levels = {}
    for skill, years in (("Rust", None), ("Go", 2.5), ("Scala", 3)):
        result = processor.apply([_response(make_question_id(skill, "project"), years=years)], CareerData())
        levels[skill] = result.career_data.skills[0].level

    assert levels == {"Rust": "intermediate", "Go": "intermediate", "Scala": "advanced"}


def test_blank_answer_is_ignored():
    result = GapResponseProcessor().apply([_response("gap-docker-training-1f", answer="   ")], CareerData())
    assert result.career_data.skills == []


def test_idempotent_application():
    processor = GapResponseProcessor()
    responses = [_response("gap-docker-experience-00ff", years=1)]

    once = processor.apply(responses, CareerData(skills=[Skill(name="Python")]))
    twice = processor.apply(responses, once.career_data)

    assert _skill_names(once.career_data) == ["Python", "Docker"]
    assert [s.to_dict() for s in twice.career_data.skills] == [s.to_dict() for s in once.career_data.skills]
    assert twice.skills_added == []


def test_duplicate_responses_in_one_batch():
    responses = [
        _response("gap-docker-experience-00ff"),
        _response("gap-docker-project-11aa"),
    ]
    result = GapResponseProcessor().apply(responses, CareerData())
    assert _skill_names(result.career_data) == ["Docker"]


def test_existing_skill_is_not_overwritten():
    career = CareerData(skills=[Skill(name="postgres", level="beginner")])
    result = GapResponseProcessor().apply(
        [_response("gap-postgresql-experience-abc", years=10)],
        career,
    )

    assert len(result.career_data.skills) == 1
    assert result.career_data.skills[0].level == "beginner"


def test_input_is_not_mutated():
    career = CareerData(skills=[Skill(name="Python")])
    snapshot = copy.deepcopy(career)
    GapResponseProcessor().apply([_response("gap-docker-experience-00ff")], career)

    assert career == snapshot


def test_malformed_ids_are_skipped():
    responses = [
        _response("not-a-gap-id"),
        _response("gap-docker-unknowntype-123"),
        _response("gap--experience-123"),
        _response("gap-docker-experience-00ff"),
    ]
    result = GapResponseProcessor().apply(responses, CareerData())

    assert _skill_names(result.career_data) == ["Docker"]
    assert result.skipped == 3


def test_explicit_skill_name_wins():
    result = GapResponseProcessor().apply([_response("foreign-id", skill_name="k8s")], CareerData())
    assert _skill_names(result.career_data) == ["Kubernetes"]


def test_slug_resolution():
    processor = GapResponseProcessor()

    assert processor.resolve_skill_name(_response(make_question_id("C#", "experience"))) == "C#"
    assert processor.resolve_skill_name(_response("gap-node-js-experience-1700000000000")) == "Node.js"
    assert processor.resolve_skill_name(_response("gap-spark-streaming-training-1a2b")) == "spark streaming"
    assert processor.resolve_skill_name(_response(make_question_id("5+ years experience", "training"))) == (
        "5 years experience"
    )


def test_response_from_dict_requires_literal_true():
    assert GapQuestionResponse.from_dict(
        {"questionId": "gap-docker-experience-1", "answer": "yes", "hasExperience": True}
    ).has_experience is True
    assert GapQuestionResponse.from_dict(
        {"questionId": "gap-docker-experience-1", "answer": "yes", "hasExperience": "true"}
    ).has_experience is False

    response = GapQuestionResponse.from_dict(
        {"question_id": "q", "answer": "a", "has_experience": True, "yearsOfExperience": "3", "skillName": "Go"}
    )
    assert (response.question_id, response.years_of_experience, response.skill_name) == ("q", 3.0, "Go")
