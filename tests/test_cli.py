from __future__ import annotations

import json

import pytest

from job_coverage.cli import create_sample_career_data, main

POSTING = (
    "Looking for a Senior Backend Engineer, 5+ years required, "
    "must have Python, Kubernetes and Terraform, nice to have Docker"
)


@pytest.fixture
def run(tmp_path, monkeypatch, capsys):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    base = ["--config", str(tmp_path / "config.json"), "--data-dir", str(tmp_path / "data"), "--user", "alice"]

    def _run(*args):
        main(base + list(args))
        return capsys.readouterr().out

    _run("config", "--set", "llm.enabled", "false")
    return _run


def _import_sample(run, tmp_path):
    sample = tmp_path / "career.json"
    run("profile", "--create-sample", "--output", str(sample))
    return run("profile", "--import", str(sample))


def _parse(run):
    out = run("parse", "--text", POSTING, "--no-llm", "--json")
    return json.loads(out)["id"]


def test_config_set_is_persisted(run, tmp_path):
    stored = json.loads((tmp_path / "config.json").read_text())
    assert stored["llm"]["enabled"] is False


def test_profile_import_and_show(run, tmp_path):
    assert "Imported profile for alice" in _import_sample(run, tmp_path)

    shown = json.loads(run("profile", "--show"))
    assert shown == create_sample_career_data().to_dict()


def test_parse_and_list_jobs(run):
    job_id = _parse(run)

    assert job_id in run("jobs")


def test_coverage_json(run, tmp_path):
    _import_sample(run, tmp_path)
    job_id = _parse(run)

    coverage = json.loads(run("coverage", "--job-id", job_id, "--json"))
    statuses = {item["requirement"]: item["status"] for item in coverage["items"]}

    assert statuses["Python"] == "FULL"
    assert statuses["Docker"] == "FULL"
    assert statuses["Kubernetes"] == "PARTIAL"


def test_gaps_answer_round_trip(run, tmp_path):
    _import_sample(run, tmp_path)
    job_id = _parse(run)
    questions_file = tmp_path / "questions.json"

    run("gaps", "--job-id", job_id, "--no-llm", "--output", str(questions_file))
    questions = json.loads(questions_file.read_text())["questions"]

    assert {q["skillName"] for q in questions} == {"Terraform"}
    terraform = next(q for q in questions if q["questionType"] == "experience")

    responses = tmp_path / "responses.json"
    responses.write_text(json.dumps({"responses": [
        {"questionId": terraform["id"], "answer": "Wrote our AWS modules", "hasExperience": True},
    ]}))
    out = run("answer", "--job-id", job_id, "--responses", str(responses))

    assert "Skills added: Terraform" in out
    assert "Terraform" in [s["name"] for s in json.loads(run("profile", "--show"))["skills"]]


def test_unknown_job_exits_with_error(run, tmp_path, capsys):
    _import_sample(run, tmp_path)

    with pytest.raises(SystemExit) as exc:
        main(["--config", str(tmp_path / "config.json"), "--data-dir", str(tmp_path / "data"),
              "--user", "alice", "coverage", "--job-id", "missing"])

    assert exc.value.code == 1
    assert "Job not found: missing" in capsys.readouterr().out


def test_unknown_provider_falls_back_to_rules(run, tmp_path):
    _import_sample(run, tmp_path)
    run("config", "--set", "llm.enabled", "true")
    run("config", "--set", "llm.provider", "mystery")
    job_id = _parse(run)

    coverage = json.loads(run("coverage", "--job-id", job_id, "--json"))
    assert coverage["overallScore"] > 0
