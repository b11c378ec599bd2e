"""
Job Coverage CLI - Command line interface for coverage matching and gap analysis.

Usage:
    python -m job_coverage [options] [command] [command options]

Commands:
    parse       Parse a job posting and save it
    jobs        List saved jobs
    coverage    Show how well your profile covers a saved job
    gaps        Generate gap questions for a saved job
    answer      Submit answers to gap questions and rescore
    profile     Manage your career data
    config      Manage configuration

Examples:
    python -m job_coverage profile --import resume.json
    python -m job_coverage parse --file posting.txt
    python -m job_coverage coverage --job-id 3f2c...
    python -m job_coverage gaps --job-id 3f2c... --output questions.json
    python -m job_coverage answer --job-id 3f2c... --responses answers.json
"""

from typing import Optional
import argparse
import json
import logging
import sys

from job_coverage.core.models import (
    Basics,
    CareerData,
    CoverageMap,
    CoverageStatus,
    GapQuestionResponse,
    Project,
    Skill,
    WorkExperience,
)
from job_coverage.service import CoverageError, CoverageService
from job_coverage.utils import Config

STATUS_ICONS = {
    CoverageStatus.FULL: "✅",
    CoverageStatus.PARTIAL: "🟡",
    CoverageStatus.GAP: "❌",
}


def main(argv: Optional[list[str]] = None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="job_coverage",
        description="Job Coverage - Match your career data against job postings and close the gaps",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", "-c", help="Path to config file")
    parser.add_argument("--data-dir", help="Override the data directory")
    parser.add_argument("--user", "-u", help="User id (default: profile.default_user)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Parse command
    parse_parser = subparsers.add_parser("parse", help="Parse and save a job posting")
    parse_parser.add_argument("--file", "-f", help="File containing the posting (text or HTML)")
    parse_parser.add_argument("--text", "-t", help="Posting text")
    parse_parser.add_argument("--no-llm", action="store_true", help="Use the rule-based parser only")
    parse_parser.add_argument("--json", action="store_true", help="Print the parsed job as JSON")

    # Jobs command
    subparsers.add_parser("jobs", help="List saved jobs")

    # Coverage command
    coverage_parser = subparsers.add_parser("coverage", help="Show coverage for a job")
    coverage_parser.add_argument("--job-id", "-j", required=True, help="Saved job id")
    coverage_parser.add_argument("--json", action="store_true", help="Print the coverage map as JSON")

    # Gaps command
    gaps_parser = subparsers.add_parser("gaps", help="Generate gap questions")
    gaps_parser.add_argument("--job-id", "-j", required=True, help="Saved job id")
    gaps_parser.add_argument("--no-llm", action="store_true", help="Use template questions only")
    gaps_parser.add_argument("--json", action="store_true", help="Print the analysis as JSON")
    gaps_parser.add_argument("--output", "-o", help="Write the questions to a JSON file")

    # Answer command
    answer_parser = subparsers.add_parser("answer", help="Submit gap question answers")
    answer_parser.add_argument("--job-id", "-j", required=True, help="Saved job id")
    answer_parser.add_argument("--responses", "-r", required=True, help="JSON file of responses")

    # Profile command
    profile_parser = subparsers.add_parser("profile", help="Manage career data")
    profile_parser.add_argument("--import", dest="import_file", help="Import JSON Resume career data")
    profile_parser.add_argument("--show", action="store_true", help="Show stored career data")
    profile_parser.add_argument("--create-sample", action="store_true", help="Create sample career data")
    profile_parser.add_argument("--output", "-o", help="Output file for the sample")

    # Config command
    config_parser = subparsers.add_parser("config", help="Manage configuration")
    config_parser.add_argument("--show", action="store_true", help="Show current config")
    config_parser.add_argument("--set", nargs=2, metavar=("KEY", "VALUE"), help="Set a config value")
    config_parser.add_argument("--set-api-key", nargs=2, metavar=("PROVIDER", "KEY"), help="Set API key")
    config_parser.add_argument("--init", action="store_true", help="Initialize default config")

    # Parse arguments
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Execute command
    try:
        config = Config(args.config)
        if args.data_dir:
            config.set("storage.data_dir", args.data_dir)

        if args.command == "parse":
            cmd_parse(args, config)
        elif args.command == "jobs":
            cmd_jobs(args, config)
        elif args.command == "coverage":
            cmd_coverage(args, config)
        elif args.command == "gaps":
            cmd_gaps(args, config)
        elif args.command == "answer":
            cmd_answer(args, config)
        elif args.command == "profile":
            cmd_profile(args, config)
        elif args.command == "config":
            cmd_config(args, config)
        else:
            parser.print_help()

    except KeyboardInterrupt:
        print("\n\nOperation cancelled.")
        sys.exit(1)
    except CoverageError as e:
        print(f"Error: {e}")
        sys.exit(1)
    except Exception as e:
        logging.getLogger("job_coverage").debug("Command failed", exc_info=True)
        print(f"\nError: {e}")
        sys.exit(1)


def _user(args, config: Config) -> str:
    return args.user or config.get("profile.default_user", "default")


def _print_coverage(coverage_map: CoverageMap) -> None:
    print(f"\n📈 Overall Match: {coverage_map.overall_score}%")

    required = coverage_map.required_coverage
    preferred = coverage_map.preferred_coverage
    print(f"   Required:  {required.full} full | {required.partial} partial | {required.gap} gaps")
    print(f"   Preferred: {preferred.full} full | {preferred.partial} partial | {preferred.gap} gaps")
    print("-" * 60)

    for item in coverage_map.items:
        print(f"{STATUS_ICONS[item.status]} [{item.priority.value}] {item.requirement}")
        for evidence in item.evidence[:3]:
            print(f"      {evidence}")


def cmd_parse(args, config: Config):
    """Execute parse command."""
    if args.file:
        with open(args.file, 'r', encoding='utf-8') as f:
            raw = f.read()
    elif args.text:
        raw = args.text
    else:
        print("Error: Provide --file or --text")
        return

    service = CoverageService.from_config(config)
    use_llm = False if args.no_llm else None
    job_id, job = service.add_job(_user(args, config), raw, use_llm=use_llm)

    if args.json:
        print(json.dumps({"id": job_id, "job": job.to_dict()}, indent=2))
        return

    print(f"✅ Saved job {job_id}")
    print(f"   Title: {job.title or 'Unknown'}")
    if job.company:
        print(f"   Company: {job.company}")
    if job.seniority_level:
        print(f"   Seniority: {job.seniority_level.value}")
    print(f"   Parsed with: {job.extraction_method.replace('_', '-')}")
    print(f"   Required skills: {', '.join(s.name for s in job.required_skills) or '-'}")
    print(f"   Preferred skills: {', '.join(s.name for s in job.preferred_skills) or '-'}")
    if job.salary_range:
        salary = job.salary_range
        print(f"   Salary: {salary.min or '?'} - {salary.max or '?'} {salary.currency or ''}".rstrip())


def cmd_jobs(args, config: Config):
    """Execute jobs command."""
    service = CoverageService.from_config(config)
    jobs = service.job_store.list_jobs(_user(args, config))

    if not jobs:
        print("No saved jobs. Run 'parse' first.")
        return

    print(f"\n📋 Saved jobs ({len(jobs)} total)\n")
    for stored in jobs:
        job = stored.job
        print(f"{stored.id}  {job.title or 'Untitled'} @ {job.company or 'Unknown'}")


def cmd_coverage(args, config: Config):
    """Execute coverage command."""
    service = CoverageService.from_config(config)
    coverage_map = service.get_coverage(_user(args, config), args.job_id)

    if args.json:
        print(json.dumps(coverage_map.to_dict(), indent=2))
    else:
        _print_coverage(coverage_map)


def cmd_gaps(args, config: Config):
    """Execute gaps command."""
    service = CoverageService.from_config(config)
    use_llm = False if args.no_llm else None
    analysis, coverage_map = service.get_gap_questions(_user(args, config), args.job_id, use_llm=use_llm)

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            json.dump(analysis.to_dict(), f, indent=2)

    if args.json:
        print(json.dumps({"gapAnalysis": analysis.to_dict(), "overallScore": coverage_map.overall_score}, indent=2))
        return

    print(f"\n🔍 Gap Analysis (match {coverage_map.overall_score}%)")
    print(f"   Gaps: {analysis.total_gaps} | Critical: {analysis.critical_gaps} | Addressable: {analysis.addressable_gaps}")
    for warning in analysis.warnings:
        print(f"   ⚠️  {warning}")
    print("-" * 60)

    for question in analysis.questions:
        print(f"\n[{question.priority.value}] {question.skill_name} ({question.question_type.value})")
        print(f"   {question.question}")
        print(f"   {question.context}")
        print(f"   id: {question.id}")

    if args.output:
        print(f"\n💾 Saved {len(analysis.questions)} questions to {args.output}")


def cmd_answer(args, config: Config):
    """Execute answer command."""
    with open(args.responses, 'r', encoding='utf-8') as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("responses")
    if not isinstance(data, list):
        print("Error: Responses file must hold a list or {\"responses\": [...]}")
        return

    responses = [GapQuestionResponse.from_dict(r) for r in data if isinstance(r, dict)]

    service = CoverageService.from_config(config)
    result = service.submit_gap_responses(_user(args, config), args.job_id, responses)

    print(f"✅ Match score: {result.previous_score}% -> {result.new_score}%")
    if result.skills_added:
        print(f"   Skills added: {', '.join(result.skills_added)}")
    else:
        print("   No new skills added")


def create_sample_career_data() -> CareerData:
    """Sample career data for trying the tool out."""
    return CareerData(
        basics=Basics(
            name="Sample User",
            label="Senior Software Engineer",
            email="sample@example.com",
            summary="Experienced software engineer with expertise in Python and cloud technologies.",
        ),
        work=[
            WorkExperience(
                company="Tech Corp",
                position="Senior Software Engineer",
                start_date="2020-01",
                summary="Leading backend development team",
                highlights=[
                    "Reduced API latency by 40%",
                    "Implemented CI/CD pipeline with GitHub Actions",
                ],
                skills_used=["Python", "PostgreSQL", "REST API"],
                tools_used=["Docker", "AWS"],
            ),
        ],
        projects=[
            Project(
                name="Open Source Task Queue",
                description="A lightweight task queue built on Redis",
                technologies=["Python", "Redis"],
            ),
        ],
        skills=[
            Skill(name="Python", level="expert"),
            Skill(name="JavaScript", level="advanced"),
            Skill(name="AWS", level="advanced"),
            Skill(name="Docker", level="intermediate"),
        ],
    )


def cmd_profile(args, config: Config):
    """Execute profile command."""
    user_id = _user(args, config)

    if args.create_sample:
        career_data = create_sample_career_data()
        output = args.output or "sample_career_data.json"
        with open(output, 'w', encoding='utf-8') as f:
            json.dump(career_data.to_dict(), f, indent=2)
        print(f"✅ Created sample career data: {output}")

    elif args.import_file:
        with open(args.import_file, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            print("Error: Career data must be a JSON object")
            return

        career_data = CareerData.from_dict(data)
        service = CoverageService.from_config(config)
        service.profile_store.upsert(user_id, career_data)
        print(f"✅ Imported profile for {user_id}")
        print(f"   Work entries: {len(career_data.work)} | Projects: {len(career_data.projects)} | Skills: {len(career_data.skills)}")

    elif args.show:
        service = CoverageService.from_config(config)
        career_data = service.profile_store.get(user_id)
        if career_data is None:
            print(f"No profile for {user_id}. Use --import first.")
            return
        print(json.dumps(career_data.to_dict(), indent=2))

    else:
        print("Use --import, --show, or --create-sample")


def cmd_config(args, config: Config):
    """Execute config command."""
    if args.init:
        config.save()
        print(f"✅ Created config at: {config.config_path}")

    elif args.show:
        print("\n📋 Current Configuration\n")
        config.print_config()

    elif args.set:
        key, value = args.set
        # Try to parse as JSON for complex values
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            pass

        config.set(key, value)
        config.save()
        print(f"✅ Set {key} = {value}")

    elif args.set_api_key:
        provider, key = args.set_api_key
        config.set_api_key(provider, key)
        print(f"✅ Set API key for {provider}")

    else:
        print("Use --show, --set, --set-api-key, or --init")


if __name__ == "__main__":
    main()
