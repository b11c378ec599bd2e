"""
Regex tables shared by the job description parser and the matcher.
"""

import re

from .models import SeniorityLevel

# Checked in this order; the first group with a hit wins.
SENIORITY_PATTERNS: dict[SeniorityLevel, list[re.Pattern]] = {
    SeniorityLevel.ENTRY: [
        re.compile(r"entry[- ]?level", re.IGNORECASE),
        re.compile(r"junior", re.IGNORECASE),
        re.compile(r"associate", re.IGNORECASE),
        re.compile(r"\b0-2\s*years?\b", re.IGNORECASE),
        re.compile(r"\b1-2\s*years?\b", re.IGNORECASE),
        re.compile(r"new\s+grad", re.IGNORECASE),
    ],
    SeniorityLevel.MID: [
        re.compile(r"mid[- ]?level", re.IGNORECASE),
        re.compile(r"\b2-4\s*years?\b", re.IGNORECASE),
        re.compile(r"\b3-5\s*years?\b", re.IGNORECASE),
        re.compile(r"\b2\+\s*years?\b", re.IGNORECASE),
        re.compile(r"\b3\+\s*years?\b", re.IGNORECASE),
    ],
    SeniorityLevel.SENIOR: [
        re.compile(r"senior", re.IGNORECASE),
        re.compile(r"sr\.", re.IGNORECASE),
        re.compile(r"\b5\+\s*years?\b", re.IGNORECASE),
        re.compile(r"\b5-7\s*years?\b", re.IGNORECASE),
        re.compile(r"\b6\+\s*years?\b", re.IGNORECASE),
        re.compile(r"\b7\+\s*years?\b", re.IGNORECASE),
        re.compile(r"extensive\s+experience", re.IGNORECASE),
    ],
    SeniorityLevel.LEAD: [
        re.compile(r"\blead\b", re.IGNORECASE),
        re.compile(r"principal", re.IGNORECASE),
        re.compile(r"staff", re.IGNORECASE),
        re.compile(r"\b8\+\s*years?\b", re.IGNORECASE),
        re.compile(r"\b10\+\s*years?\b", re.IGNORECASE),
    ],
    SeniorityLevel.EXECUTIVE: [
        re.compile(r"director", re.IGNORECASE),
        re.compile(r"\bvp\b", re.IGNORECASE),
        re.compile(r"vice\s+president", re.IGNORECASE),
        re.compile(r"head\s+of", re.IGNORECASE),
        re.compile(r"\b15\+\s*years?\b", re.IGNORECASE),
        re.compile(r"c-level", re.IGNORECASE),
        re.compile(r"chief", re.IGNORECASE),
    ],
}

REQUIRED_PATTERNS: list[re.Pattern] = [
    re.compile(r"must\s+have", re.IGNORECASE),
    re.compile(r"required", re.IGNORECASE),
    re.compile(r"mandatory", re.IGNORECASE),
    re.compile(r"essential", re.IGNORECASE),
    re.compile(r"minimum", re.IGNORECASE),
    re.compile(r"at\s+least", re.IGNORECASE),
]

PREFERRED_PATTERNS: list[re.Pattern] = [
    re.compile(r"nice\s+to\s+have", re.IGNORECASE),
    re.compile(r"preferred", re.IGNORECASE),
    re.compile(r"bonus", re.IGNORECASE),
    re.compile(r"ideally", re.IGNORECASE),
    re.compile(r"\bplus\b", re.IGNORECASE),
    re.compile(r"advantage", re.IGNORECASE),
    re.compile(r"desirable", re.IGNORECASE),
]

# \b does not work around names ending in '+' or '#', so the edges are
# spelled out as "no word character on either side".
_EDGE_BEFORE = r"(?<![A-Za-z0-9_])"
_EDGE_AFTER = r"(?![A-Za-z0-9_])"


def _alternation(*names: str) -> re.Pattern:
    return re.compile(_EDGE_BEFORE + "(" + "|".join(names) + ")" + _EDGE_AFTER, re.IGNORECASE)


TECH_SKILL_PATTERNS: list[re.Pattern] = [
    _alternation(r"JavaScript", r"TypeScript", r"Python", r"Java", r"C\+\+", r"C#", r"Go",
                 r"Rust", r"Ruby", r"PHP", r"Swift", r"Kotlin"),
    _alternation(r"React", r"Angular", r"Vue", r"Next\.?js", r"Node\.?js", r"Express",
                 r"Django", r"Flask", r"Spring", r"Rails"),
    _alternation(r"AWS", r"Azure", r"GCP", r"Google Cloud", r"Kubernetes", r"Docker", r"Terraform"),
    _alternation(r"PostgreSQL", r"MySQL", r"MongoDB", r"Redis", r"Elasticsearch", r"DynamoDB"),
    _alternation(r"Git", r"CI/CD", r"Jenkins", r"GitHub Actions", r"CircleCI"),
    _alternation(r"REST", r"GraphQL", r"gRPC", r"API", r"Microservices"),
    _alternation(r"Agile", r"Scrum", r"Kanban", r"JIRA"),
]

BULLET_LINE = re.compile(r"^(?:[-*•]|\d+\.)\s")
BULLET_MARKER = re.compile(r"^(?:[-*•]|\d+\.)\s*")


def find_tech_skills(text: str) -> list[str]:
    """
    Scan text for technology names.

    Returns the matched substrings as written, deduplicated by exact text,
    in pattern-table order then order of appearance.
    """
    found: list[str] = []
    if not text:
        return found

    seen = set()
    for pattern in TECH_SKILL_PATTERNS:
        for match in pattern.finditer(text):
            name = match.group(1)
            if name not in seen:
                seen.add(name)
                found.append(name)

    return found


def skill_mention_pattern(skill: str) -> re.Pattern:
    """Case-insensitive whole-word pattern for one skill name."""
    return re.compile(_EDGE_BEFORE + re.escape(skill) + _EDGE_AFTER, re.IGNORECASE)
