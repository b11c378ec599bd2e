"""
Skill Taxonomy - canonical skill names, aliases and related-skill edges.

The built-in table bootstraps from common tech skills. A SkillTaxonomy is
read-only once constructed, so one instance can be shared across threads.
"""

import re
from typing import Iterable, Optional

from .models import SkillCategory, SkillDefinition


def _skill(name: str, category: str, aliases=(), related=()) -> SkillDefinition:
    return SkillDefinition(
        name=name,
        category=SkillCategory(category),
        aliases=tuple(aliases),
        related_skills=tuple(related),
    )


DEFAULT_SKILLS: tuple[SkillDefinition, ...] = (
    # Programming languages
    _skill("JavaScript", "technical", ["JS", "ECMAScript", "ES6"], ["TypeScript", "Node.js", "React"]),
    _skill("TypeScript", "technical", ["TS"], ["JavaScript", "Node.js", "React"]),
    _skill("Python", "technical", ["Python3", "Py"], ["Django", "Flask", "FastAPI"]),
    _skill("Java", "technical", ["Java8", "Java11", "Java17"], ["Spring", "Maven", "Gradle"]),
    _skill("C#", "technical", ["CSharp", "C Sharp", ".NET"], [".NET", "ASP.NET"]),
    _skill("Go", "technical", ["Golang"], ["Kubernetes", "Docker"]),
    _skill("Rust", "technical", [], ["WebAssembly", "Systems Programming"]),
    _skill("Ruby", "technical", [], ["Rails", "Ruby on Rails"]),
    _skill("PHP", "technical", [], ["Laravel", "WordPress"]),
    _skill("Swift", "technical", [], ["iOS", "Xcode"]),
    _skill("Kotlin", "technical", [], ["Android", "JVM"]),
    _skill("SQL", "technical", ["Structured Query Language"], ["PostgreSQL", "MySQL", "Database"]),

    # Frontend frameworks
    _skill("React", "technical", ["React.js", "ReactJS"], ["JavaScript", "TypeScript", "Next.js"]),
    _skill("Vue", "technical", ["Vue.js", "VueJS"], ["JavaScript", "Nuxt"]),
    _skill("Angular", "technical", ["Angular.js", "AngularJS"], ["TypeScript", "RxJS"]),
    _skill("Next.js", "technical", ["NextJS", "Next"], ["React", "Vercel"]),
    _skill("Svelte", "technical", ["SvelteKit"], ["JavaScript"]),

    # Backend frameworks
    _skill("Node.js", "technical", ["NodeJS", "Node"], ["JavaScript", "Express", "NestJS"]),
    _skill("Express", "technical", ["Express.js", "ExpressJS"], ["Node.js"]),
    _skill("Django", "technical", [], ["Python"]),
    _skill("Flask", "technical", [], ["Python"]),
    _skill("FastAPI", "technical", [], ["Python"]),
    _skill("Spring", "technical", ["Spring Boot", "Spring Framework"], ["Java"]),
    _skill("Rails", "technical", ["Ruby on Rails", "RoR"], ["Ruby"]),

    # Databases
    _skill("PostgreSQL", "technical", ["Postgres", "PSQL"], ["SQL", "Database"]),
    _skill("MySQL", "technical", [], ["SQL", "Database"]),
    _skill("MongoDB", "technical", ["Mongo"], ["NoSQL", "Database"]),
    _skill("Redis", "technical", [], ["Caching", "Database"]),
    _skill("Elasticsearch", "technical", ["ES", "Elastic"], ["Search", "Database"]),
    _skill("DynamoDB", "technical", [], ["AWS", "NoSQL"]),

    # Cloud & DevOps
    _skill("AWS", "technical", ["Amazon Web Services"], ["Cloud", "EC2", "S3", "Lambda"]),
    _skill("Azure", "technical", ["Microsoft Azure"], ["Cloud"]),
    _skill("GCP", "technical", ["Google Cloud", "Google Cloud Platform"], ["Cloud"]),
    _skill("Docker", "tool", [], ["Containers", "Kubernetes"]),
    _skill("Kubernetes", "tool", ["K8s"], ["Docker", "DevOps"]),
    _skill("Terraform", "tool", [], ["Infrastructure as Code", "DevOps"]),
    _skill("CI/CD", "technical", ["Continuous Integration", "Continuous Deployment"],
           ["DevOps", "Jenkins", "GitHub Actions"]),
    _skill("Jenkins", "tool", [], ["CI/CD", "DevOps"]),
    _skill("GitHub Actions", "tool", [], ["CI/CD", "GitHub"]),

    # Tools
    _skill("Git", "tool", ["GitHub", "GitLab", "Bitbucket"], ["Version Control"]),
    _skill("JIRA", "tool", [], ["Agile", "Project Management"]),
    _skill("Figma", "tool", [], ["Design", "UI/UX"]),

    # Soft skills
    _skill("Leadership", "soft", ["Team Leadership", "People Management"], ["Management", "Communication"]),
    _skill("Communication", "soft", ["Written Communication", "Verbal Communication"], ["Collaboration"]),
    _skill("Problem Solving", "soft", ["Problem-Solving", "Analytical Skills"], ["Critical Thinking"]),
    _skill("Teamwork", "soft", ["Collaboration", "Team Player"], ["Communication"]),
    _skill("Agile", "soft", ["Agile Methodology", "Agile Development"], ["Scrum", "Kanban"]),
    _skill("Scrum", "soft", ["Scrum Master"], ["Agile"]),
    _skill("Mentoring", "soft", ["Coaching", "Teaching"], ["Leadership"]),

    # Domains
    _skill("Machine Learning", "domain", ["ML", "AI", "Artificial Intelligence"],
           ["Python", "TensorFlow", "PyTorch"]),
    _skill("Data Science", "domain", ["Data Analytics"], ["Python", "SQL", "Machine Learning"]),
    _skill("DevOps", "domain", ["Site Reliability", "SRE"], ["CI/CD", "Kubernetes", "Docker"]),
    _skill("Security", "domain", ["Cybersecurity", "InfoSec"], ["Authentication", "Encryption"]),
    _skill("API Design", "domain", ["REST API", "API Development"], ["REST", "GraphQL"]),

    # Certifications
    _skill("AWS Certified", "certification", ["AWS Certification"], ["AWS"]),
    _skill("PMP", "certification", ["Project Management Professional"], ["Project Management"]),
    _skill("Scrum Master Certified", "certification", ["CSM", "PSM"], ["Scrum", "Agile"]),
)


def slugify(name: str) -> str:
    """Lower-case a skill name and replace every non-alphanumeric with '-'."""
    return re.sub(r"[^a-z0-9]", "-", name.lower())


class SkillTaxonomy:
    """Canonicalizes free-text skill names and exposes relatedness."""

    def __init__(self, definitions: Iterable[SkillDefinition] = DEFAULT_SKILLS):
        self.definitions: tuple[SkillDefinition, ...] = tuple(definitions)

        self._by_name: dict[str, SkillDefinition] = {}
        self._by_alias: dict[str, SkillDefinition] = {}
        self._by_slug: dict[str, SkillDefinition] = {}

        for definition in self.definitions:
            self._by_name.setdefault(definition.name.lower(), definition)
            self._by_slug.setdefault(slugify(definition.name), definition)

        for definition in self.definitions:
            for alias in definition.aliases:
                self._by_alias.setdefault(alias.lower(), definition)
                self._by_slug.setdefault(slugify(alias), definition)

    def __len__(self) -> int:
        return len(self.definitions)

    def find_skill(self, name: str) -> Optional[SkillDefinition]:
        """Look a skill up by canonical name first, then by alias."""
        if not name:
            return None
        key = name.strip().lower()
        return self._by_name.get(key) or self._by_alias.get(key)

    def normalize_skill_name(self, name: str) -> str:
        """Return the canonical name, or the trimmed input for unknown skills."""
        if name is None:
            return ""
        skill = self.find_skill(name)
        return skill.name if skill else name.strip()

    def get_related_skills(self, name: str) -> list[str]:
        """Return the related-skill list for a skill, or an empty list."""
        skill = self.find_skill(name)
        return list(skill.related_skills) if skill else []

    def find_by_slug(self, slug: str) -> Optional[SkillDefinition]:
        """Resolve a slugified name, as embedded in gap question ids."""
        return self._by_slug.get(slug.lower()) if slug else None


DEFAULT_TAXONOMY = SkillTaxonomy()
