from __future__ import annotations

from job_coverage.core.models import SkillCategory, SkillDefinition
from job_coverage.core.taxonomy import DEFAULT_TAXONOMY, SkillTaxonomy, slugify


def test_find_skill_by_name_and_alias():
    assert DEFAULT_TAXONOMY.find_skill("react").name == "React"
    assert DEFAULT_TAXONOMY.find_skill("  ReactJS ").name == "React"
    assert DEFAULT_TAXONOMY.find_skill("K8s").name == "Kubernetes"
    assert DEFAULT_TAXONOMY.find_skill("Cobol") is None
    assert DEFAULT_TAXONOMY.find_skill("") is None


def test_normalize_unknown_returns_trimmed_input():
    assert DEFAULT_TAXONOMY.normalize_skill_name(" golang ") == "Go"
    assert DEFAULT_TAXONOMY.normalize_skill_name("  Cobol  ") == "Cobol"
    assert DEFAULT_TAXONOMY.normalize_skill_name(None) == ""


def test_related_skills():
    assert "Docker" in DEFAULT_TAXONOMY.get_related_skills("Kubernetes")
    assert DEFAULT_TAXONOMY.get_related_skills("unknown skill") == []


def test_related_skills_returns_a_copy():
    related = DEFAULT_TAXONOMY.get_related_skills("Kubernetes")
    related.append("Nonsense")
    assert "Nonsense" not in DEFAULT_TAXONOMY.get_related_skills("Kubernetes")


def test_names_take_precedence_over_aliases():
    taxonomy = SkillTaxonomy([
        SkillDefinition("Alpha", SkillCategory.TECHNICAL, aliases=("Beta",)),
        SkillDefinition("Beta", SkillCategory.TOOL),
    ])
    assert taxonomy.find_skill("beta").name == "Beta"


def test_find_by_slug():
    assert slugify("C#") == "c-"
    assert DEFAULT_TAXONOMY.find_by_slug(slugify("C#")).name == "C#"
    assert DEFAULT_TAXONOMY.find_by_slug("node-js").name == "Node.js"
    assert DEFAULT_TAXONOMY.find_by_slug("not-a-skill") is None


def test_default_table_size():
    assert len(DEFAULT_TAXONOMY) >= 50
