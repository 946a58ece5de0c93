"""
Skills extraction from the skills, experience and summary sections.

Two independent passes run over every line: delimiter-based splitting of
skill lists ("Python, SQL, Docker") and vocabulary matching of well-known
technologies. Results from all sections are merged case-insensitively and
sorted alphabetically.
"""

import logging
import re
from typing import Dict, Iterable, List, Optional

from cv_autofill.core.text_normalization import BULLET_PREFIX_RE, squeeze_spaces

logger = logging.getLogger(__name__)

MIN_SKILL_LENGTH = 2
MAX_SKILL_LENGTH = 50
MAX_SKILL_WORDS = 4
MIN_LETTER_RATIO = 0.5
MAX_LABEL_LENGTH = 30

# ===== VOCABULARIES =====

TECHNICAL_SKILLS = [
    # Web
    "HTML", "CSS", "JavaScript", "TypeScript", "PHP", "ASP.NET", "JSP",
    # Databases
    "MySQL", "PostgreSQL", "MongoDB", "SQLite", "Oracle", "SQL Server", "Redis",
    # Cloud
    "AWS", "Azure", "Google Cloud", "GCP", "Heroku", "DigitalOcean",
    # DevOps
    "Docker", "Kubernetes", "Jenkins", "Git", "GitHub", "GitLab", "CI/CD",
    # Operating systems
    "Linux", "Windows", "macOS", "Ubuntu", "CentOS",
    # Methodologies
    "Agile", "Scrum", "Kanban", "DevOps", "TDD", "BDD",
]

PROGRAMMING_LANGUAGES = [
    "JavaScript", "TypeScript", "Python", "Java", "C++", "C#", "C",
    "Ruby", "PHP", "Swift", "Kotlin", "Go", "Rust", "Scala",
    "R", "MATLAB", "Perl", "Objective-C", "Dart", "Elixir",
    "Haskell", "Clojure", "F#", "VB.NET", "PowerShell", "Bash",
]

FRAMEWORKS = [
    # JavaScript
    "React", "Angular", "Vue.js", "Node.js", "Express", "Next.js", "Nuxt.js",
    "jQuery", "Bootstrap", "Tailwind CSS", "Material-UI", "Ant Design",
    # Python
    "Django", "Flask", "FastAPI", "Pyramid", "Tornado",
    # Java
    "Spring", "Spring Boot", "Hibernate", "Struts",
    # .NET
    ".NET Core", "Entity Framework", "Blazor",
    # Mobile
    "React Native", "Flutter", "Xamarin", "Ionic",
    # Testing
    "Jest", "Mocha", "Jasmine", "Cypress", "Selenium", "JUnit", "pytest",
]

DEVELOPER_TOOLS = [
    # Editors
    "Visual Studio Code", "VS Code", "IntelliJ IDEA", "Eclipse", "Sublime Text",
    "Atom", "Vim", "Emacs", "WebStorm", "PyCharm",
    # Design
    "Photoshop", "Illustrator", "Figma", "Sketch", "Adobe XD", "InVision",
    # Project management
    "Jira", "Trello", "Asana", "Monday.com", "Notion", "Confluence",
    # Communication
    "Slack", "Microsoft Teams", "Discord", "Zoom",
    # Version control
    "SVN", "Mercurial",
    # Database clients
    "phpMyAdmin", "MongoDB Compass", "Robo 3T", "DBeaver",
]

VOCABULARY: List[str] = list(dict.fromkeys(TECHNICAL_SKILLS + PROGRAMMING_LANGUAGES + FRAMEWORKS + DEVELOPER_TOOLS))
CANONICAL_NAMES: Dict[str, str] = {skill.lower(): skill for skill in VOCABULARY}


def _vocabulary_pattern(skill: str) -> re.Pattern:
    # Word-like boundaries that also treat "+", "#" and "." as part of a name,
    # so "C" does not fire inside "C++" or "C#", nor "Java" inside "JavaScript"
    flags = 0 if len(skill) <= 2 else re.IGNORECASE
    return re.compile(rf"(?<![\w+#.]){re.escape(skill)}(?![\w+#]|\.\w)", flags)


VOCABULARY_PATTERNS = [(skill, _vocabulary_pattern(skill)) for skill in VOCABULARY]

# ===== VALIDATION =====

INVALID_SKILLS = {
    "and", "or", "with", "using", "including", "such as", "like",
    "experience", "knowledge", "familiar", "proficient", "expert",
    "years", "year", "months", "month", "level", "basic", "advanced",
    "strong", "excellent", "good", "solid", "extensive", "deep",
}

# Tokens that read as achievement sentences rather than skill names
SENTENCE_START_RE = re.compile(
    r"^(led|managed|achieved|improved|increased|reduced|developed|built|designed|created|"
    r"worked|responsible|collaborated|implemented|mentored|delivered)\b",
    re.IGNORECASE,
)
ARTICLE_RE = re.compile(r"\b(a|an|the)\b", re.IGNORECASE)
# Contact details (email, URLs) that sit in the header block
CONTACT_TOKEN_RE = re.compile(r"@|://|\bwww\.", re.IGNORECASE)

SKILL_LIST_INDICATORS = [
    re.compile(r"^[•·▪▫‣⁃\-*]\s*"),
    re.compile(r",.*,"),
    re.compile(r";.*;"),
    re.compile(r"\|.*\|"),
    re.compile(r"\bskills?\b", re.IGNORECASE),
    re.compile(r"\btechnolog(?:y|ies)\b", re.IGNORECASE),
    re.compile(r"\btools?\b", re.IGNORECASE),
    re.compile(r"\blanguages?\b", re.IGNORECASE),
]

DELIMITER_RE = re.compile(r"[,;|]")
BRACKETS_RE = re.compile(r"[()\[\]{}]")
LABEL_RE = re.compile(rf"^([^,;|:]{{1,{MAX_LABEL_LENGTH}}}):\s*(?=\S)")


def is_skills_list(line: str) -> bool:
    return any(p.search(line) for p in SKILL_LIST_INDICATORS)


def normalize_skill(token: str) -> str:
    """
    Strip bullets and brackets and collapse whitespace.

    Examples:
        "• Python" -> "Python"
        "(React)" -> "React"
    """
    token = BULLET_PREFIX_RE.sub("", token)
    token = BRACKETS_RE.sub("", token)
    return squeeze_spaces(token).rstrip(".")


def is_valid_skill(skill: str) -> bool:
    if not MIN_SKILL_LENGTH <= len(skill) <= MAX_SKILL_LENGTH:
        return False
    if skill.lower() in INVALID_SKILLS:
        return False
    letters = sum(1 for c in skill if c.isascii() and c.isalpha())
    if letters / len(skill) < MIN_LETTER_RATIO:
        return False
    if len(skill.split()) > MAX_SKILL_WORDS:
        return False
    if SENTENCE_START_RE.match(skill) or ARTICLE_RE.search(skill):
        return False
    if CONTACT_TOKEN_RE.search(skill):
        return False
    return True


def split_skill_list(line: str) -> List[str]:
    """
    Split a delimited skill list into validated, normalized tokens.

    A short leading label is dropped first, so "Languages: Python, Go" gives
    ["Python", "Go"].
    """
    body = BULLET_PREFIX_RE.sub("", line.strip())
    body = LABEL_RE.sub("", body)
    skills = []
    for token in DELIMITER_RE.split(body):
        skill = normalize_skill(token)
        if skill and is_valid_skill(skill):
            skills.append(CANONICAL_NAMES.get(skill.lower(), skill))
    return skills


def match_vocabulary(line: str) -> List[str]:
    return [skill for skill, pattern in VOCABULARY_PATTERNS if pattern.search(line)]


def extract_skills_from_line(line: str, treat_as_list: bool = False) -> List[str]:
    line = line.strip()
    if not line:
        return []
    found = []
    if treat_as_list or is_skills_list(line):
        found.extend(split_skill_list(line))
    found.extend(match_vocabulary(line))
    return found


def merge_skills(groups: Iterable[Iterable[str]]) -> List[str]:
    """
    Merge skill lists case-insensitively and sort alphabetically.

    The vocabulary spelling wins ("javascript" -> "JavaScript"); otherwise the
    first spelling seen is kept.
    """
    merged: Dict[str, str] = {}
    for group in groups:
        for skill in group:
            key = skill.lower()
            if key not in merged:
                merged[key] = CANONICAL_NAMES.get(key, skill)
    return sorted(merged.values(), key=str.lower)


def extract_skills(
    skills_section: Optional[str],
    experience_section: Optional[str] = None,
    summary_section: Optional[str] = None,
    explicit_skills_header: bool = True,
) -> List[str]:
    """
    Skills from the three sources, de-duplicated and sorted.

    Every line of a skills section under an explicit header ("SKILLS") is read
    as a list, even a line holding a single skill. A skills section found only
    through a line containing a synonym, like experience and summary lines,
    contributes lines that look like lists plus vocabulary hits.
    """
    groups = []
    for section, treat_as_list in (
        (skills_section, explicit_skills_header),
        (experience_section, False),
        (summary_section, False),
    ):
        if not section:
            continue
        for line in section.split("\n"):
            groups.append(extract_skills_from_line(line, treat_as_list=treat_as_list))

    skills = merge_skills(groups)
    logger.debug("skills: %d unique", len(skills))
    return skills
