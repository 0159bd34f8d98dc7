"""Vocabulary tables shared by the line classifier, segmenter and keyword extractor.

Resumes arrive in Turkish or English, so every table carries both languages.
Keep these as data: the classifiers only compile and iterate over them.
"""

from __future__ import annotations

import re
from typing import Dict, List, Tuple

# ---------------------------------------------------------------------------
# Section headers (markdown converter): anchored at line start, header lines
# must also be shorter than SECTION_HEADER_MAX_LENGTH.
# ---------------------------------------------------------------------------
SECTION_HEADER_MAX_LENGTH = 50

SECTION_HEADER_PATTERNS: Dict[str, str] = {
    "personal_info": r"^(kişisel bilgiler|personal information|iletişim bilgileri|contact info)",
    "summary": r"^(özet|profil özeti|kariyer özeti|profesyonel özet|summary|profile|objective|hakkımda|about)",
    "experience": r"^(deneyim|iş deneyimi|çalışma deneyimi|profesyonel deneyim|experience|work experience|employment)",
    "education": r"^(eğitim|öğrenim|akademik|üniversite|education|academic|university|degree)",
    "skills": r"^(beceriler|yetenekler|yetkinlikler|teknik beceriler|skills|technical skills|competencies)",
    "projects": r"^(projeler|proje deneyimi|projects|project experience)",
    "certifications": r"^(sertifikalar|sertifika|belgeler|certifications|certificates)",
    "languages": r"^(diller|yabancı dil|dil yetkinliği|languages|language skills)",
    "hobbies": r"^(hobiler|ilgi alanları|hobbies|interests)",
    "references": r"^(referanslar|referans|references)",
}

# Detail lines under a section whose header matches this are rendered as bullets.
EXPERIENCE_SECTION_PATTERN = r"deneyim|experience"

# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------
MONTH_NAMES: Dict[str, List[str]] = {
    "turkish": [
        "ocak", "şubat", "mart", "nisan", "mayıs", "haziran",
        "temmuz", "ağustos", "eylül", "ekim", "kasım", "aralık",
    ],
    "english": [
        "january", "february", "march", "april", "may", "june",
        "july", "august", "september", "october", "november", "december",
    ],
}

OPEN_ENDED_MARKERS: Dict[str, List[str]] = {
    "turkish": ["günümüz", "halen", "devam ediyor"],
    "english": ["present", "current", "ongoing", "today"],
}

DATE_RANGE_SEPARATORS = "-–—"

# ---------------------------------------------------------------------------
# Bullets: (pattern that recognises the marker, needs trailing whitespace)
# ---------------------------------------------------------------------------
BULLET_GLYPHS = "•·▪▫◦‣⁃"

BULLET_PATTERNS: Tuple[str, ...] = (
    rf"^[{BULLET_GLYPHS}]\s*",
    r"^[-*]\s+",
    r"^\d+\.\s+",
    r"^[a-zA-Z]\)\s+",
)

# ---------------------------------------------------------------------------
# Heuristic segmenter: ordered (section type, substrings). First hit wins.
# ---------------------------------------------------------------------------
SEGMENT_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("summary", ("özet", "summary", "profil")),
    ("experience", ("deneyim", "experience", "iş", "work")),
    ("education", ("eğitim", "education", "öğrenim")),
    ("skills", ("beceri", "skill", "yetenek")),
    ("languages", ("dil", "language")),
    ("certifications", ("sertifika", "certificate")),
)

# Document metadata: (display name, substrings)
METADATA_SECTIONS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("Summary", ("özet", "summary")),
    ("Experience", ("deneyim", "experience")),
    ("Education", ("eğitim", "education")),
    ("Skills", ("beceri", "skill")),
)

# ---------------------------------------------------------------------------
# Keywords
# ---------------------------------------------------------------------------
TECHNICAL_KEYWORDS: Dict[str, List[str]] = {
    "programming": [
        "javascript", "typescript", "python", "java", "c#", "c++", "php",
        "ruby", "go", "swift", "kotlin", "react", "angular", "vue",
        "node.js", "express", "django", "flask", "spring", ".net", "laravel",
    ],
    "database": [
        "sql", "mysql", "postgresql", "mongodb", "redis", "oracle",
        "elasticsearch", "cassandra", "dynamodb",
    ],
    "cloud": ["aws", "azure", "gcp", "docker", "kubernetes", "jenkins", "ci/cd", "devops"],
    "tools": ["git", "github", "gitlab", "jira", "confluence", "slack", "agile", "scrum", "kanban"],
}

COMMON_KEYWORDS: Dict[str, Dict[str, List[str]]] = {
    "turkish": {
        "skills": [
            "deneyim", "proje", "geliştirme", "yönetim", "analiz", "tasarım",
            "yazılım", "veritabanı", "web", "mobil", "sistem", "network",
            "güvenlik", "test", "kalite",
        ],
        "roles": [
            "uzman", "müdür", "yönetici", "geliştirici", "analist", "danışman",
            "koordinatör", "sorumlu", "asistan", "stajyer",
        ],
        "business": [
            "satış", "pazarlama", "müşteri", "hizmet", "operasyon", "strateji",
            "planlama", "bütçe", "rapor", "sunum",
        ],
    },
    "english": {
        "skills": [
            "experience", "project", "development", "management", "analysis",
            "design", "software", "database", "web", "mobile", "system",
            "network", "security", "testing", "quality",
        ],
        "roles": [
            "specialist", "manager", "developer", "analyst", "consultant",
            "coordinator", "assistant", "intern", "engineer", "architect",
        ],
        "business": [
            "sales", "marketing", "customer", "service", "operations", "strategy",
            "planning", "budget", "report", "presentation",
        ],
    },
}

KEYWORD_TOKEN_SEPARATORS = r"[\s,;.\-()/\[\]]+"
KEYWORD_MIN_LENGTH = 3
KEYWORD_MIN_FREQUENCY = 2
KEYWORD_LIMIT = 30

# ---------------------------------------------------------------------------
# Contact details
# ---------------------------------------------------------------------------
NAME_WORD_PATTERN = r"^[A-ZÇĞİÖŞÜ][a-zçğıöşü]*\.?$"
NAME_SEARCH_LINES = 5

WORDS_PER_MINUTE = 200


def fold_case(text: str) -> str:
    """Lower-case that keeps Turkish dotted capital I matching 'i'."""
    return text.replace("İ", "i").lower()


def _alternation(words) -> str:
    return "|".join(re.escape(word) for word in words)


def month_alternation() -> str:
    return _alternation(MONTH_NAMES["turkish"] + MONTH_NAMES["english"])


def open_ended_alternation() -> str:
    return _alternation(OPEN_ENDED_MARKERS["turkish"] + OPEN_ENDED_MARKERS["english"])


def date_patterns() -> Dict[str, str]:
    """Date-range, open-ended and single-date patterns built from the month tables."""
    months = month_alternation()
    seps = DATE_RANGE_SEPARATORS
    return {
        "date_range": rf"^(?:{months})?\s*\d{{4}}\s*[{seps}]\s*(?:{months})?\s*\d{{4}}$",
        "current_date": rf"^(?:{months})?\s*\d{{4}}\s*[{seps}]\s*(?:{open_ended_alternation()})",
        "single_date": rf"^(?:{months})?\s*\d{{4}}$",
    }
