"""Line-classification state machine that renders CV text as markdown.

Each non-empty line is classified by ``classify_line`` into exactly one
``LineKind``; ``convert_to_markdown`` walks the lines, carries a small
``ConverterState`` and emits markdown. The converter never raises and never
drops a line: at worst it over- or under-segments.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import List, Optional, Pattern

from . import vocabulary as vocab


class LineKind(enum.Enum):
    SECTION_HEADER = "section_header"
    EMAIL = "email"
    PHONE = "phone"
    LINKEDIN = "linkedin"
    GITHUB = "github"
    WEBSITE = "website"
    DATED_ENTRY = "dated_entry"
    BULLET = "bullet"
    PROSE = "prose"

    @property
    def is_contact(self) -> bool:
        return self in CONTACT_KINDS


CONTACT_KINDS = frozenset(
    {LineKind.EMAIL, LineKind.PHONE, LineKind.LINKEDIN, LineKind.GITHUB, LineKind.WEBSITE}
)

CONTACT_LABELS = {
    LineKind.EMAIL: "Email",
    LineKind.PHONE: "Telefon",
    LineKind.LINKEDIN: "LinkedIn",
    LineKind.GITHUB: "GitHub",
    LineKind.WEBSITE: "Web",
}

_SECTION_PATTERNS: List[Pattern] = [
    re.compile(p, re.IGNORECASE) for p in vocab.SECTION_HEADER_PATTERNS.values()
]
_DATE_PATTERNS: List[Pattern] = [
    re.compile(p, re.IGNORECASE) for p in vocab.date_patterns().values()
]
_BULLET_PATTERNS: List[Pattern] = [re.compile(p) for p in vocab.BULLET_PATTERNS]
_EXPERIENCE_PATTERN = re.compile(vocab.EXPERIENCE_SECTION_PATTERN, re.IGNORECASE)
_PHONE_LINE = re.compile(r"^[+()\d\s\-.]+$")
_WEBSITE_LINE = re.compile(r"^(www\.|https?://)")


@dataclass
class ConverterState:
    current_section: str = ""
    previous_line_was_header: bool = False
    in_bullet_list: bool = False

    @property
    def in_experience_section(self) -> bool:
        return bool(self.current_section) and bool(
            _EXPERIENCE_PATTERN.search(self.current_section)
        )


def is_section_header(line: str) -> bool:
    if len(line) >= vocab.SECTION_HEADER_MAX_LENGTH:
        return False
    folded = vocab.fold_case(line)
    return any(pattern.search(folded) for pattern in _SECTION_PATTERNS)


def is_dated_entry(line: str) -> bool:
    return any(pattern.search(line) for pattern in _DATE_PATTERNS)


def bullet_marker(line: str) -> Optional[Pattern]:
    for pattern in _BULLET_PATTERNS:
        if pattern.search(line):
            return pattern
    return None


def strip_bullet(line: str) -> str:
    pattern = bullet_marker(line)
    if pattern is None:
        return line
    return pattern.sub("", line, count=1)


def classify_line(line: str, state: Optional[ConverterState] = None) -> LineKind:
    """Classify one trimmed line. Pure; ``state`` is accepted for callers that
    thread it through, the kind itself only depends on the line."""
    if is_section_header(line):
        return LineKind.SECTION_HEADER

    lower = vocab.fold_case(line)
    if "@" in line and "." in line:
        return LineKind.EMAIL
    dated = is_dated_entry(line)
    if not dated and _PHONE_LINE.match(line) and 10 <= len(line) <= 20:
        return LineKind.PHONE
    if "linkedin.com" in lower:
        return LineKind.LINKEDIN
    if "github.com" in lower:
        return LineKind.GITHUB
    if _WEBSITE_LINE.match(lower):
        return LineKind.WEBSITE
    if dated and bullet_marker(line) is None:
        return LineKind.DATED_ENTRY
    if bullet_marker(line) is not None:
        return LineKind.BULLET
    return LineKind.PROSE


def _close_bullet_list(parts: List[str], state: ConverterState) -> None:
    if state.in_bullet_list:
        parts.append("\n")
        state.in_bullet_list = False


def convert_to_markdown(text: str) -> str:
    lines = [line.strip() for line in (text or "").split("\n")]
    lines = [line for line in lines if line]

    state = ConverterState()
    parts: List[str] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        next_line = lines[i + 1] if i + 1 < len(lines) else ""
        kind = classify_line(line, state)

        if kind is LineKind.SECTION_HEADER:
            _close_bullet_list(parts, state)
            state.current_section = line
            parts.append(f"\n## {line}\n\n")
            state.previous_line_was_header = True
        elif kind.is_contact:
            parts.append(f"**{CONTACT_LABELS[kind]}:** {line}\n")
        elif (
            kind is LineKind.DATED_ENTRY
            and state.current_section
            and next_line
            and bullet_marker(next_line) is None
            and not is_section_header(next_line)
        ):
            _close_bullet_list(parts, state)
            parts.append(f"\n### {next_line} | {line}\n")
            i += 1
            state.previous_line_was_header = True
        elif kind is LineKind.BULLET:
            parts.append(f"- {strip_bullet(line)}\n")
            state.in_bullet_list = True
            state.previous_line_was_header = False
        elif state.previous_line_was_header:
            _close_bullet_list(parts, state)
            parts.append(f"{line}\n\n")
            state.previous_line_was_header = False
        elif kind is not LineKind.DATED_ENTRY and state.in_experience_section:
            # Unlabelled detail lines under Experience are usually achievements
            parts.append(f"- {line}\n")
            state.in_bullet_list = True
        else:
            _close_bullet_list(parts, state)
            parts.append(f"{line}\n\n")
            state.previous_line_was_header = False
        i += 1

    markdown = "".join(parts).strip()
    return re.sub(r"\n{3,}", "\n\n", markdown)
