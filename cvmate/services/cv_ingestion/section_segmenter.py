"""Heuristic CV section segmentation.

Used as the per-field fallback when the AI profile omits something. Records
are positional (first line = title, second = organisation, third = duration)
which is a best-effort guess, not a guarantee.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from . import vocabulary as vocab


def empty_sections() -> Dict[str, Any]:
    return {
        "summary": "",
        "experience": [],
        "education": [],
        "skills": [],
        "languages": [],
        "certifications": [],
    }


def detect_section_type(line: str) -> Optional[str]:
    """Return the section type whose keyword occurs in ``line`` (first match wins)."""
    folded = vocab.fold_case(line)
    for section_type, keywords in vocab.SEGMENT_KEYWORDS:
        if any(keyword in folded for keyword in keywords):
            return section_type
    return None


def extract_sections(text: str) -> Dict[str, Any]:
    sections = empty_sections()
    current_section: Optional[str] = None
    buffer: List[str] = []

    for raw_line in (text or "").split("\n"):
        line = raw_line.strip()
        section_type = detect_section_type(line) if line else None
        if section_type:
            if current_section:
                _flush_section(sections, current_section, buffer)
            current_section = section_type
            buffer = []
        elif line:
            buffer.append(line)

    if current_section:
        _flush_section(sections, current_section, buffer)
    return sections


def _flush_section(sections: Dict[str, Any], section_type: str, content: List[str]) -> None:
    if section_type == "summary":
        sections["summary"] = " ".join(content).strip()
    elif section_type == "experience":
        if content:
            sections["experience"].append(
                {
                    "title": _at(content, 0),
                    "company": _at(content, 1),
                    "duration": _at(content, 2),
                    "description": " ".join(content[3:]).strip(),
                }
            )
    elif section_type == "education":
        if content:
            sections["education"].append(
                {
                    "degree": _at(content, 0),
                    "institution": _at(content, 1),
                    "year": _at(content, 2),
                }
            )
    elif section_type == "skills":
        sections["skills"] = [item for item in content if item.strip()]
    elif section_type == "languages":
        for entry in content:
            parts = re.split(r"[(),]", entry)
            language = parts[0].strip() if parts and parts[0].strip() else entry
            level = parts[1].strip() if len(parts) > 1 else ""
            sections["languages"].append({"language": language, "level": level})
    elif section_type == "certifications":
        sections["certifications"] = [item for item in content if item.strip()]


def _at(items: List[str], index: int) -> str:
    return items[index] if index < len(items) else ""
