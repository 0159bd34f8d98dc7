"""Per-field reconciliation of the AI profile with heuristic fallbacks.

AI values always win when present and non-empty; heuristic values only fill
fields the AI left empty. Adding a profile field is one entry in MERGE_FIELDS.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

SKILL_CATEGORIES = ("technical", "soft", "programming", "tools", "other")


def empty_skills() -> Dict[str, list]:
    return {category: [] for category in SKILL_CATEGORIES}


def skills_from_list(skills: Any) -> Optional[Dict[str, list]]:
    """Heuristic skills are a flat list; file them under ``technical``."""
    if not skills:
        return None
    result = empty_skills()
    result["technical"] = list(skills)
    return result


@dataclass(frozen=True)
class MergeField:
    name: str
    heuristic_key: Optional[str]
    default: Callable[[], Any]
    adapt_heuristic: Optional[Callable[[Any], Any]] = None


MERGE_FIELDS: Tuple[MergeField, ...] = (
    MergeField("personalInfo", "contactInfo", dict),
    MergeField("summary", "summary", str),
    MergeField("experience", "experience", list),
    MergeField("education", "education", list),
    MergeField("skills", "skills", empty_skills, skills_from_list),
    MergeField("languages", "languages", list),
    MergeField("certifications", "certifications", list),
    MergeField("projects", None, list),
    MergeField("awards", None, list),
    MergeField("volunteer", None, list),
    MergeField("references", None, list),
)


def is_empty(value: Any) -> bool:
    """None, blank strings and containers holding only empty values are empty."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, Mapping):
        return all(is_empty(v) for v in value.values())
    if isinstance(value, (list, tuple, set)):
        return len(value) == 0
    return False


def merge_profiles(
    ai_profile: Optional[Mapping[str, Any]],
    heuristic: Mapping[str, Any],
    *,
    keywords: Any = None,
    metadata: Any = None,
) -> Dict[str, Any]:
    ai_profile = ai_profile or {}
    merged: Dict[str, Any] = {}
    for field in MERGE_FIELDS:
        merged[field.name] = _resolve(field, ai_profile, heuristic)

    merged["keywords"] = keywords if keywords is not None else {}
    merged["metadata"] = metadata if metadata is not None else {}
    return merged


def _resolve(field: MergeField, ai_profile: Mapping[str, Any], heuristic: Mapping[str, Any]) -> Any:
    ai_value = ai_profile.get(field.name)
    if not is_empty(ai_value):
        return ai_value

    if field.heuristic_key:
        fallback = heuristic.get(field.heuristic_key)
        if field.adapt_heuristic is not None:
            fallback = field.adapt_heuristic(fallback)
        if not is_empty(fallback):
            return fallback

    return field.default()
