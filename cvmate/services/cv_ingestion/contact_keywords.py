"""Contact, keyword and document-metadata extraction.

All functions here are pattern/frequency heuristics over normalized text. They
never raise; missing information is simply absent from the result.
"""

from __future__ import annotations

import logging
import math
import re
from collections import Counter
from typing import Dict, List, Optional

import phonenumbers
from phonenumbers import NumberParseException

from . import vocabulary as vocab

logger = logging.getLogger(__name__)

EMAIL_PATTERN = r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"
# Optional +CC prefix, then an area/operator block and 3-2-2 digit groups
# (Turkish mobile and NANP numbers both fit).
DEFAULT_PHONE_PATTERN = (
    r"(?<![\w+])(?:\+\d{1,3}[\s\-.]?)?\(?\d{2,4}\)?[\s\-.]?\d{3}[\s\-.]?\d{2}[\s\-.]?\d{2}(?!\d)"
)
LINKEDIN_PATTERN = r"(?:linkedin\.com/in/|linkedin\.com/profile/view\?id=)[A-Za-z0-9\-._]+"
GITHUB_PATTERN = r"github\.com/[A-Za-z0-9\-._]+"

_NAME_WORD = re.compile(vocab.NAME_WORD_PATTERN)


def extract_contact_information(
    text: str, phone_pattern: Optional[str] = None
) -> Dict[str, str]:
    """First email, phone, LinkedIn and GitHub match plus a best-guess full name."""
    text = text or ""
    contact: Dict[str, str] = {}

    email = re.search(EMAIL_PATTERN, text)
    if email:
        contact["email"] = email.group(0)

    phone = re.search(phone_pattern or DEFAULT_PHONE_PATTERN, text)
    if phone:
        contact["phone"] = phone.group(0).strip()
        international = format_international_phone(contact["phone"])
        if international:
            contact["phoneInternational"] = international

    linkedin = re.search(LINKEDIN_PATTERN, text, re.IGNORECASE)
    if linkedin:
        contact["linkedin"] = linkedin.group(0)

    github = re.search(GITHUB_PATTERN, text, re.IGNORECASE)
    if github:
        contact["github"] = github.group(0)

    full_name = guess_full_name(text)
    if full_name:
        contact["fullName"] = full_name

    return contact


def guess_full_name(text: str) -> Optional[str]:
    """Latin-script name heuristic over the first few lines of the document."""
    for line in text.split("\n")[: vocab.NAME_SEARCH_LINES]:
        candidate = line.strip()
        if not 5 < len(candidate) < 50:
            continue
        words = candidate.split()
        if 2 <= len(words) <= 4 and all(_NAME_WORD.match(word) for word in words):
            return candidate
    return None


def format_international_phone(raw: str) -> Optional[str]:
    """International format when the number carries a country code and is valid."""
    if not raw.lstrip().startswith("+"):
        return None
    try:
        parsed = phonenumbers.parse(raw, None)
    except NumberParseException:
        return None
    if not phonenumbers.is_valid_number(parsed):
        return None
    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.INTERNATIONAL)


def extract_keywords(text: str) -> Dict[str, List[str]]:
    """Fuzzy vocabulary membership over frequent tokens, per language."""
    tokens = [
        token.strip()
        for token in re.split(vocab.KEYWORD_TOKEN_SEPARATORS, (text or "").lower())
    ]
    frequency = Counter(token for token in tokens if len(token) >= vocab.KEYWORD_MIN_LENGTH)

    technical = [kw for group in vocab.TECHNICAL_KEYWORDS.values() for kw in group]
    common = {
        language: [kw for group in groups.values() for kw in group]
        for language, groups in vocab.COMMON_KEYWORDS.items()
    }

    scores: Dict[str, Counter] = {"english": Counter(), "turkish": Counter()}
    # most_common keeps first-seen order among equal counts
    for word, count in frequency.most_common():
        if count < vocab.KEYWORD_MIN_FREQUENCY and word not in technical:
            continue
        for keyword in technical:
            if _overlaps(word, keyword):
                scores["english"][keyword] += count
        for language, keywords in common.items():
            if any(_overlaps(word, keyword) for keyword in keywords):
                scores[language][word] += count

    return {
        language: [word for word, _ in counter.most_common(vocab.KEYWORD_LIMIT)]
        for language, counter in scores.items()
    }


def _overlaps(word: str, keyword: str) -> bool:
    return keyword in word or word in keyword


def generate_document_metadata(text: str) -> Dict[str, object]:
    text = text or ""
    word_count = len(text.split())
    folded = vocab.fold_case(text)
    sections = [
        name
        for name, keywords in vocab.METADATA_SECTIONS
        if any(keyword in folded for keyword in keywords)
    ]
    return {
        "wordCount": word_count,
        "characterCount": len(text),
        "estimatedReadingTime": math.ceil(word_count / vocab.WORDS_PER_MINUTE),
        "sections": sections,
    }
