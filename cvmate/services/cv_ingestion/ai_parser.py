"""AI-assisted CV parsing.

Asks the chat model for a JSON profile, validates it leniently against the
profile models and retries overload errors through ``with_retry``.
"""

from __future__ import annotations

import json
import logging
import random
import re
import time
from typing import Any, Callable, Dict, List, Optional

import openai
from langchain_core.prompts import ChatPromptTemplate
from pydantic import BaseModel, Field, ValidationError, model_validator

from .config import AiParserSettings
from .errors import ConfigurationError, ParsingFailure, ServiceUnavailable
from .retry import ErrorClass, RetryOutcome, with_retry

logger = logging.getLogger(__name__)

AUTH_STATUS_CODES = {401, 403}
OVERLOAD_STATUS_CODES = {429, 500, 502, 503, 504, 529}


# Pydantic models for the structured profile
class ProfileModel(BaseModel):
    """Lenient base: nulls fall back to field defaults, numbers become strings."""

    class Config:
        extra = "allow"
        coerce_numbers_to_str = True

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return {
            key: [item for item in value if item is not None] if isinstance(value, list) else value
            for key, value in data.items()
            if value is not None
        }


class PersonalInfo(ProfileModel):
    fullName: Optional[str] = ""
    email: Optional[str] = ""
    phone: Optional[str] = ""
    address: Optional[str] = ""
    linkedin: Optional[str] = ""
    github: Optional[str] = ""
    website: Optional[str] = ""
    other: Dict[str, Any] = Field(default_factory=dict)


class ExperienceEntry(ProfileModel):
    company: Optional[str] = ""
    position: Optional[str] = ""
    startDate: Optional[Any] = ""
    endDate: Optional[Any] = ""
    isCurrent: bool = False
    location: Optional[str] = ""
    responsibilities: List[str] = Field(default_factory=list)
    achievements: List[str] = Field(default_factory=list)


class EducationEntry(ProfileModel):
    institution: Optional[str] = ""
    degree: Optional[str] = ""
    field: Optional[str] = ""
    startDate: Optional[Any] = ""
    endDate: Optional[Any] = ""
    gpa: Optional[Any] = ""
    location: Optional[str] = ""


class SkillSet(ProfileModel):
    technical: List[str] = Field(default_factory=list)
    soft: List[str] = Field(default_factory=list)
    programming: List[str] = Field(default_factory=list)
    tools: List[str] = Field(default_factory=list)
    other: List[str] = Field(default_factory=list)


class LanguageEntry(ProfileModel):
    language: Optional[str] = ""
    level: Optional[str] = ""


class CertificationEntry(ProfileModel):
    name: Optional[str] = ""
    issuer: Optional[str] = ""
    date: Optional[Any] = ""
    credentialId: Optional[str] = ""


class ProjectEntry(ProfileModel):
    name: Optional[str] = ""
    description: Optional[str] = ""
    technologies: List[str] = Field(default_factory=list)
    url: Optional[str] = ""


class CvProfile(ProfileModel):
    """Complete structured profile returned by the extraction model."""

    personalInfo: PersonalInfo = Field(default_factory=PersonalInfo)
    summary: Optional[str] = ""
    experience: List[ExperienceEntry] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)
    skills: SkillSet = Field(default_factory=SkillSet)
    languages: List[LanguageEntry] = Field(default_factory=list)
    certifications: List[CertificationEntry] = Field(default_factory=list)
    projects: List[ProjectEntry] = Field(default_factory=list)
    awards: List[Any] = Field(default_factory=list)
    volunteer: List[Any] = Field(default_factory=list)
    references: List[Any] = Field(default_factory=list)


CV_PARSE_SYSTEM_PROMPT = """You are a resume parser. Analyze the CV text and extract every piece of
information you can find, even if the formatting is poor or inconsistent.
Return ONLY a valid JSON object (no markdown, no explanation) with exactly these keys:
{{
  "personalInfo": {{"fullName": "", "email": "", "phone": "", "address": "",
                   "linkedin": "", "github": "", "website": "", "other": {{}}}},
  "summary": "",
  "experience": [{{"company": "", "position": "", "startDate": "", "endDate": "",
                  "isCurrent": false, "location": "", "responsibilities": [], "achievements": []}}],
  "education": [{{"institution": "", "degree": "", "field": "", "startDate": "",
                 "endDate": "", "gpa": "", "location": ""}}],
  "skills": {{"technical": [], "soft": [], "programming": [], "tools": [], "other": []}},
  "languages": [{{"language": "", "level": ""}}],
  "certifications": [{{"name": "", "issuer": "", "date": "", "credentialId": ""}}],
  "projects": [{{"name": "", "description": "", "technologies": [], "url": ""}}],
  "awards": [],
  "volunteer": [],
  "references": []
}}
Keep the CV's original language for free-text values. Use empty strings or
empty arrays for anything the CV does not mention."""


def classify_ai_error(exc: BaseException) -> ErrorClass:
    """Overload-type failures are retried; everything else is final."""
    if _is_auth_error(exc):
        return ErrorClass.FATAL
    if _is_overload_error(exc):
        return ErrorClass.TRANSIENT
    return ErrorClass.FATAL


def _status_code(exc: BaseException) -> Optional[int]:
    status = getattr(exc, "status_code", None) or getattr(exc, "status", None)
    return status if isinstance(status, int) else None


def _is_auth_error(exc: BaseException) -> bool:
    if isinstance(exc, ConfigurationError):
        return True
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return True
    if _status_code(exc) in AUTH_STATUS_CODES:
        return True
    message = str(exc).lower()
    return "authentication" in message or "api key" in message


def _is_overload_error(exc: BaseException) -> bool:
    if isinstance(
        exc,
        (
            openai.RateLimitError,
            openai.InternalServerError,
            openai.APIConnectionError,
        ),
    ):
        return True
    if _status_code(exc) in OVERLOAD_STATUS_CODES:
        return True
    return "overloaded" in str(exc).lower()


def decode_profile(content: str) -> CvProfile:
    """Strip markdown fences, decode JSON and validate it as a ``CvProfile``."""
    cleaned = re.sub(r"```(?:json)?\s*", "", content or "").strip()
    if not cleaned:
        raise ParsingFailure("AI service returned an empty response")
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        start, end = cleaned.find("{"), cleaned.rfind("}")
        if start == -1 or end <= start:
            raise ParsingFailure("AI response is not valid JSON")
        try:
            data = json.loads(cleaned[start : end + 1])
        except json.JSONDecodeError as exc:
            raise ParsingFailure(f"AI response is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ParsingFailure("AI response JSON is not an object")
    try:
        return CvProfile.model_validate(data)
    except ValidationError as exc:
        raise ParsingFailure(f"AI response does not match the CV schema: {exc}") from exc


class AiCvParser:
    """Structured CV extraction through the chat model, with retry/backoff.

    ``llm`` may be any LangChain runnable; when omitted a ``ChatOpenAI`` client
    is created on first use so a missing API key only fails the parse, not
    application start-up.
    """

    def __init__(
        self,
        settings: Optional[AiParserSettings] = None,
        llm: Any = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
        jitter: Optional[Callable[[], float]] = None,
    ):
        self.settings = settings or AiParserSettings()
        self._llm = llm
        self._sleep = sleep
        self._jitter = jitter or random.random
        self.prompt = ChatPromptTemplate.from_messages(
            [("system", CV_PARSE_SYSTEM_PROMPT), ("user", "CV Text:\n\"\"\"\n{text}\n\"\"\"")]
        )

    @property
    def llm(self) -> Any:
        if self._llm is None:
            if not self.settings.openai_api_key:
                raise ConfigurationError("OPENAI_API_KEY is required for AI CV parsing")
            from langchain_openai import ChatOpenAI

            # Retries are owned by with_retry, so the client must not retry itself
            self._llm = ChatOpenAI(
                model=self.settings.model,
                temperature=self.settings.temperature,
                timeout=self.settings.timeout,
                max_retries=0,
                api_key=self.settings.openai_api_key,
                model_kwargs={"response_format": {"type": "json_object"}},
            )
        return self._llm

    def parse(self, text: str) -> Dict[str, Any]:
        """Return the profile as a plain dict or raise a typed error."""
        logger.info(
            "Starting AI-powered CV parsing text_length=%d word_count=%d",
            len(text or ""),
            len((text or "").split()),
        )
        chain = self.prompt | self.llm

        outcome: RetryOutcome[CvProfile] = with_retry(
            lambda: self._request_profile(chain, text),
            max_attempts=self.settings.max_attempts,
            classify=classify_ai_error,
            base_delay=self.settings.base_delay,
            sleep=self._sleep,
            jitter=self._jitter,
        )

        if outcome.ok:
            logger.info(f"AI CV parsing completed after {outcome.attempts} attempt(s)")
            return outcome.value.model_dump()

        error = outcome.error
        logger.error(
            "AI CV parsing failed attempts=%d error=%s preview=%r",
            outcome.attempts,
            error,
            (text or "")[:200],
        )
        if _is_auth_error(error):
            raise ConfigurationError(f"AI service rejected the credentials: {error}") from error
        if outcome.exhausted:
            raise ServiceUnavailable(
                f"AI service is overloaded, gave up after {outcome.attempts} attempts"
            ) from error
        if isinstance(error, ParsingFailure):
            raise error
        raise ParsingFailure(f"AI parsing failed: {error}") from error

    def _request_profile(self, chain: Any, text: str) -> CvProfile:
        message = chain.invoke({"text": text or ""})
        content = getattr(message, "content", message)
        if not isinstance(content, str):
            content = json.dumps(content) if isinstance(content, dict) else str(content)
        return decode_profile(content)
