from __future__ import annotations

import io
import json
from typing import Any, Callable, Iterable, List

import pytest
from docx import Document
from langchain_core.messages import AIMessage
from langchain_core.runnables import RunnableLambda

from cvmate.app import create_app
from cvmate.extensions import db
from cvmate.services.cv_ingestion.ai_parser import AiCvParser
from cvmate.services.cv_ingestion.config import (
    AiParserSettings,
    IngestionConfig,
    QuotaSettings,
    UploadSettings,
)
from cvmate.services.cv_ingestion.pipeline import CvUploadPipeline

SAMPLE_CV_LINES = [
    "Jane Q. Public",
    "jane.public@example.com",
    "+1 555-201-0199",
    "Summary",
    "Backend engineer building Python services.",
    "Experience",
    "Software Engineer",
    "Acme Corp",
    "2019-2022",
    "Built the thing",
    "Skills",
    "Python",
    "Flask",
]


class FakeLLM:
    """Scripted chat model: each call pops the next response.

    dict -> JSON AIMessage, str -> raw AIMessage, Exception -> raised.
    """

    def __init__(self, responses: Iterable[Any]):
        self.responses: List[Any] = list(responses)
        self.calls = 0
        self.runnable = RunnableLambda(self._respond)

    def _respond(self, prompt_value: Any) -> AIMessage:
        self.calls += 1
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        if isinstance(response, dict):
            return AIMessage(content=json.dumps(response))
        return AIMessage(content=response)


@pytest.fixture
def ai_profile() -> dict:
    return {
        "personalInfo": {
            "fullName": "Jane Q. Public",
            "email": "jane.public@example.com",
            "phone": "+1 555-201-0199",
        },
        "summary": "Backend engineer focused on Python services.",
        "experience": [
            {
                "company": "Acme Corp",
                "position": "Software Engineer",
                "startDate": "2019",
                "endDate": "2022",
                "responsibilities": ["Built the thing"],
            }
        ],
        "education": [],
        "skills": {"technical": [], "soft": [], "programming": [], "tools": [], "other": []},
        "languages": [],
    }


@pytest.fixture
def make_llm() -> Callable[..., FakeLLM]:
    def _make(*responses: Any) -> FakeLLM:
        return FakeLLM(responses)

    return _make


@pytest.fixture
def build_docx() -> Callable[[Iterable[str]], bytes]:
    def _build(lines: Iterable[str]) -> bytes:
        document = Document()
        for line in lines:
            document.add_paragraph(line)
        buffer = io.BytesIO()
        document.save(buffer)
        return buffer.getvalue()

    return _build


@pytest.fixture
def build_pdf() -> Callable[[Iterable[str]], bytes]:
    """Single-page PDF with one Helvetica text line per entry."""

    def _escape(text: str) -> str:
        return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")

    def _build(lines: Iterable[str]) -> bytes:
        ops = ["BT", "/F1 12 Tf", "72 720 Td"]
        for index, line in enumerate(lines):
            if index:
                ops.append("0 -16 Td")
            ops.append(f"({_escape(line)}) Tj")
        ops.append("ET")
        stream = "\n".join(ops).encode("latin-1")

        objects = [
            b"<< /Type /Catalog /Pages 2 0 R >>",
            b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
            b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            b"/Resources << /Font << /F1 5 0 R >> >> /Contents 4 0 R >>",
            b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
            b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
        ]

        out = bytearray(b"%PDF-1.4\n")
        offsets = []
        for number, body in enumerate(objects, start=1):
            offsets.append(len(out))
            out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

        xref_offset = len(out)
        out += b"xref\n0 %d\n" % (len(objects) + 1)
        out += b"0000000000 65535 f \n"
        for offset in offsets:
            out += b"%010d 00000 n \n" % offset
        out += b"trailer\n<< /Size %d /Root 1 0 R >>\n" % (len(objects) + 1)
        out += b"startxref\n%d\n%%%%EOF\n" % xref_offset
        return bytes(out)

    return _build


@pytest.fixture
def sample_docx(build_docx) -> bytes:
    return build_docx(SAMPLE_CV_LINES)


@pytest.fixture
def ingestion_config(tmp_path) -> IngestionConfig:
    return IngestionConfig(
        upload=UploadSettings(upload_dir=tmp_path / "uploads"),
        ai_parser=AiParserSettings(
            openai_api_key="test-key", model="gpt-4o-mini", max_attempts=3, base_delay=0.01
        ),
        quota=QuotaSettings(upload_limit=2),
    )


@pytest.fixture
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("CVMATE_LOG", str(tmp_path / "cvmate-test.log"))
    monkeypatch.setenv("CV_UPLOAD_DIR", str(tmp_path / "uploads"))
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        }
    )
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def make_pipeline(app, ingestion_config):
    """Build a pipeline around a scripted LLM and install it on the app."""

    def _make(llm: FakeLLM) -> CvUploadPipeline:
        parser = AiCvParser(
            ingestion_config.ai_parser,
            llm=llm.runnable,
            sleep=lambda _delay: None,
            jitter=lambda: 0.0,
        )
        pipeline = CvUploadPipeline(ingestion_config, ai_parser=parser)
        app.extensions["cv_upload_pipeline"] = pipeline
        return pipeline

    return _make
