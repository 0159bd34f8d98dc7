from __future__ import annotations

import pytest

from cvmate.services.cv_ingestion.markdown_converter import (
    LineKind,
    classify_line,
    convert_to_markdown,
    strip_bullet,
)


@pytest.mark.parametrize(
    "line, expected",
    [
        ("Experience", LineKind.SECTION_HEADER),
        ("İŞ DENEYİMİ", LineKind.SECTION_HEADER),
        ("jane.public@example.com", LineKind.EMAIL),
        ("+90 532 123 45 67", LineKind.PHONE),
        ("linkedin.com/in/janepublic", LineKind.LINKEDIN),
        ("github.com/janepublic", LineKind.GITHUB),
        ("https://janepublic.dev", LineKind.WEBSITE),
        ("2019 - 2022", LineKind.DATED_ENTRY),
        ("Ocak 2020 - Günümüz", LineKind.DATED_ENTRY),
        ("March 2018", LineKind.DATED_ENTRY),
        ("• Led a team of four", LineKind.BULLET),
        ("- Shipped the billing service", LineKind.BULLET),
        ("1. First item", LineKind.BULLET),
        ("Responsible for backend services", LineKind.PROSE),
    ],
)
def test_classify_line(line: str, expected: LineKind) -> None:
    assert classify_line(line) is expected


def test_long_lines_are_never_headers() -> None:
    line = "Experience with distributed systems and large scale data pipelines"
    assert classify_line(line) is not LineKind.SECTION_HEADER


def test_strip_bullet_removes_only_the_marker() -> None:
    assert strip_bullet("• Led a team") == "Led a team"
    assert strip_bullet("- Shipped - on time") == "Shipped - on time"
    assert strip_bullet("No marker") == "No marker"


def test_dated_entry_is_paired_with_following_title() -> None:
    markdown = convert_to_markdown("Experience\n2019 - 2022\nSenior Developer")

    assert "## Experience" in markdown
    assert "### Senior Developer | 2019 - 2022" in markdown


def test_dated_entry_outside_a_section_is_not_paired() -> None:
    markdown = convert_to_markdown("2019 - 2022\nSenior Developer")

    assert "###" not in markdown
    assert "2019 - 2022" in markdown
    assert "Senior Developer" in markdown


def test_contact_lines_are_labelled() -> None:
    markdown = convert_to_markdown(
        "jane.public@example.com\n+90 532 123 45 67\ngithub.com/janepublic"
    )

    assert "**Email:** jane.public@example.com" in markdown
    assert "**Telefon:** +90 532 123 45 67" in markdown
    assert "**GitHub:** github.com/janepublic" in markdown


def test_detail_lines_under_experience_become_bullets() -> None:
    text = "\n".join(
        [
            "Experience",
            "2019 - 2022",
            "Senior Developer",
            "Acme Corp",
            "Reduced build times by half",
        ]
    )
    markdown = convert_to_markdown(text)

    assert "- Reduced build times by half" in markdown


def test_explicit_bullets_are_normalised() -> None:
    markdown = convert_to_markdown("Skills\n• Python\n* Flask")

    assert "- Python" in markdown
    assert "- Flask" in markdown
    assert "•" not in markdown


def test_converter_never_drops_lines() -> None:
    lines = [
        "Jane Q. Public",
        "jane.public@example.com",
        "Summary",
        "Backend engineer.",
        "Experience",
        "2019 - 2022",
        "Senior Developer",
        "• Led a team",
        "Acme Corp",
        "Education",
        "BSc Computer Science",
        "2015 - 2019",
        "Skills",
        "Python, SQL",
    ]
    markdown = convert_to_markdown("\n".join(lines))

    for line in lines:
        assert strip_bullet(line) in markdown


def test_output_has_no_runs_of_blank_lines() -> None:
    markdown = convert_to_markdown("Summary\n\n\n\nText\nExperience\nMore text")

    assert "\n\n\n" not in markdown
    assert markdown == markdown.strip()


def test_empty_input() -> None:
    assert convert_to_markdown("") == ""


def test_dated_entry_does_not_swallow_the_next_header() -> None:
    text = "\n".join(["Experience", "2019 - 2022", "Education", "BSc Computer Science"])

    markdown = convert_to_markdown(text)

    assert "## Education" in markdown
    assert "### Education" not in markdown
    # Education detail lines are not treated as experience bullets
    assert "- BSc Computer Science" not in markdown
    assert "BSc Computer Science" in markdown
