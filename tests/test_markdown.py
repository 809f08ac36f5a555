from datetime import datetime, timezone

from formrelay.format.markdown import PLACEHOLDER, format_data_to_markdown, format_timestamp
from formrelay.models.submission import SubmissionRecord

TS = datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc)


def _render(form_data, services=None):
    record = SubmissionRecord.model_validate(
        {"id": "sub-1", "services": services or [], "formData": form_data}
    )
    return format_data_to_markdown(record, submitted_at=TS, tz=timezone.utc, overrides={})


def test_text_field_heading_and_value():
    md = _render({"company_name": "Acme"})
    assert "### Company Name\nAcme" in md


def test_header_sections_in_order():
    md = _render({"company_name": "Acme"}, services=["Web Design", "SEO"])
    assert md.startswith("# New Form Submission\n")
    assert "**Submission ID:** sub-1" in md
    assert "**Submitted At:** 2024-05-01 12:30:00 UTC" in md
    assert "## Selected Services\n- Web Design\n- SEO" in md
    assert md.index("## Selected Services") < md.index("## Form Details") < md.index("### Company Name")


def test_services_section_omitted_when_empty():
    assert "Selected Services" not in _render({"a": "b"})


def test_object_list_gets_numbered_singular_headings():
    md = _render({"contacts": [{"name": "A"}, {"name": "B"}]})
    assert "#### Contact 1\n- **Name:** A" in md
    assert "#### Contact 2\n- **Name:** B" in md


def test_absent_values_use_placeholder():
    md = _render({"note": None, "other": "", "tags": []})
    assert f"### Note\n{PLACEHOLDER}" in md
    assert f"### Other\n{PLACEHOLDER}" in md
    assert f"### Tags\n{PLACEHOLDER}" in md


def test_scalars_lists_files_and_objects():
    md = _render(
        {
            "agree": True,
            "budget": 5000,
            "channels": ["email", "phone"],
            "logo": {"file": {"name": "logo.png", "size": 2048}},
            "address": {"city": "Oslo"},
        }
    )
    assert "### Agree\ntrue" in md
    assert "### Budget\n5000" in md
    assert "### Channels\n- email\n- phone" in md
    assert "### Logo\n- **File Name:** logo.png\n- **File Size:** 2.0 KB" in md
    assert '### Address\n```json\n{\n  "city": "Oslo"\n}\n```' in md


def test_field_order_follows_payload():
    md = _render({"zeta": "1", "alpha": "2"})
    assert md.index("### Zeta") < md.index("### Alpha")


def test_unknown_time_zone_falls_back_to_utc():
    assert format_timestamp(TS, "Not/AZone") == "2024-05-01 12:30:00 UTC"


def test_odd_shapes_never_raise():
    md = _render({"weird": [[1, 2], {"a": 1}], "nested": [{"deep": {"x": [1]}}, {}]})
    assert "### Weird\n- 1, 2\n- {\"a\":1}" in md
    assert '- **Deep:** {"x":[1]}' in md
    assert f"#### Nested 2\n{PLACEHOLDER}" in md


def test_missing_list_items_use_not_provided():
    md = _render({"channels": ["email", None]})
    assert "### Channels\n- email\n- Not provided" in md
