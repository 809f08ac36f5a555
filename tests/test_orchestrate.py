import json
from datetime import datetime, timezone

from formrelay.kv.store import KVError
from formrelay.orchestrate import run

TS = datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc)
PAYLOAD = {"id": "abc", "services": ["SEO"], "formData": {"company_name": "Acme", "note": None}}


class DummyKV:
    def __init__(self, fail=None):
        self.fail = fail
        self.data = {}

    def set(self, key, value):
        if self.fail:
            raise self.fail
        self.data[key] = value


class DummyPages:
    def __init__(self):
        self.created = []

    def create(self, parent=None, properties=None):
        self.created.append({"parent": parent, "properties": properties})
        return {"id": "page-1"}


class DummyNotion:
    def __init__(self):
        self.pages = DummyPages()


def test_kv_submission_stores_markdown_under_prefixed_key(monkeypatch):
    monkeypatch.setattr(run.settings, "KV_STORE_FORMAT", "markdown")
    monkeypatch.setattr(run.settings, "KV_KEY_PREFIX", "submission:")
    kv = DummyKV()
    status, body = run.submit_submission(PAYLOAD, sink="kv", kv=kv, submitted_at=TS)
    assert status == 200
    assert body == {"message": "Success", "submissionId": "abc"}
    doc = kv.data["submission:abc"]
    assert doc.startswith("# New Form Submission")
    assert "### Company Name\nAcme" in doc


def test_kv_json_format_keeps_original_envelope(monkeypatch):
    monkeypatch.setattr(run.settings, "KV_STORE_FORMAT", "json")
    monkeypatch.setattr(run.settings, "KV_KEY_PREFIX", "submission:")
    kv = DummyKV()
    run.submit_submission(PAYLOAD, sink="kv", kv=kv, submitted_at=TS)
    stored = json.loads(kv.data["submission:abc"])
    assert stored == {
        "services": ["SEO"],
        "formData": {"company_name": "Acme", "note": None},
        "submittedAt": "2024-05-01T12:30:00+00:00",
    }


def test_missing_id_is_rejected_before_formatting():
    kv = DummyKV()
    for payload in ({"services": [], "formData": {}}, {"id": "  "}, ["not", "an", "object"]):
        status, body = run.submit_submission(payload, sink="kv", kv=kv)
        assert status == 400
        assert body["error"].startswith("Submission failed:")
    assert kv.data == {}


def test_sink_failure_maps_to_500():
    status, body = run.submit_submission(PAYLOAD, sink="kv", kv=DummyKV(fail=KVError("boom")))
    assert status == 500
    assert body == {"error": "Submission failed: boom"}


def test_unknown_sink():
    status, _ = run.submit_submission(PAYLOAD, sink="postgres")
    assert status == 400


def test_notion_submission_creates_page():
    notion = DummyNotion()
    status, body = run.submit_submission(
        PAYLOAD, sink="notion", notion=notion, database_id="db-1", submitted_at=TS
    )
    assert status == 200
    assert body["pageId"] == "page-1"
    created = notion.pages.created[0]
    assert created["parent"] == {"database_id": "db-1"}
    props = created["properties"]
    assert "Company Name" in props
    assert "Note" not in props


def test_notion_without_database_id_fails(monkeypatch):
    monkeypatch.setattr(run.settings, "NOTION_DATABASE_ID", None)
    status, body = run.submit_submission(PAYLOAD, sink="notion", notion=DummyNotion())
    assert status == 500
    assert "NOTION_DATABASE_ID" in body["error"]


def test_upload_validations(monkeypatch):
    monkeypatch.setattr(run.settings, "BLOB_READ_WRITE_TOKEN", None)
    assert run.upload_file("a.txt", b"1")[0] == 500
    assert run.upload_file(None, b"1", token="tok")[0] == 400
    assert run.upload_file("a.txt", b"", token="tok")[0] == 400


def test_upload_prefixes_filename_and_returns_blob():
    seen = {}

    def uploader(pathname, body, token, content_type=None):
        seen.update(pathname=pathname, body=body, token=token)
        return {"url": f"https://blob.example/{pathname}"}

    status, blob = run.upload_file("logo.png", b"png", token="tok", uploader=uploader)
    assert status == 200
    assert seen["pathname"].endswith("-logo.png")
    assert blob["url"].endswith(seen["pathname"])


def test_upload_failure_maps_to_500():
    def uploader(*_args, **_kwargs):
        raise RuntimeError("quota exceeded")

    status, body = run.upload_file("logo.png", b"png", token="tok", uploader=uploader)
    assert status == 500
    assert body == {"error": "Upload failed: quota exceeded"}
