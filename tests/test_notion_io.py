import pytest

from formrelay.notion import io


class DummyDatabases:
    def __init__(self, meta):
        self.meta = meta
        self.asked = []

    def retrieve(self, database_id=None):
        self.asked.append(database_id)
        return self.meta


class DummyPages:
    def create(self, parent=None, properties=None):
        return {"id": "page-9", "parent": parent}


class DummyClient:
    def __init__(self, meta=None):
        self.databases = DummyDatabases(meta or {})
        self.pages = DummyPages()


def test_dump_db_props_simplifies_to_types():
    client = DummyClient(
        {
            "properties": {
                "Submission ID": {"id": "title", "type": "title"},
                "Services": {"id": "x1", "type": "multi_select"},
            }
        }
    )
    out = io.dump_db_props(client, "db-1")
    assert out == {"id": "db-1", "properties": {"Submission ID": "title", "Services": "multi_select"}}
    assert client.databases.asked == ["db-1"]


def test_create_submission_page_returns_id():
    assert io.create_submission_page(DummyClient(), "db-1", {}) == "page-9"


def test_get_client_requires_token(monkeypatch):
    monkeypatch.setattr(io.settings, "NOTION_TOKEN", None)
    with pytest.raises(RuntimeError, match="NOTION_TOKEN"):
        io.get_client()
