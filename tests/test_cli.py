"""Tests for main.py -- the export/import admin commands against a file database."""

import json

import pytest

from catalog.models import Link
from catalog.store import LinkStore
from core.config import get_settings
from main import build_parser, main


@pytest.fixture
def db_url(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'cli.db'}"
    monkeypatch.setattr(get_settings(), "database_url", url)
    return url


def test_export_writes_file(db_url, tmp_path):
    store = LinkStore(db_url)
    gid = store.create_group("Ops", sort_order=1)
    store.create_link(Link(group_id=gid, name="Status", url="https://status.example"))
    store.close()

    out = tmp_path / "export.json"
    assert main(["export", "-o", str(out)]) == 0

    data = json.loads(out.read_text(encoding="utf-8"))
    assert [g["name"] for g in data["link_groups"]] == ["Ops"]
    assert data["link_groups"][0]["links"][0]["url"] == "https://status.example"


def test_import_merges_file(db_url, tmp_path, capsys):
    doc = {"link_groups": [{"name": "Media", "links": [{"name": "Jellyfin", "url": "http://media.local"}]}]}
    src = tmp_path / "in.json"
    src.write_text(json.dumps(doc), encoding="utf-8")

    assert main(["import", str(src)]) == 0
    assert "Imported 1 links" in capsys.readouterr().out

    store = LinkStore(db_url)
    try:
        groups = store.list_groups()
    finally:
        store.close()
    assert [(g.name, [link.name for link in g.links]) for g in groups] == [("Media", ["Jellyfin"])]


def test_import_rejects_bad_file(db_url, tmp_path, capsys):
    src = tmp_path / "bad.json"
    src.write_text("{oops", encoding="utf-8")
    assert main(["import", str(src)]) == 1
    assert "Import failed" in capsys.readouterr().err


def test_import_missing_file(db_url, tmp_path):
    assert main(["import", str(tmp_path / "nope.json")]) == 1


def test_command_is_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
