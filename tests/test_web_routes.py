"""Tests for web/routes.py -- SPA serving from a built UI directory.

The router is mounted on a bare FastAPI app so these tests do not depend on
UI_DIST_DIR being set for the main application.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from web.routes import build_ui_router


@pytest.fixture
def ui_client(tmp_path):
    dist = tmp_path / "dist"
    (dist / "assets").mkdir(parents=True)
    (dist / "index.html").write_text("<html><body>LinkDeck</body></html>")
    (dist / "assets" / "app.js").write_text("console.log('app')")
    (dist / "favicon.ico").write_bytes(b"\x00\x00\x01\x00")
    (tmp_path / "secret.txt").write_text("outside")

    app = FastAPI()
    app.include_router(build_ui_router(dist))
    with TestClient(app) as client:
        yield client


def test_index_served_at_root(ui_client):
    resp = ui_client.get("/")
    assert resp.status_code == 200
    assert "LinkDeck" in resp.text


def test_client_side_route_falls_back_to_index(ui_client):
    resp = ui_client.get("/admin/links")
    assert resp.status_code == 200
    assert "LinkDeck" in resp.text


def test_asset_served(ui_client):
    resp = ui_client.get("/assets/app.js")
    assert resp.status_code == 200
    assert "console.log" in resp.text


def test_missing_asset_is_404(ui_client):
    assert ui_client.get("/assets/missing.js").status_code == 404


def test_asset_path_cannot_escape_dist(ui_client):
    assert ui_client.get("/assets/..%2F..%2Fsecret.txt").status_code == 404


def test_favicon(ui_client):
    assert ui_client.get("/favicon.ico").status_code == 200


def test_api_paths_never_get_index(ui_client):
    assert ui_client.get("/api").status_code == 404
    assert ui_client.get("/api/unknown").status_code == 404


def test_missing_build_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        build_ui_router(tmp_path)
