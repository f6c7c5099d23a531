"""Unit tests for core/config.py -- SECRET_KEY policy and SQLite directory setup."""

import pytest

from core.config import Settings, ensure_sqlite_dir


class TestSecretKeyPolicy:
    def test_production_requires_secret(self):
        with pytest.raises(ValueError, match="SECRET_KEY is required"):
            Settings(_env_file=None, debug=False, secret_key="")

    def test_short_secret_rejected(self):
        with pytest.raises(ValueError, match="at least 32 characters"):
            Settings(_env_file=None, debug=False, secret_key="too-short")

    def test_debug_generates_secret(self):
        settings = Settings(_env_file=None, debug=True, secret_key="")
        assert len(settings.secret_key) >= 32

    def test_explicit_secret_kept(self):
        key = "k" * 48
        assert Settings(_env_file=None, debug=False, secret_key=key).secret_key == key

    def test_token_lifetime_must_be_positive(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, debug=True, token_expire_seconds=0)


class TestEnsureSqliteDir:
    def test_creates_parent_directory(self, tmp_path):
        db_file = tmp_path / "nested" / "deeper" / "links.db"
        ensure_sqlite_dir(f"sqlite:///{db_file}")
        assert db_file.parent.is_dir()

    @pytest.mark.parametrize(
        "url",
        [
            "sqlite:///:memory:",
            "sqlite:///file:test?mode=memory&cache=shared&uri=true",
            "postgresql://user@localhost/links",
        ],
    )
    def test_ignores_non_file_urls(self, url, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        ensure_sqlite_dir(url)
        assert list(tmp_path.iterdir()) == []
