"""Unit tests for engine and URL helpers."""

from __future__ import annotations

import pytest
from sqlalchemy.pool import StaticPool

from tabledb.core.database.utils import DEFAULT_ENGINE_OPTIONS, build_url, create_engine, normalize_url


class TestNormalizeUrl:
    """Tests for normalize_url."""

    @pytest.mark.parametrize(
        "db_url,expected",
        [
            ("postgres://u:p@host/db", "postgresql://u:p@host/db"),
            ("postgresql://u:p@host/db", "postgresql://u:p@host/db"),
            ("  sqlite:///app.sqlite ", "sqlite:///app.sqlite"),
            ("mysql+pymysql://u@host/db", "mysql+pymysql://u@host/db"),
        ],
    )
    def test_normalize(self, db_url, expected):
        """Test only the legacy postgres scheme is rewritten."""
        assert normalize_url(db_url) == expected


class TestBuildUrl:
    """Tests for build_url."""

    def test_keeps_url_credentials_by_default(self):
        """Test empty overrides leave the URL alone."""
        url = build_url("mysql://app:pw@db/app")

        assert url.username == "app"
        assert url.password == "pw"

    def test_overrides_credentials(self):
        """Test explicit user and password win over the URL."""
        url = build_url("mysql://app:pw@db/app", "root", "s3cret")

        assert url.username == "root"
        assert url.password == "s3cret"
        assert url.database == "app"

    def test_accepts_url_instance(self):
        """Test an already parsed URL is accepted."""
        url = build_url(build_url("sqlite:///a.sqlite"), "ignored-by-sqlite")

        assert url.get_backend_name() == "sqlite"


class TestCreateEngine:
    """Tests for create_engine."""

    def test_memory_sqlite_uses_static_pool(self):
        """Test in-memory SQLite shares one connection."""
        engine = create_engine(build_url("sqlite:///:memory:"))
        try:
            assert isinstance(engine.pool, StaticPool)
        finally:
            engine.dispose()

    def test_file_sqlite_uses_default_pool(self, tmp_path):
        """Test file databases keep SQLAlchemy's default pool."""
        engine = create_engine(build_url(f"sqlite:///{tmp_path / 'x.sqlite'}"))
        try:
            assert not isinstance(engine.pool, StaticPool)
            assert engine.dialect.name == "sqlite"
        finally:
            engine.dispose()

    def test_options_replace_defaults(self, tmp_path):
        """Test explicit options are passed to SQLAlchemy instead of the defaults."""
        engine = create_engine(build_url(f"sqlite:///{tmp_path / 'x.sqlite'}"), {"echo": True})
        try:
            assert engine.echo is True
        finally:
            engine.dispose()

    def test_default_options(self):
        """Test connections are pinged before use by default."""
        assert DEFAULT_ENGINE_OPTIONS == {"pool_pre_ping": True}
