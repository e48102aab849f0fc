import pytest
from pydantic import ValidationError

from webapi.server.settings import ApiServerSettings


class TestApiServerSettings:
    def test_defaults(self, monkeypatch):
        for name in (
            "WEBGAME_LOG_DIR",
            "WEBGAME_DATABASE_PATH",
            "WEBGAME_CORS_ORIGINS",
            "WEBGAME_DEFAULT_PAGE_SIZE",
            "WEBGAME_LOG_LEVEL",
            "WEBGAME_LOG_FORMAT",
        ):
            monkeypatch.delenv(name, raising=False)
        settings = ApiServerSettings()
        assert settings.log_dir == "backend/logs/webapi"
        assert settings.database_path == "backend/storage.db"
        assert settings.cors_origins == []
        assert settings.default_page_size == 10
        assert settings.max_page_size == 20
        assert settings.log_level is None
        assert settings.log_format is None

    def test_database_path_override(self, monkeypatch):
        monkeypatch.setenv("WEBGAME_DATABASE_PATH", "/var/lib/webgame.db")
        assert ApiServerSettings().database_path == "/var/lib/webgame.db"

    def test_cors_origins_json_array(self, monkeypatch):
        monkeypatch.setenv("WEBGAME_CORS_ORIGINS", '["http://x.com","http://y.com"]')
        assert ApiServerSettings().cors_origins == ["http://x.com", "http://y.com"]

    def test_cors_origins_csv(self, monkeypatch):
        monkeypatch.setenv("WEBGAME_CORS_ORIGINS", "http://x.com,http://y.com")
        assert ApiServerSettings().cors_origins == ["http://x.com", "http://y.com"]

    def test_page_size_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("WEBGAME_MAX_PAGE_SIZE", "0")
        with pytest.raises(ValidationError):
            ApiServerSettings()

    def test_default_page_size_cannot_exceed_max(self):
        with pytest.raises(ValidationError, match="must not exceed"):
            ApiServerSettings(default_page_size=30, max_page_size=20)

    def test_logging_options_are_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("WEBGAME_LOG_LEVEL", "debug")
        monkeypatch.setenv("WEBGAME_LOG_FORMAT", "JSON")
        settings = ApiServerSettings()
        assert settings.log_level == "DEBUG"
        assert settings.log_format == "json"

    def test_unknown_log_format_is_rejected(self):
        with pytest.raises(ValidationError):
            ApiServerSettings(log_format="xml")
