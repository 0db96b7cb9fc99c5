"""
Unit tests for proxy configuration (ProxySettings).

Tests verify:
- Defaults apply with an empty environment.
- Environment variables override defaults.
- EG4_BASE_URL must be http(s) and loses its trailing slash.
- PORT, API_PREFIX, positive counts and LOG_LEVEL are validated.

CHANGELOG:
- 2026-10-14: Cover page sizes and register point count
- 2026-10-12: Initial creation

TODO:
- None
"""

import pytest
from pydantic import ValidationError

from eg4_proxy.config import DEFAULT_EG4_BASE_URL, ProxySettings


class TestDefaults:
    """Every setting has a usable default."""

    def test_defaults_with_empty_environment(self) -> None:
        settings = ProxySettings()

        assert settings.eg4_base_url == DEFAULT_EG4_BASE_URL
        assert settings.host == "0.0.0.0"
        assert settings.port == 3002
        assert settings.api_prefix == "/api/eg4"
        assert settings.session_timeout_s == 1800
        assert settings.plant_page_rows == 100
        assert settings.inverter_page_rows == 50
        assert settings.register_point_count == 127
        assert settings.cors_origins == ["*"]
        assert settings.log_level == "INFO"


class TestEnvOverrides:
    def test_values_read_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EG4_BASE_URL", "http://localhost:9000/WManage/")
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("API_PREFIX", "/eg4/")
        monkeypatch.setenv("SESSION_TIMEOUT_S", "600")
        monkeypatch.setenv("CORS_ORIGINS", '["http://dashboard.local"]')
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = ProxySettings()

        assert settings.eg4_base_url == "http://localhost:9000/WManage"
        assert settings.port == 8080
        assert settings.api_prefix == "/eg4"
        assert settings.session_timeout_s == 600
        assert settings.cors_origins == ["http://dashboard.local"]
        assert settings.log_level == "DEBUG"

    def test_reads_dotenv_file(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / ".env").write_text("PORT=4000\n")
        monkeypatch.chdir(tmp_path)
        assert ProxySettings().port == 4000


class TestValidation:
    """Invalid values are rejected at load time."""

    def test_base_url_requires_http_scheme(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EG4_BASE_URL", "ftp://monitor.example.com")
        with pytest.raises(ValidationError) as exc_info:
            ProxySettings()
        assert "eg4_base_url" in str(exc_info.value).lower()

    @pytest.mark.parametrize("port", ["0", "70000"])
    def test_port_out_of_range(self, monkeypatch: pytest.MonkeyPatch, port: str) -> None:
        monkeypatch.setenv("PORT", port)
        with pytest.raises(ValidationError):
            ProxySettings()

    def test_prefix_must_start_with_slash(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("API_PREFIX", "api/eg4")
        with pytest.raises(ValidationError):
            ProxySettings()

    @pytest.mark.parametrize(
        "var",
        ["SESSION_TIMEOUT_S", "PLANT_PAGE_ROWS", "INVERTER_PAGE_ROWS", "REGISTER_POINT_COUNT"],
    )
    def test_counts_must_be_positive(
        self, monkeypatch: pytest.MonkeyPatch, var: str
    ) -> None:
        monkeypatch.setenv(var, "0")
        with pytest.raises(ValidationError):
            ProxySettings()

    def test_unknown_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError):
            ProxySettings()
