from pathlib import Path

from items_service.config import Settings, get_settings


def test_defaults(monkeypatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    settings = Settings(_env_file=None)
    assert settings.port == 3000
    assert settings.database_url.startswith("postgresql+psycopg://")
    assert settings.service_name == "backend-service"
    assert settings.is_production is False
    assert settings.log_path is None
    assert settings.cors_origin_list == ["*"]


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("APP_ENV", "Production")
    monkeypatch.setenv("LOG_DIR", "/var/log/app")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.example, http://b.example")
    get_settings.cache_clear()

    settings = get_settings()
    assert settings.port == 8080
    assert settings.is_production is True
    assert settings.log_path == Path("/var/log/app")
    assert settings.cors_origin_list == ["http://a.example", "http://b.example"]
