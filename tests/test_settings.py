import json
import logging

from src.api.generate_openapi import generate_openapi
from src.api.logging_setup import setup_logging
from src.api.settings import get_settings


def test_defaults(monkeypatch):
    for name in ("PERSISTENCE_BACKEND", "SQLITE_DB_PATH", "CORS_ALLOW_ORIGINS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.persistence_backend == "memory"
    assert settings.sqlite_db_path == "./data/tasks.db"
    assert settings.cors_allow_origins == ["http://localhost:3000"]
    assert settings.log_level == "INFO"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("PERSISTENCE_BACKEND", "SQLite")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.example, https://b.example,")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = get_settings()

    assert settings.persistence_backend == "sqlite"
    assert settings.cors_allow_origins == ["https://a.example", "https://b.example"]
    assert settings.log_level == "DEBUG"


def test_unknown_backend_falls_back_to_memory(monkeypatch):
    monkeypatch.setenv("PERSISTENCE_BACKEND", "postgres")
    assert get_settings().persistence_backend == "memory"


def test_setup_logging_replaces_root_handlers():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        setup_logging("warning")
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1

        setup_logging("nonsense")
        assert root.level == logging.INFO
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)


def test_generate_openapi_writes_schema(tmp_path):
    out = generate_openapi(str(tmp_path / "interfaces" / "openapi.json"))

    with open(out, encoding="utf-8") as f:
        schema = json.load(f)

    assert "/api/tasks" in schema["paths"]
    assert "/api/tasks/{task_id}/status" in schema["paths"]
    assert {t["name"] for t in schema["tags"]} >= {"health", "tasks"}
