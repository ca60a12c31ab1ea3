import os

import pytest

from tasks_api.main import create_app
from tasks_api.settings import LISTEN_PORT, get_settings, load_settings

ENV_VARS = [
    "DB_HOST",
    "DB_USER",
    "DB_PASSWORD",
    "DB_DATABASE",
    "DB_PORT",
    "DB_CONNECTION_LIMIT",
    "DB_POOL_TIMEOUT",
    "DATABASE_URL",
    "APP_HOST",
    "LOG_LEVEL",
    "CORS_ALLOW_ORIGINS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    def test_database_defaults(self):
        db = get_settings().database
        assert db.host == "localhost"
        assert db.user == "root"
        assert db.password == "pass@123"
        assert db.database == "medlink"
        assert db.port == 3306
        assert db.connection_limit == 10
        assert db.pool_timeout is None
        assert db.url is None

    def test_app_defaults(self):
        settings = get_settings()
        assert settings.port == LISTEN_PORT == 3000
        assert settings.host == "0.0.0.0"
        assert settings.log_level == "INFO"
        assert settings.cors_allow_origins == ["*"]


class TestOverrides:
    def test_database_env(self, monkeypatch):
        monkeypatch.setenv("DB_HOST", "db.internal")
        monkeypatch.setenv("DB_USER", "tasks")
        monkeypatch.setenv("DB_PASSWORD", "s3cret")
        monkeypatch.setenv("DB_DATABASE", "taskmanager")
        monkeypatch.setenv("DB_PORT", "3307")
        monkeypatch.setenv("DB_CONNECTION_LIMIT", "4")
        monkeypatch.setenv("DB_POOL_TIMEOUT", "2.5")
        db = get_settings().database
        assert (db.host, db.user, db.password, db.database, db.port) == (
            "db.internal",
            "tasks",
            "s3cret",
            "taskmanager",
            3307,
        )
        assert db.connection_limit == 4
        assert db.pool_timeout == 2.5

    def test_empty_values_fall_back(self, monkeypatch):
        monkeypatch.setenv("DB_HOST", "")
        monkeypatch.setenv("DB_PORT", "")
        db = get_settings().database
        assert db.host == "localhost"
        assert db.port == 3306

    @pytest.mark.parametrize("value", ["abc", "0", "-5"])
    def test_invalid_port_falls_back(self, monkeypatch, value):
        monkeypatch.setenv("DB_PORT", value)
        assert get_settings().database.port == 3306

    @pytest.mark.parametrize("value", ["", "soon", "0"])
    def test_invalid_pool_timeout_means_unbounded(self, monkeypatch, value):
        monkeypatch.setenv("DB_POOL_TIMEOUT", value)
        assert get_settings().database.pool_timeout is None

    def test_listen_port_not_configurable(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        assert get_settings().port == 3000

    def test_cors_origins_list(self, monkeypatch):
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test,")
        assert get_settings().cors_allow_origins == ["http://a.test", "http://b.test"]

    def test_log_level_normalized(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert get_settings().log_level == "DEBUG"


class TestDotenv:
    @pytest.fixture
    def env_dir(self, tmp_path, monkeypatch):
        # Values loaded from .env land in os.environ; keep them out of other tests
        monkeypatch.setattr(os, "environ", {k: v for k, v in os.environ.items() if k not in ENV_VARS})
        (tmp_path / ".env").write_text("DB_HOST=from-dotenv\nDB_DATABASE=taskmanager\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        return tmp_path

    def test_load_settings_reads_dotenv(self, env_dir):
        db = load_settings().database
        assert db.host == "from-dotenv"
        assert db.database == "taskmanager"
        assert db.user == "root"

    def test_environment_wins_over_dotenv(self, env_dir, monkeypatch):
        monkeypatch.setenv("DB_HOST", "from-env")
        assert load_settings().database.host == "from-env"

    def test_default_app_uses_dotenv(self, env_dir):
        app = create_app()
        assert app.state.settings.database.host == "from-dotenv"
