"""Unit tests for Courseboard configuration loading."""

from pathlib import Path

import pytest

from courseboard.config import ConfigError, Settings, load_config, load_settings


@pytest.mark.unit
class TestSettings:
    """Tests for the Settings dataclass."""

    def test_defaults(self) -> None:
        settings = Settings()

        assert settings.db_path == "courseboard.db"
        assert settings.port == 8000
        assert settings.cors_origins == ["*"]

    def test_from_dict(self) -> None:
        settings = Settings.from_dict({"db_path": "/tmp/x.db", "port": "9000"})

        assert settings.db_path == "/tmp/x.db"
        assert settings.port == 9000

    def test_unknown_key(self) -> None:
        with pytest.raises(ConfigError, match="Unknown settings: dbpath"):
            Settings.from_dict({"dbpath": "x"})

    @pytest.mark.parametrize("port", ["http", 0, 70000])
    def test_invalid_port(self, port: object) -> None:
        with pytest.raises(ConfigError):
            Settings.from_dict({"port": port})

    def test_apply_env(self) -> None:
        settings = Settings().apply_env(
            {
                "COURSEBOARD_DB_PATH": ":memory:",
                "COURSEBOARD_PORT": "8123",
                "COURSEBOARD_CORS_ORIGINS": "https://a.example, https://b.example",
                "UNRELATED": "ignored",
            }
        )

        assert settings.db_path == ":memory:"
        assert settings.port == 8123
        assert settings.cors_origins == ["https://a.example", "https://b.example"]


@pytest.mark.unit
class TestLoadConfig:
    """Tests for load_config and load_settings."""

    def test_load_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "courseboard.yaml"
        path.write_text("db_path: data/app.db\nlog_level: DEBUG\ncors_origins:\n  - http://x\n")

        settings = load_config(path)

        assert settings.db_path == "data/app.db"
        assert settings.log_level == "DEBUG"
        assert settings.cors_origins == ["http://x"]

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "courseboard.yaml"
        path.write_text("")

        assert load_config(path) == Settings()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "courseboard.yaml"
        path.write_text("db_path: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "courseboard.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_env_overrides_file(self, tmp_path: Path) -> None:
        path = tmp_path / "courseboard.yaml"
        path.write_text("port: 9000\n")

        settings = load_settings(path, environ={"COURSEBOARD_PORT": "9100"})

        assert settings.port == 9100

    def test_auto_detects_file_in_cwd(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "courseboard.yaml").write_text("host: 0.0.0.0\n")
        monkeypatch.chdir(tmp_path)

        assert load_settings(environ={}).host == "0.0.0.0"

    def test_no_file_uses_defaults(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)

        assert load_settings(environ={}) == Settings()
