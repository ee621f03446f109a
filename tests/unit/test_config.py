"""Tests for keygate.config — YAML loading, env var overrides, defaults."""

from pathlib import Path

import pytest

from keygate.config import load_config


class TestLoadConfig:
    def test_defaults_when_no_file(self, tmp_path: Path) -> None:
        config = load_config(tmp_path / "nonexistent.yaml")
        assert config["server"]["port"] == 8081
        assert config["auth"]["forward_header"] == "X-Api-Key"
        assert config["auth"]["public_paths"] == ["/healthz"]
        assert config["auth"]["status_codes"]["malformed_header"] == 401
        assert config["logging"]["level"] == "INFO"

    def test_yaml_overrides_defaults(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("auth:\n  status_codes:\n    malformed_header: 400\n")
        config = load_config(yaml_file)
        assert config["auth"]["status_codes"]["malformed_header"] == 400
        # Sibling defaults preserved
        assert config["auth"]["status_codes"]["no_auth_header"] == 401
        assert config["auth"]["forward_header"] == "X-Api-Key"

    def test_env_var_overrides_yaml(self, tmp_path: Path, monkeypatch) -> None:
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("server:\n  port: 9090\n")
        monkeypatch.setenv("KEYGATE_SERVER__PORT", "7070")
        config = load_config(yaml_file)
        assert config["server"]["port"] == 7070

    def test_env_var_string_value(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setenv("KEYGATE_LOGGING__LEVEL", "DEBUG")
        config = load_config(tmp_path / "nonexistent.yaml")
        assert config["logging"]["level"] == "DEBUG"

    def test_env_var_list_value(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setenv("KEYGATE_AUTH__PUBLIC_PATHS", "/healthz, /metrics")
        config = load_config(tmp_path / "nonexistent.yaml")
        assert config["auth"]["public_paths"] == ["/healthz", "/metrics"]

    def test_env_var_single_list_item(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setenv("KEYGATE_AUTH__PUBLIC_PATHS", "/healthz")
        config = load_config(tmp_path / "nonexistent.yaml")
        assert config["auth"]["public_paths"] == ["/healthz"]

    def test_yaml_single_public_path_string(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("auth:\n  public_paths: /status\n")
        config = load_config(yaml_file)
        assert config["auth"]["public_paths"] == ["/status"]

    def test_defaults_not_shared_between_loads(self, tmp_path: Path) -> None:
        first = load_config(tmp_path / "nonexistent.yaml")
        first["auth"]["status_codes"]["no_auth_header"] = 418
        second = load_config(tmp_path / "nonexistent.yaml")
        assert second["auth"]["status_codes"]["no_auth_header"] == 401

    def test_non_mapping_yaml_rejected(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("- just\n- a list\n")
        with pytest.raises(ValueError, match="mapping"):
            load_config(yaml_file)
