"""
Test configuration loading
"""

import pytest
import yaml

from hasapi.config import ConfigLoader, HasApiConfig, load_config


@pytest.fixture(autouse=True)
def isolated_user_dir(tmp_path, monkeypatch):
    user_dir = tmp_path / "user"
    monkeypatch.setattr(ConfigLoader, "USER_CONFIG_DIR", user_dir)
    monkeypatch.delenv(ConfigLoader.LOG_LEVEL_ENV, raising=False)
    return user_dir


@pytest.fixture
def project(tmp_path):
    path = tmp_path / "project"
    path.mkdir()
    return path


def test_defaults(project):
    config = load_config(project)
    assert config == HasApiConfig()
    assert config.settings.log_level == "INFO"
    assert config.settings.default_namespace == "default"


def test_project_config(project):
    (project / "hasapi.yaml").write_text(
        yaml.dump({"settings": {"log_level": "DEBUG", "list_page_size": 20}})
    )
    config = load_config(project)
    assert config.settings.log_level == "DEBUG"
    assert config.settings.list_page_size == 20


def test_project_config_wins_over_user(project, isolated_user_dir):
    isolated_user_dir.mkdir()
    (isolated_user_dir / "hasapi.yaml").write_text("settings:\n  default_namespace: user\n")
    assert load_config(project).settings.default_namespace == "user"

    (project / "hasapi.yaml").write_text("settings:\n  default_namespace: project\n")
    assert load_config(project).settings.default_namespace == "project"


def test_explicit_config_path(project, tmp_path):
    explicit = tmp_path / "other.yaml"
    explicit.write_text("settings:\n  database: /tmp/components.db\n")
    assert load_config(project, explicit).settings.database == "/tmp/components.db"


def test_invalid_config_falls_back_to_defaults(project):
    (project / "hasapi.yaml").write_text("settings:\n  list_page_size: 0\n")
    assert load_config(project) == HasApiConfig()


def test_log_level_from_environment(project, monkeypatch):
    monkeypatch.setenv("HASAPI_LOG_LEVEL", "warning")
    assert load_config(project).settings.log_level == "WARNING"


def test_invalid_log_level_from_environment_ignored(project, monkeypatch):
    (project / "hasapi.yaml").write_text("settings:\n  log_level: ERROR\n")
    monkeypatch.setenv("HASAPI_LOG_LEVEL", "chatty")
    assert load_config(project).settings.log_level == "ERROR"

