import logging

import pytest

from form_designer import logging_config
from form_designer.config import ConfigManager


def test_packaged_defaults_are_loaded(isolated_config):
    cfg = ConfigManager()
    editor = cfg.get_editor_config()
    assert editor["default_form_name"] == "Untitled Form"
    assert editor["max_history"] == 100
    assert editor["strict_commands"] is True
    assert cfg.get_container_defaults()["appearance"]["style"] == "transparent"
    assert cfg.get_logging_config()["version"] == 1


def test_default_files_are_copied_to_user_dir(isolated_config):
    ConfigManager()
    for name in ("editor.yml", "container_defaults.yml", "logging.yml"):
        assert (isolated_config / name).exists()


def test_user_overrides_win(isolated_config):
    isolated_config.mkdir(parents=True)
    (isolated_config / "editor.yml").write_text("max_history: 5\n", encoding="utf-8")
    editor = ConfigManager().get_editor_config()
    assert editor["max_history"] == 5
    assert editor["root_name"] == "Root"


def test_invalid_user_file_is_logged_and_ignored(isolated_config, caplog):
    isolated_config.mkdir(parents=True)
    (isolated_config / "editor.yml").write_text("max_history: [5\n", encoding="utf-8")
    with caplog.at_level(logging.ERROR, logger="form_designer.config.manager"):
        editor = ConfigManager().get_editor_config()
    assert editor["max_history"] == 100
    assert "Could not parse user config" in caplog.text


def test_manager_is_a_singleton_until_reset(isolated_config):
    first = ConfigManager()
    assert ConfigManager() is first
    ConfigManager.reset()
    assert ConfigManager() is not first


@pytest.fixture
def captured_dict_config(monkeypatch):
    applied = []
    monkeypatch.setattr(logging.config, "dictConfig", applied.append)
    return applied


def test_setup_logging_redirects_file_handler(tmp_path, monkeypatch, captured_dict_config):
    log_dir = tmp_path / "logs"
    monkeypatch.setenv("FORM_DESIGNER_LOG_DIR", str(log_dir))
    logging_config.setup_logging()
    assert log_dir.is_dir()
    (config,) = captured_dict_config
    assert config["handlers"]["file"]["filename"] == str(log_dir / "app.log")
    # the cached section keeps its packaged value
    assert ConfigManager().get_logging_config()["handlers"]["file"]["filename"] == "logs/app.log"


def test_debug_overrides_raise_edit_loggers_to_debug(tmp_path, monkeypatch, captured_dict_config):
    monkeypatch.setenv("FORM_DESIGNER_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("FORM_DESIGNER_DEBUG_EDITS", "true")
    monkeypatch.setenv("FORM_DESIGNER_DEBUG_MODULES", "form_designer.core.factory")
    names = [
        "form_designer.core.services.structure_editing_service",
        "form_designer.core.session",
        "form_designer.core.factory",
    ]
    saved = {n: (logging.getLogger(n).level, list(logging.getLogger(n).handlers)) for n in names}
    try:
        logging_config.setup_logging()
        for name in names:
            assert logging.getLogger(name).level == logging.DEBUG
    finally:
        for name, (level, handlers) in saved.items():
            logger = logging.getLogger(name)
            logger.setLevel(level)
            logger.handlers[:] = handlers
