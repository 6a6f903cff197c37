import logging

from investflow.core.logging.builder import make_dict_config, setup_logging
from investflow.core.logging.formatters import ColorFormatter, JsonFormatter
from investflow.tests.test_fixtures.logging_fixtures import make_log_settings


def test_make_dict_config_with_files(tmp_path):
    cfg = make_dict_config(make_log_settings(tmp_path))

    assert set(cfg["handlers"]) == {"console", "file", "error_file"}
    assert cfg["handlers"]["file"]["filename"] == str(tmp_path / "app.log")
    assert cfg["handlers"]["error_file"]["level"] == "ERROR"
    assert cfg["formatters"]["json"]["()"] is JsonFormatter
    assert cfg["loggers"][""]["level"] == "DEBUG"


def test_make_dict_config_stdout_uses_error_console(tmp_path):
    cfg = make_dict_config(make_log_settings(tmp_path, LOG_TO_STDOUT=True))

    assert set(cfg["handlers"]) == {"console", "error_console"}
    assert cfg["handlers"]["error_console"]["formatter"] == "json"


def test_text_format_uses_color_formatter(tmp_path):
    cfg = make_dict_config(make_log_settings(tmp_path, LOG_FORMAT="text"))

    assert cfg["formatters"]["standard"]["()"] is ColorFormatter
    assert cfg["handlers"]["console"]["formatter"] == "standard"


def test_sql_logging_toggle(tmp_path):
    quiet = make_dict_config(make_log_settings(tmp_path))
    loud = make_dict_config(make_log_settings(tmp_path, ENABLE_SQL_LOGGING=True))

    assert quiet["loggers"]["sqlalchemy.engine"]["level"] == "WARNING"
    assert loud["loggers"]["sqlalchemy.engine"]["level"] == "DEBUG"


def test_setup_logging_creates_log_dir(tmp_path, restore_logging):
    log_dir = tmp_path / "logs"
    assert not log_dir.exists()

    setup_logging(make_log_settings(log_dir))

    assert log_dir.exists()
    assert logging.getLogger().handlers
