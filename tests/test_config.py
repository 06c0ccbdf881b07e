"""Tests for the configuration module."""

import pytest

from logrotate.config import Config, load_config, load_yaml


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("LOGROTATE_THRESHOLD_KB", "LOGROTATE_TEE",
                 "LOGROTATE_LOG_LEVEL", "LOGROTATE_CONFIG"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    cfg = load_config(["app.log"])
    assert cfg == Config(filename="app.log")
    assert cfg.threshold_kb == 5000
    assert cfg.tee is False
    assert cfg.log_level == "INFO"


def test_short_flags():
    cfg = load_config(["-t", "-c", "10", "app.log"])
    assert cfg.tee is True
    assert cfg.threshold_kb == 10


def test_long_flags():
    cfg = load_config(["--tee", "--threshold-kb", "20", "--log-level", "debug", "out.log"])
    assert cfg.tee is True
    assert cfg.threshold_kb == 20
    assert cfg.log_level == "DEBUG"


def test_missing_filename_is_usage_error(capsys):
    with pytest.raises(SystemExit) as exc_info:
        load_config([])
    assert exc_info.value.code != 0
    assert "usage" in capsys.readouterr().err.lower()


def test_env_overrides_defaults(monkeypatch):
    monkeypatch.setenv("LOGROTATE_THRESHOLD_KB", "42")
    monkeypatch.setenv("LOGROTATE_TEE", "yes")
    monkeypatch.setenv("LOGROTATE_LOG_LEVEL", "warning")

    cfg = load_config(["app.log"])
    assert cfg.threshold_kb == 42
    assert cfg.tee is True
    assert cfg.log_level == "WARNING"


def test_cli_overrides_env(monkeypatch):
    monkeypatch.setenv("LOGROTATE_THRESHOLD_KB", "42")
    cfg = load_config(["-c", "7", "app.log"])
    assert cfg.threshold_kb == 7


def test_yaml_file(tmp_path):
    path = tmp_path / "logrotate.yml"
    path.write_text("threshold_kb: 123\ntee: true\nlog_level: error\n")

    cfg = load_config(["--config", str(path), "app.log"])
    assert cfg.threshold_kb == 123
    assert cfg.tee is True
    assert cfg.log_level == "ERROR"


def test_env_overrides_yaml(tmp_path, monkeypatch):
    path = tmp_path / "logrotate.yml"
    path.write_text("threshold_kb: 123\n")
    monkeypatch.setenv("LOGROTATE_CONFIG", str(path))
    monkeypatch.setenv("LOGROTATE_THRESHOLD_KB", "9")

    cfg = load_config(["app.log"])
    assert cfg.threshold_kb == 9


def test_empty_yaml_file(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("")
    assert load_yaml(str(path)) == {}


def test_yaml_must_be_mapping(tmp_path):
    path = tmp_path / "list.yml"
    path.write_text("- 1\n- 2\n")
    with pytest.raises(ValueError):
        load_yaml(str(path))


@pytest.mark.parametrize("value", ["0", "-5", "abc"])
def test_invalid_threshold(monkeypatch, value):
    monkeypatch.setenv("LOGROTATE_THRESHOLD_KB", value)
    with pytest.raises(ValueError):
        load_config(["app.log"])


def test_config_is_frozen():
    cfg = Config(filename="app.log")
    with pytest.raises(AttributeError):
        cfg.threshold_kb = 1


@pytest.mark.parametrize("value", ["true", "1.9"])
def test_yaml_threshold_must_be_whole_number(tmp_path, value):
    path = tmp_path / "logrotate.yml"
    path.write_text(f"threshold_kb: {value}\n")
    with pytest.raises(ValueError):
        load_config(["--config", str(path), "app.log"])
