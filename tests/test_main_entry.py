"""
Tests for the command line entry point.
"""

import logging
from unittest.mock import patch

import pytest

from beancontext import main


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


@pytest.fixture
def app_files(beans_yaml, write_file):
    write_file("app.properties", "app.name = demo\napp.mode = file\n")
    return beans_yaml


def _run(argv):
    return main.main(argv)


class TestMainModule:
    def test_get_property(self, app_files, capsys):
        code = _run(["--config", str(app_files), "--properties", "app.properties", "get", "app.name"])
        assert code == main.EXIT_OK
        assert capsys.readouterr().out == "demo\n"

    def test_get_missing_property(self, app_files, capsys):
        code = _run(["--config", str(app_files), "get", "no.such.key"])
        assert code == main.EXIT_NOT_FOUND
        assert "property not found" in capsys.readouterr().err

    def test_get_with_default(self, app_files, capsys):
        code = _run(["--config", str(app_files), "get", "no.such.key", "--default", "x"])
        assert code == main.EXIT_OK
        assert capsys.readouterr().out == "x\n"

    def test_keys(self, app_files, capsys, monkeypatch):
        monkeypatch.setenv("FROM_ENV", "1")
        code = _run(["--config", str(app_files), "--properties", "app.properties", "keys"])
        lines = capsys.readouterr().out.splitlines()
        assert code == main.EXIT_OK
        assert {"app.name", "app.mode", "FROM_ENV"} <= set(lines)
        assert lines == sorted(lines)

    def test_contains(self, app_files, capsys):
        assert _run(["--config", str(app_files), "contains", "service"]) == main.EXIT_OK
        assert _run(["--config", str(app_files), "contains", "nope"]) == main.EXIT_NOT_FOUND
        assert capsys.readouterr().out == "true\nfalse\n"

    def test_bean(self, app_files, capsys):
        assert _run(["--config", str(app_files), "bean", "timeout"]) == main.EXIT_OK
        assert capsys.readouterr().out == "datetime.timedelta(seconds=30)\n"

    def test_bean_missing(self, app_files, capsys):
        assert _run(["--config", str(app_files), "bean", "nope"]) == main.EXIT_NOT_FOUND
        assert "bean not found" in capsys.readouterr().err

    def test_configuration_error(self, tmp_path, capsys):
        code = _run(["--config", str(tmp_path / "missing.yaml"), "contains", "x"])
        assert code == main.EXIT_CONFIG_ERROR
        assert "configuration error" in capsys.readouterr().err

    def test_settings_from_environment(self, app_files, capsys, monkeypatch):
        monkeypatch.setenv("BCTX_CONFIG_LOCATION", str(app_files))
        monkeypatch.setenv("BCTX_PROPERTY_LOCATIONS", "app.properties")
        assert _run(["get", "app.mode"]) == main.EXIT_OK
        assert capsys.readouterr().out == "file\n"

    def test_arguments_override_settings(self, app_files, monkeypatch):
        monkeypatch.setenv("BCTX_CONFIG_LOCATION", "/ignored/beans.yaml")
        with patch("beancontext.main.ContainerContext") as mock_context:
            mock_context.return_value.get_property.return_value = "v"
            _run(["--config", str(app_files), "--properties", "a", "--properties", "b", "get", "k"])
        mock_context.assert_called_once_with(str(app_files), ["a", "b"])

    def test_log_level_is_case_insensitive(self, app_files):
        assert _run(["--log-level", "debug", "--config", str(app_files), "keys"]) == main.EXIT_OK
        assert logging.getLogger().level == logging.DEBUG

    def test_unknown_log_level_is_a_usage_error(self, app_files, capsys):
        with pytest.raises(SystemExit) as exc_info:
            _run(["--log-level", "chatty", "--config", str(app_files), "keys"])
        assert exc_info.value.code == 2
        assert "invalid choice" in capsys.readouterr().err

    def test_command_required(self):
        with pytest.raises(SystemExit):
            _run([])

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            _run(["--version"])
        assert exc_info.value.code == 0
        assert "beancontext" in capsys.readouterr().out
