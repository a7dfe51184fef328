"""Tests for configuration loading, backend selection and startup checks."""

import pytest

from printspool import config as config_module
from printspool.config import create_backend, get_server_config, load_config, resolve_backend_name, setup_spooler
from printspool.printers import CUPSSpooler, MockSpooler, Win32Spooler
from printspool.startup import check_dependencies, validate_config


class TestLoadConfig:
    def test_explicit_path(self, tmp_path):
        """An explicit path wins."""
        path = tmp_path / "custom.yaml"
        path.write_text("spooler:\n  backend: mock\n  max_workers: 2\n")
        assert load_config(str(path)) == {"spooler": {"backend": "mock", "max_workers": 2}}

    def test_env_path(self, tmp_path, monkeypatch):
        """CONFIG_FILE is used when no path is given."""
        path = tmp_path / "env.yaml"
        path.write_text("server:\n  port: 6000\n")
        monkeypatch.setenv("CONFIG_FILE", str(path))
        assert load_config()["server"]["port"] == 6000

    def test_empty_file(self, tmp_path):
        """An empty YAML file loads as an empty dict."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(str(path)) == {}


class TestBackendSelection:
    def test_explicit_name(self):
        assert resolve_backend_name("cups") == "cups"

    def test_auto_prefers_cups_off_windows(self, monkeypatch):
        monkeypatch.setattr("sys.platform", "linux")
        monkeypatch.setattr(config_module, "CUPS_AVAILABLE", True)
        assert resolve_backend_name("auto") == "cups"

    def test_auto_prefers_win32_on_windows(self, monkeypatch):
        monkeypatch.setattr("sys.platform", "win32")
        monkeypatch.setattr(config_module, "WIN32_AVAILABLE", True)
        assert resolve_backend_name("auto") == "win32"

    def test_auto_falls_back_to_mock(self, monkeypatch):
        """Without any spooler library auto picks the mock."""
        monkeypatch.setattr(config_module, "WIN32_AVAILABLE", False)
        monkeypatch.setattr(config_module, "CUPS_AVAILABLE", False)
        assert resolve_backend_name("auto") == "mock"

    @pytest.mark.parametrize("name,cls", [("win32", Win32Spooler), ("cups", CUPSSpooler), ("mock", MockSpooler)])
    def test_create_backend(self, name, cls):
        assert isinstance(create_backend({"backend": name}), cls)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_backend({"backend": "lpd"})

    def test_document_name_passed_through(self):
        backend = create_backend({"backend": "mock", "document_name": "Invoices"})
        assert backend.document_name == "Invoices"

    def test_setup_spooler(self):
        """The facade is built with the configured pool size and mock printers."""
        spooler = setup_spooler({
            "spooler": {
                "backend": "mock",
                "max_workers": 3,
                "mock_printers": [{"name": "A"}],
                "mock_default": "A",
            }
        })
        try:
            assert spooler.max_workers == 3
            assert spooler.backend.get_default().name == "A"
        finally:
            spooler.close()


class TestServerConfig:
    def test_defaults(self):
        assert get_server_config({}) == {
            "host": "0.0.0.0",
            "port": 5002,
            "debug": False,
            "cors_origins": None,
        }


class TestValidateConfig:
    def test_valid(self):
        assert validate_config({"server": {"port": 5002}, "spooler": {"backend": "auto"}}) == []

    def test_invalid_port(self):
        issues = validate_config({"server": {"port": 70000}})
        assert any(issue.startswith("Invalid port") for issue in issues)

    def test_unknown_backend(self):
        issues = validate_config({"spooler": {"backend": "lpd"}})
        assert any(issue.startswith("Unknown spooler backend") for issue in issues)

    def test_bad_max_workers(self):
        issues = validate_config({"spooler": {"max_workers": 0}})
        assert any(issue.startswith("Invalid max_workers") for issue in issues)

    def test_mock_default_must_exist(self):
        issues = validate_config({
            "spooler": {"backend": "mock", "mock_printers": [{"name": "A"}], "mock_default": "B"}
        })
        assert issues == ["Mock default 'B' is not one of the mock printers."]

    def test_dependency_report_keys(self):
        assert set(check_dependencies()) == {"pywin32", "pycups"}

    def test_empty_mock_printers_key(self):
        """A present but empty mock_printers key is treated as no printers."""
        assert validate_config({"spooler": {"backend": "mock", "mock_printers": None}}) == []
