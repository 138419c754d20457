"""
Tests for the application entry point and service wiring
"""

import os
import sys
import pytest
from unittest.mock import patch

# Add parent directory to path
parent_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if parent_dir not in sys.path:
    sys.path.insert(0, parent_dir)

import portfolio_site
from portfolio_site import PortfolioSite, main, parse_args
from utils.async_utils import run_sync


class TestParseArgs:
    def test_defaults(self):
        args = parse_args([])
        assert args.host is None
        assert args.port is None
        assert args.backend is None
        assert args.debug is False

    def test_options(self):
        args = parse_args(
            ["--host", "127.0.0.1", "--port", "8000", "--backend", "remote",
             "--store-url", "http://store.local", "--debug"]
        )
        assert args.port == 8000
        assert args.backend == "remote"
        assert args.store_url == "http://store.local"
        assert args.debug is True

    def test_unknown_backend(self):
        with pytest.raises(SystemExit):
            parse_args(["--backend", "sqlite"])


class TestPortfolioSite:
    """Test service wiring"""

    def test_services_share_store(self, site):
        assert site.renderer.store is site.store
        assert site.form_controller.store is site.store
        assert site.tracker.sections == ["latest", "all", "experimental"]
        assert site.app is site.web.app

    def test_initialize(self, site, seed_projects):
        seed_projects(2)

        result = run_sync(site.initialize())

        assert result.is_success
        assert site.store.count() == 2

    def test_initialize_failure_is_not_fatal(self, site, local_backend):
        local_backend.storage_path.write_text("{broken")

        result = run_sync(site.initialize())

        assert result.is_error
        assert site.store.count() == 0

    def test_start_runs_web_server(self, site):
        with patch.object(site.web, "run") as run, patch.object(
            portfolio_site, "shutdown_all"
        ) as shutdown:
            site.start(host="127.0.0.1", port=8001)

        run.assert_called_once_with(host="127.0.0.1", port=8001, debug=False)
        shutdown.assert_called_once()
        assert site.store.is_ready


def test_main_applies_command_line(monkeypatch, tmp_path):
    monkeypatch.setenv("STORE_BACKEND", "local")
    monkeypatch.setenv("LOCAL_STORAGE_PATH", str(tmp_path / "storage.json"))

    with patch.object(PortfolioSite, "start") as start:
        assert main(["--port", "9000", "--backend", "local"]) == 0

    start.assert_called_once_with(host=None, port=9000, debug=None)
    assert os.environ["STORE_BACKEND"] == "local"
