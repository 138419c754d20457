"""
Pytest configuration and fixtures for Portfolio Panel tests
"""

import os
import sys
import asyncio
import tempfile
import shutil
from pathlib import Path
import pytest

# Add parent directory to path to import modules
parent_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if parent_dir not in sys.path:
    sys.path.insert(0, parent_dir)


CONFIG_ENV_VARS = (
    "PORTFOLIO_ENV",
    "DEBUG",
    "LOG_LEVEL",
    "STORE_BACKEND",
    "STORE_URL",
    "STORE_COLLECTION",
    "LOCAL_STORAGE_PATH",
    "ITEMS_PER_PAGE",
    "HOST",
    "PORT",
    "SECRET_KEY",
)


@pytest.fixture
def temp_directory():
    """Create a temporary directory for tests"""
    temp_dir = tempfile.mkdtemp(prefix="portfolio_test_")
    yield Path(temp_dir)
    # Cleanup
    if os.path.exists(temp_dir):
        shutil.rmtree(temp_dir)


@pytest.fixture(autouse=True)
def test_config(monkeypatch, tmp_path):
    """Fresh global configuration, isolated from the host environment"""
    from config.config import initialize_config

    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PORTFOLIO_ENV", "testing")
    monkeypatch.setenv("LOCAL_STORAGE_PATH", str(tmp_path / "local_storage.json"))

    # Empty config dir so no user_settings.json is picked up
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    config = initialize_config(config_dir).get_config()

    # Mutations on a store that never opens fail quickly
    config.store.ready_timeout = 0.1
    return config


@pytest.fixture
def notifications():
    """A private notification buffer"""
    from models.notification_buffer import NotificationBuffer

    return NotificationBuffer()


@pytest.fixture
def local_backend(temp_directory):
    """Local storage backend writing into the temp directory"""
    from services.store_backends import LocalStorageBackend

    return LocalStorageBackend(str(temp_directory / "local_storage.json"))


@pytest.fixture
def store(local_backend, notifications):
    """ProjectStore over the local backend, not yet initialized"""
    from services.project_store import ProjectStore

    return ProjectStore(local_backend, notifications)


@pytest.fixture
def project_data():
    """Factory for store fields of a project"""

    def factory(title="Sample Project", category="web", **overrides):
        data = {
            "title": title,
            "category": category,
            "description": f"Description of {title}",
            "image": "https://example.com/image.png",
            "link": None,
        }
        data.update(overrides)
        return data

    return factory


@pytest.fixture
def seed_projects(local_backend, project_data):
    """Write projects straight into the backend; returns them newest first"""

    def seeder(count, category="web", prefix="P"):
        for index in range(1, count + 1):
            local_backend.add_project(
                project_data(f"{prefix}{index:02d}", category=category)
            )
        return local_backend.list_projects()

    return seeder


@pytest.fixture
def sample_project():
    """Create a sample Project instance"""
    from models.project import Project

    return Project(
        id="abc123",
        title="SAMPLE PROJECT",
        category="web",
        description="A sample portfolio entry",
        image="https://example.com/sample.png",
        link="https://example.com",
        created_at="2024-01-01T12:00:00.000Z",
        updated_at="2024-01-01T12:00:00.000Z",
    )


@pytest.fixture
def site(test_config, local_backend, notifications):
    """PortfolioSite over the local backend with its Flask app"""
    from portfolio_site import PortfolioSite

    return PortfolioSite(test_config, backend=local_backend, notifications=notifications)


@pytest.fixture
def client(site):
    """Flask test client of an initialized site"""
    from utils.async_utils import run_sync

    run_sync(site.initialize())
    site.app.config["TESTING"] = True
    with site.app.test_client() as test_client:
        yield test_client


# Test markers
def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")


# Logging configuration for tests
@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests"""
    import logging

    # Set log level for tests
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# Cleanup helpers
@pytest.fixture(autouse=True)
def cleanup_async_resources():
    """Ensure async resources are cleaned up after each test"""
    yield

    # Force cleanup of any remaining async tasks
    try:
        loop = asyncio.get_running_loop()
        pending = asyncio.all_tasks(loop)
        for task in pending:
            task.cancel()
    except RuntimeError:
        pass  # No loop running
