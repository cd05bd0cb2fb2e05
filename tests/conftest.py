"""Fixtures for the helper tests: a mock WordPress on a background thread and
a fresh Playwright browser per test."""
from dataclasses import replace

import pytest
import pytest_asyncio

from sydney_e2e.auth_state import Credentials
from sydney_e2e.config import RunSettings, SiteConfig, load_settings
from sydney_e2e.login import login_and_navigate_to_admin
from sydney_e2e.mock_wordpress import (
    MOCK_PASSWORD,
    MOCK_USERNAME,
    MockWordPressServer,
    reset_mock_state,
)
from sydney_e2e.playwright_client import PlaywrightClient


@pytest.fixture(scope='session')
def mock_wordpress_server():
    """Mock WordPress shared by the whole session; state is reset per test."""
    server = MockWordPressServer()
    server.start()
    yield server
    server.stop()


@pytest.fixture(autouse=True)
def clean_mock_state():
    reset_mock_state()
    yield
    reset_mock_state()


@pytest.fixture
def site(mock_wordpress_server) -> SiteConfig:
    return SiteConfig.from_base_url(mock_wordpress_server.base_url)


@pytest.fixture
def run_settings(tmp_path) -> RunSettings:
    """Short waits and per-test artifact locations."""
    return replace(
        load_settings(),
        auth_state_path=tmp_path / "playwright" / ".auth" / "user.json",
        report_dir=tmp_path / "playwright-report",
        default_timeout_ms=10000,
        marker_timeout=2.0,
        form_timeout=2.0,
    )


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(username=MOCK_USERNAME, password=MOCK_PASSWORD)


@pytest_asyncio.fixture()
async def playwright_client(run_settings):
    async with PlaywrightClient(
        browser_type=run_settings.browser_type,
        headless=run_settings.headless,
        timeout=run_settings.default_timeout_ms,
    ) as client:
        yield client


@pytest_asyncio.fixture()
async def page(playwright_client):
    return playwright_client.page


@pytest_asyncio.fixture()
async def admin_page(page, site, run_settings, credentials):
    """Logged-in page sitting on the wp-admin dashboard."""
    await login_and_navigate_to_admin(page, "", credentials, site, run_settings)
    return page
