"""Fixtures for the live specs under ``sydney_e2e/tests``.

Two kinds of browser context are offered, mirroring the runner's projects:
- ``page``: anonymous visitor
- ``admin_page``: starts from the session saved by the bootstrap

``auth_state`` runs the bootstrap once per session. If it fails, every test
that asks for ``admin_page`` errors instead of running without a session.
"""
import asyncio
from pathlib import Path

import pytest
import pytest_asyncio

from sydney_e2e.bootstrap import run_bootstrap
from sydney_e2e.config import VIEWPORTS, RunSettings, SiteConfig, load_settings, load_site
from sydney_e2e.playwright_client import PlaywrightClient

settings = load_settings()


@pytest.fixture(scope="session")
def run_settings() -> RunSettings:
    return settings


@pytest.fixture(scope="session")
def site() -> SiteConfig:
    return load_site()


@pytest.fixture(scope="session")
def auth_state(run_settings, site) -> Path:
    """Log in once and return the saved session-state path."""
    return asyncio.run(run_bootstrap(site, run_settings))


@pytest_asyncio.fixture()
async def playwright_client(run_settings):
    """Anonymous browser client."""
    async with PlaywrightClient(
        browser_type=run_settings.browser_type,
        headless=run_settings.headless,
        timeout=run_settings.default_timeout_ms,
        viewport=VIEWPORTS["DESKTOP"].as_dict(),
    ) as client:
        yield client


@pytest_asyncio.fixture()
async def page(playwright_client):
    return playwright_client.page


@pytest_asyncio.fixture()
async def admin_client(run_settings, auth_state):
    """Browser client restored from the bootstrap's session state."""
    async with PlaywrightClient(
        browser_type=run_settings.browser_type,
        headless=run_settings.headless,
        timeout=run_settings.default_timeout_ms,
        storage_state_path=str(auth_state),
        viewport=VIEWPORTS["DESKTOP"].as_dict(),
    ) as client:
        yield client


@pytest_asyncio.fixture()
async def admin_page(admin_client):
    return admin_client.page
