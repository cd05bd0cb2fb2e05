"""Login, bootstrap and authenticated navigation against the mock WordPress."""
from dataclasses import replace

import pytest
from playwright.async_api import Error as PlaywrightError

from sydney_e2e import mock_wordpress
from sydney_e2e.auth_state import Credentials, read_auth_state
from sydney_e2e.errors import AuthenticationError, ConfigurationError, NavigationError
from sydney_e2e.login import (
    LOGIN_FORM,
    authenticate,
    is_logged_in,
    login,
    login_and_navigate_to_admin,
    login_to_customizer,
)
from sydney_e2e.mock_wordpress import AUTH_COOKIE, LOGIN_ATTEMPTS, MOCK_OPTIONS, MOCK_USERNAME
from sydney_e2e.playwright_client import PlaywrightClient

pytestmark = pytest.mark.asyncio


async def test_authenticate_logs_in_and_saves_state(page, site, run_settings, credentials):
    path = await authenticate(page, credentials, site, run_settings)

    assert path == run_settings.auth_state_path
    assert path.exists()
    state = read_auth_state(path)
    assert AUTH_COOKIE in state.cookie_names()
    assert LOGIN_ATTEMPTS == [MOCK_USERNAME]
    assert await is_logged_in(page)


async def test_authenticate_skips_form_when_already_logged_in(page, site, run_settings, credentials):
    await authenticate(page, credentials, site, run_settings)
    run_settings.auth_state_path.unlink()

    await authenticate(page, credentials, site, run_settings)

    assert LOGIN_ATTEMPTS == [MOCK_USERNAME]
    assert run_settings.auth_state_path.exists()
    assert not read_auth_state(run_settings.auth_state_path).is_empty


async def test_saved_state_restores_session(page, site, run_settings, credentials):
    path = await authenticate(page, credentials, site, run_settings)

    async with PlaywrightClient(headless=run_settings.headless, storage_state_path=str(path)) as fresh:
        await fresh.page.goto(site.admin(), wait_until="networkidle")

        assert await is_logged_in(fresh.page)
        assert not await fresh.page.locator(LOGIN_FORM).is_visible()

    assert LOGIN_ATTEMPTS == [MOCK_USERNAME]


async def test_wrong_password_reports_server_message(page, site, run_settings):
    bad = Credentials(username=MOCK_USERNAME, password="wrong")

    with pytest.raises(AuthenticationError) as excinfo:
        await authenticate(page, bad, site, run_settings)

    error = excinfo.value
    assert error.reason == "server_message"
    assert str(error).startswith("Authentication failed: ")
    assert f"The password you entered for the username {MOCK_USERNAME} is incorrect." in str(error)
    assert error.screenshot == run_settings.report_path("auth-failure.png")
    assert error.screenshot.exists()
    assert not run_settings.auth_state_path.exists()


async def test_unknown_user_reports_server_message(page, site, run_settings):
    with pytest.raises(AuthenticationError, match="is not registered on this site"):
        await authenticate(page, Credentials("nobody", "x"), site, run_settings)


async def test_failed_login_discards_previous_state(page, site, run_settings, credentials):
    await authenticate(page, credentials, site, run_settings)
    await page.context.clear_cookies()

    with pytest.raises(AuthenticationError):
        await authenticate(page, Credentials(MOCK_USERNAME, "wrong"), site, run_settings)

    assert not run_settings.auth_state_path.exists()


async def test_silent_rejection_reports_still_on_login_page(page, site, run_settings):
    MOCK_OPTIONS["suppress_login_errors"] = True

    with pytest.raises(AuthenticationError) as excinfo:
        await authenticate(page, Credentials(MOCK_USERNAME, "wrong"), site, run_settings)

    assert excinfo.value.reason == "still_on_login_page"
    assert str(excinfo.value) == "Authentication failed: Still on login page after submission"


async def test_unverified_login_reports_current_url(page, site, run_settings, credentials):
    MOCK_OPTIONS["post_login_redirect"] = "/maintenance"

    with pytest.raises(AuthenticationError) as excinfo:
        await authenticate(page, credentials, site, run_settings)

    assert excinfo.value.reason == "unverified"
    assert excinfo.value.url == site.url("maintenance")
    assert str(excinfo.value) == f"Authentication verification failed at {site.url('maintenance')}"


async def test_missing_login_form_is_navigation_error(page, site, run_settings, credentials):
    await page.goto(site.url("maintenance"))

    with pytest.raises(NavigationError) as excinfo:
        await login(page, credentials, run_settings)

    error = excinfo.value
    assert error.selector == LOGIN_FORM
    assert error.url == site.url("maintenance")
    assert "scheduled maintenance" in error.page_excerpt
    assert error.screenshot is not None and error.screenshot.exists()
    assert LOGIN_ATTEMPTS == []


async def test_page_excerpt_is_truncated(page, site, run_settings, credentials):
    await page.set_content("<main>" + "lorem ipsum " * 200 + "</main>")
    settings = replace(run_settings, form_timeout=0.2, excerpt_length=40)

    with pytest.raises(NavigationError) as excinfo:
        await login(page, credentials, settings)

    assert len(excinfo.value.page_excerpt) == 43
    assert excinfo.value.page_excerpt.endswith("...")


async def test_is_logged_in(page, site, run_settings, credentials):
    assert not await is_logged_in(page)

    await page.goto(site.url(""))
    assert not await is_logged_in(page)

    await authenticate(page, credentials, site, run_settings)
    await page.goto(site.url(""))
    assert await is_logged_in(page)


async def test_is_logged_in_treats_lookup_errors_as_logged_out():
    class BrokenLocator:
        @property
        def first(self):
            return self

        async def is_visible(self):
            raise PlaywrightError("Target page, context or browser has been closed")

    class BrokenPage:
        url = "about:blank"

        def locator(self, selector):
            return BrokenLocator()

    assert await is_logged_in(BrokenPage()) is False


async def test_login_and_navigate_to_admin_logs_in_once(page, site, run_settings, credentials):
    await login_and_navigate_to_admin(page, "plugins.php", credentials, site, run_settings)

    assert page.url == site.admin("plugins.php")
    assert await is_logged_in(page)

    await login_and_navigate_to_admin(page, "customize.php", credentials, site, run_settings)

    assert page.url == site.admin("customize.php")
    assert LOGIN_ATTEMPTS == [MOCK_USERNAME]


async def test_login_and_navigate_to_admin_root(page, site, run_settings, credentials):
    await login_and_navigate_to_admin(page, "", credentials, site, run_settings)

    assert page.url == site.admin()


async def test_login_and_navigate_reads_credentials_from_env(page, site, run_settings, monkeypatch):
    monkeypatch.setenv("E2E_TESTS_USER", MOCK_USERNAME)
    monkeypatch.setenv("E2E_TESTS_PASSWORD", mock_wordpress.MOCK_PASSWORD)

    await login_and_navigate_to_admin(page, "plugins.php", site=site, settings=run_settings)

    assert LOGIN_ATTEMPTS == [MOCK_USERNAME]


async def test_login_and_navigate_without_credentials(page, site, run_settings, monkeypatch):
    monkeypatch.delenv("E2E_TESTS_USER", raising=False)
    monkeypatch.delenv("E2E_TESTS_PASSWORD", raising=False)

    with pytest.raises(ConfigurationError):
        await login_and_navigate_to_admin(page, "plugins.php", site=site, settings=run_settings)

    assert LOGIN_ATTEMPTS == []


async def test_login_and_navigate_propagates_authentication_error(page, site, run_settings):
    with pytest.raises(AuthenticationError):
        await login_and_navigate_to_admin(page, "plugins.php", Credentials(MOCK_USERNAME, "wrong"), site, run_settings)


async def test_login_to_customizer(page, site, run_settings, credentials):
    await login_to_customizer(page, credentials, site, run_settings)

    assert page.url == site.admin("customize.php")
    assert await page.locator("#customize-controls").is_visible()
    assert await page.locator("#customize-preview").is_visible()
