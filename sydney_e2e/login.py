"""WordPress login flows shared by the bootstrap and the admin specs."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn, Optional

from playwright.async_api import Error as PlaywrightError, Page

from sydney_e2e.auth_state import Credentials, clear_auth_state, save_auth_state
from sydney_e2e.config import SITE_CONFIG, RunSettings, SiteConfig
from sydney_e2e.errors import AuthenticationError, NavigationError
from sydney_e2e.waits import wait_for_visible

logger = logging.getLogger(__name__)

LOGIN_FORM = "#loginform"
USERNAME_FIELD = "#user_login"
PASSWORD_FIELD = "#user_pass"
SUBMIT_BUTTON = "#wp-submit"
# Only rendered for a logged-in viewer
LOGGED_IN_MARKER = "#wpadminbar, .wp-admin, #adminmenu"
LOGIN_MESSAGE = ".login .message, #login_error"

DEFAULT_SETTINGS = RunSettings()


async def is_logged_in(page: Page) -> bool:
    """True if the logged-in marker is currently visible.

    Lookup failures (detached frame, navigation in flight) count as logged out.
    """
    try:
        return await page.locator(LOGGED_IN_MARKER).first.is_visible()
    except PlaywrightError as exc:
        logger.debug("Logged-in check failed on %s: %s", page.url, exc)
        return False


async def _screenshot(page: Page, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    await page.screenshot(path=str(path), full_page=True)
    logger.info("Saved diagnostic screenshot: %s", path)
    return path


async def _page_excerpt(page: Page, length: int) -> str:
    text = await page.inner_text("body")
    text = " ".join(text.split())
    if len(text) > length:
        return text[:length] + "..."
    return text


async def _raise_login_failure(page: Page, settings: RunSettings) -> NoReturn:
    current_url = page.url
    logger.error("Authentication failed. Current URL: %s", current_url)
    screenshot = await _screenshot(page, settings.report_path("auth-failure.png"))

    message = page.locator(LOGIN_MESSAGE).first
    if await message.is_visible():
        text = " ".join((await message.text_content() or "").split())
        raise AuthenticationError(
            reason="server_message",
            message=f"Authentication failed: {text}",
            url=current_url,
            screenshot=screenshot,
        )

    if await page.locator(LOGIN_FORM).first.is_visible():
        raise AuthenticationError(
            reason="still_on_login_page",
            message="Authentication failed: Still on login page after submission",
            url=current_url,
            screenshot=screenshot,
        )

    raise AuthenticationError(
        reason="unverified",
        message=f"Authentication verification failed at {current_url}",
        url=current_url,
        screenshot=screenshot,
    )


async def login(page: Page, credentials: Credentials, settings: RunSettings = DEFAULT_SETTINGS) -> None:
    """Submit the login form on the current page and verify the result.

    Raises:
        NavigationError: the login form never became visible.
        AuthenticationError: the form was submitted but no logged-in marker appeared.
    """
    form = await wait_for_visible(page, LOGIN_FORM, timeout=settings.form_timeout)
    if not form:
        screenshot = await _screenshot(page, settings.report_path("login-form-missing.png"))
        raise NavigationError(
            selector=LOGIN_FORM,
            url=page.url,
            message=f"Login form not visible after {settings.form_timeout:g}s",
            screenshot=screenshot,
            page_excerpt=await _page_excerpt(page, settings.excerpt_length),
        )

    await page.fill(USERNAME_FIELD, credentials.username)
    await page.fill(PASSWORD_FIELD, credentials.password)
    await page.click(SUBMIT_BUTTON)
    await page.wait_for_load_state("networkidle")

    marker = await wait_for_visible(page, LOGGED_IN_MARKER, timeout=settings.marker_timeout)
    if not marker:
        await _raise_login_failure(page, settings)

    logger.info("Logged in as %s (%.1fs)", credentials.username, marker.elapsed)


async def authenticate(
    page: Page,
    credentials: Credentials,
    site: SiteConfig = SITE_CONFIG,
    settings: RunSettings = DEFAULT_SETTINGS,
) -> Path:
    """Reach a logged-in admin page and persist the session state.

    An already valid session (cookies restored, or a redirect straight into
    wp-admin) skips the form entirely. Any artifact from an earlier run is
    removed first, so a failed login never leaves a stale session behind.

    Returns:
        Path to the saved session-state file
    """
    target = site.admin()
    logger.info("Setting up authentication for user: %s", credentials.username)
    logger.info("Target URL: %s", target)

    clear_auth_state(settings.auth_state_path)
    await page.goto(target, wait_until="networkidle")

    if await is_logged_in(page):
        logger.info("Existing session detected at %s, skipping login form", page.url)
    else:
        await login(page, credentials, settings)

    return await save_auth_state(page.context, settings.auth_state_path)


async def login_and_navigate_to_admin(
    page: Page,
    path: str = "",
    credentials: Optional[Credentials] = None,
    site: SiteConfig = SITE_CONFIG,
    settings: RunSettings = DEFAULT_SETTINGS,
) -> Page:
    """Make sure ``page`` is logged in, then open ``wp-admin/<path>``.

    Credentials are only needed (and read from the environment when not given)
    if the session turns out to be logged out.
    """
    if not await is_logged_in(page):
        await page.goto(site.admin(), wait_until="networkidle")
        if not await is_logged_in(page):
            await login(page, credentials or Credentials.from_env(), settings)

    await page.goto(site.admin(path), wait_until="networkidle")
    return page


async def login_to_customizer(
    page: Page,
    credentials: Optional[Credentials] = None,
    site: SiteConfig = SITE_CONFIG,
    settings: RunSettings = DEFAULT_SETTINGS,
) -> Page:
    """Open the theme customizer as a logged-in admin."""
    return await login_and_navigate_to_admin(page, "customize.php", credentials, site, settings)
