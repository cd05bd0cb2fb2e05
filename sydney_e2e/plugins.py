"""Activate or deactivate plugins from the wp-admin plugin listing.

Both helpers are idempotent: they read the row's available actions first and
only click when the plugin is not already in the requested state. In the
listing an active plugin offers "Deactivate" and an inactive one offers "Delete".
"""
from __future__ import annotations

import logging
from typing import Dict, Tuple

from playwright.async_api import Page

from sydney_e2e.config import SITE_CONFIG, SiteConfig

logger = logging.getLogger(__name__)

PLUGINS_PATH = "plugins.php"

# Extra dialogs some plugins open on deactivation, clicked in order.
# elementor asks for deactivation feedback; the skip button submits without it.
DEACTIVATION_CONFIRMATIONS: Dict[str, Tuple[str, ...]] = {
    "elementor": (".dialog-lightbox-skip",),
}


def plugin_action(slug: str, action: str) -> str:
    """Selector for the ``action`` link ("activate", "deactivate", "delete") of a plugin row."""
    return f'tr[data-slug="{slug}"] .{action} a'


async def open_plugins_page(page: Page, site: SiteConfig = SITE_CONFIG) -> None:
    await page.goto(site.admin(PLUGINS_PATH))


async def activate_plugin(slug: str, page: Page, site: SiteConfig = SITE_CONFIG) -> None:
    """Ensure the plugin ``slug`` is active."""
    await open_plugins_page(page, site)

    if await page.query_selector(plugin_action(slug, "deactivate")):
        logger.debug("Plugin %s already active", slug)
        return

    await page.click(plugin_action(slug, "activate"))
    await page.wait_for_selector(plugin_action(slug, "deactivate"))
    logger.info("Activated plugin %s", slug)


async def deactivate_plugin(slug: str, page: Page, site: SiteConfig = SITE_CONFIG) -> None:
    """Ensure the plugin ``slug`` is inactive."""
    await open_plugins_page(page, site)

    if await page.query_selector(plugin_action(slug, "delete")):
        logger.debug("Plugin %s already inactive", slug)
        return

    await page.click(plugin_action(slug, "deactivate"))
    for selector in DEACTIVATION_CONFIRMATIONS.get(slug, ()):
        await page.click(selector)
    await page.wait_for_selector(plugin_action(slug, "delete"))
    logger.info("Deactivated plugin %s", slug)
