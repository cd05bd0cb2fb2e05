"""One-time authentication bootstrap.

Logs into wp-admin once and saves the session state so every later browser
context can start authenticated. Run it before the suite:

    sydney-e2e-auth                       # or: python -m sydney_e2e.bootstrap
    sydney-e2e-auth --state-path /tmp/user.json --headed

Under pytest the session-scoped ``auth_state`` fixture calls ``run_bootstrap``
before the first test that needs a logged-in context.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from sydney_e2e.auth_state import Credentials
from sydney_e2e.config import SITE_CONFIG, RunSettings, SiteConfig, load_settings, load_site
from sydney_e2e.errors import ConfigurationError, E2ESetupError
from sydney_e2e.login import authenticate
from sydney_e2e.playwright_client import PlaywrightClient

logger = logging.getLogger(__name__)


async def run_bootstrap(
    site: SiteConfig = SITE_CONFIG,
    settings: Optional[RunSettings] = None,
    credentials: Optional[Credentials] = None,
) -> Path:
    """Authenticate a fresh browser and persist its session state.

    Credentials are resolved before the browser starts, so a missing
    ``E2E_TESTS_USER`` / ``E2E_TESTS_PASSWORD`` fails without any navigation.

    Returns:
        Path to the saved session-state file
    """
    settings = settings or load_settings()
    credentials = credentials or Credentials.from_env()

    async with PlaywrightClient(
        browser_type=settings.browser_type,
        headless=settings.headless,
        timeout=settings.default_timeout_ms,
    ) as client:
        return await authenticate(client.page, credentials, site, settings)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Log into wp-admin and save the session state.")
    parser.add_argument(
        "--base-url",
        default=load_site().base_url,
        help="Site root (default: E2E_BASE_URL or %(default)s)",
    )
    parser.add_argument(
        "--state-path",
        type=Path,
        default=None,
        help="Where to write the session state (default: E2E_AUTH_STATE or playwright/.auth/user.json)",
    )
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    try:
        settings = load_settings()
        if args.state_path:
            settings = replace(settings, auth_state_path=args.state_path)
        if args.headed:
            settings = replace(settings, headless=False)
        site = SiteConfig.from_base_url(args.base_url)

        path = asyncio.run(run_bootstrap(site, settings))
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return 2
    except E2ESetupError as exc:
        logger.error("%s", exc)
        return 1

    logger.info("Authentication state saved to %s", path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
