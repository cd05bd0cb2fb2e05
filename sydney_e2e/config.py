"""Shared configuration for the Sydney theme end-to-end suite.

Two layers:
- ``SiteConfig``: the fixed demo deployment (base URL, admin URL, REST endpoints).
- ``RunSettings``: runtime knobs read from the environment once per process
  (headless mode, where the session-state artifact and diagnostics go, timeouts).

Both are immutable and passed explicitly to every helper.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional
from urllib.parse import urljoin

from sydney_e2e.errors import ConfigurationError


@dataclass(frozen=True)
class SiteConfig:
    """URLs of one WordPress deployment under test."""

    base_url: str
    admin_url: str
    wp_json_url: str
    customizer_api_url: str
    theme_name: str = "sydney"

    @classmethod
    def from_base_url(cls, base_url: str, theme_name: str = "sydney") -> "SiteConfig":
        base = base_url.rstrip("/") + "/"
        wp_json_url = f"{base}wp-json/wp/v2"
        return cls(
            base_url=base,
            admin_url=f"{base}wp-admin",
            wp_json_url=wp_json_url,
            customizer_api_url=f"{wp_json_url}/customizer/settings",
            theme_name=theme_name,
        )

    def url(self, path: str = "") -> str:
        """Return an absolute frontend URL for the provided path."""
        return urljoin(self.base_url, path.lstrip("/"))

    def admin(self, path: str = "") -> str:
        """Return an absolute wp-admin URL; an empty path means the admin root."""
        return urljoin(self.admin_url.rstrip("/") + "/", path.lstrip("/"))


SITE_CONFIG = SiteConfig.from_base_url("https://demo.athemes.com/sydney-tests/")


def load_site(environ: Optional[Mapping[str, str]] = None) -> SiteConfig:
    """The demo deployment, or the site at ``E2E_BASE_URL`` when that is set."""
    env = os.environ if environ is None else environ
    base_url = env.get("E2E_BASE_URL")
    if not base_url:
        return SITE_CONFIG
    return SiteConfig.from_base_url(base_url)


@dataclass(frozen=True)
class Viewport:
    width: int
    height: int

    def as_dict(self) -> Dict[str, int]:
        return {"width": self.width, "height": self.height}


VIEWPORTS: Dict[str, Viewport] = {
    "MOBILE": Viewport(375, 667),
    "TABLET": Viewport(768, 1024),
    "DESKTOP": Viewport(1920, 1080),
    "LARGE_DESKTOP": Viewport(2560, 1440),
}

# Relative to the working directory the suite is launched from
DEFAULT_AUTH_STATE_PATH = Path("playwright") / ".auth" / "user.json"
DEFAULT_REPORT_DIR = Path("playwright-report")


@dataclass(frozen=True)
class RunSettings:
    """Per-run browser and diagnostics settings."""

    headless: bool = True
    browser_type: str = "chromium"
    auth_state_path: Path = DEFAULT_AUTH_STATE_PATH
    report_dir: Path = DEFAULT_REPORT_DIR
    default_timeout_ms: int = 30000
    # Seconds
    marker_timeout: float = 10.0
    form_timeout: float = 10.0
    excerpt_length: int = 500

    def report_path(self, name: str) -> Path:
        return self.report_dir / name


def _env_flag(value: Optional[str], default: bool) -> bool:
    if value is None or value == "":
        return default
    return value.lower() in {"true", "1", "yes"}


def load_settings(environ: Optional[Mapping[str, str]] = None) -> RunSettings:
    """Build ``RunSettings`` from environment variables.

    Recognised variables:
        PLAYWRIGHT_HEADLESS: "true"/"false" (default true)
        PLAYWRIGHT_BROWSER: chromium, firefox or webkit (default chromium)
        E2E_AUTH_STATE: session-state artifact path
        E2E_REPORT_DIR: directory for diagnostic screenshots
        E2E_TIMEOUT_MS: default Playwright timeout in milliseconds
    """
    env = os.environ if environ is None else environ

    timeout_str = env.get("E2E_TIMEOUT_MS") or str(RunSettings.default_timeout_ms)
    try:
        default_timeout_ms = int(timeout_str)
    except ValueError:
        raise ConfigurationError(f"E2E_TIMEOUT_MS must be an integer, got {timeout_str!r}")
    if default_timeout_ms <= 0:
        raise ConfigurationError(f"E2E_TIMEOUT_MS must be positive, got {default_timeout_ms}")

    return RunSettings(
        headless=_env_flag(env.get("PLAYWRIGHT_HEADLESS"), True),
        browser_type=env.get("PLAYWRIGHT_BROWSER") or "chromium",
        auth_state_path=Path(env.get("E2E_AUTH_STATE") or DEFAULT_AUTH_STATE_PATH),
        report_dir=Path(env.get("E2E_REPORT_DIR") or DEFAULT_REPORT_DIR),
        default_timeout_ms=default_timeout_ms,
    )
